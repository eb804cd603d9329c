import pytest
from PIL import Image

QtCore = pytest.importorskip("PySide6.QtCore")

from printpack.models.settings import ProcessingSettings, WatermarkSpec
from printpack.models.specs import CropRatioSpec, SizeSpec
from printpack.workers import batch_worker
from printpack.workers.batch_worker import BatchWorker


@pytest.fixture(scope="module")
def qapp():
    app = QtCore.QCoreApplication.instance() or QtCore.QCoreApplication([])
    yield app


CATALOG = (CropRatioSpec("Square", 1.0, (SizeSpec("1x1", 1, 1), SizeSpec("2x2", 2, 2))),)


def _worker(monkeypatch):
    real = batch_worker.generate_batch
    monkeypatch.setattr(batch_worker, "generate_batch",
                        lambda *a, **kw: real(*a, catalog=CATALOG, **kw))
    return BatchWorker(Image.new("RGB", (200, 200), (50, 50, 50)),
                       WatermarkSpec(text="W"), ProcessingSettings(default_dpi=72), pause=0)


def test_worker_relays_progress_and_results(qapp, monkeypatch):
    w = _worker(monkeypatch)
    progress, finished = [], []
    w.progress.connect(lambda cur, total, task, complete: progress.append((cur, total, complete)))
    w.all_done.connect(finished.append)

    w.run()  # synchronous: same thread, direct signal delivery

    assert progress[0] == (0, 2, False)
    assert progress[-1] == (2, 2, True)
    assert len(finished) == 1 and len(finished[0]) == 4
    assert len(w.results) == 4


def test_worker_cancel_before_start(qapp, monkeypatch):
    w = _worker(monkeypatch)
    w.cancel()
    w.run()
    assert w.results == []


def test_worker_reports_fatal_error(qapp, monkeypatch):
    def boom(*a, **kw):
        raise RuntimeError("no source")

    monkeypatch.setattr(batch_worker, "generate_batch", boom)
    w = BatchWorker(Image.new("RGB", (10, 10)), WatermarkSpec(), ProcessingSettings(), pause=0)
    errors, finished = [], []
    w.error.connect(errors.append)
    w.all_done.connect(finished.append)
    w.run()
    assert errors == ["Batch failed: no source"]
    assert finished == [[]]
