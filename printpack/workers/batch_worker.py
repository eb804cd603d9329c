from __future__ import annotations
import logging
from typing import List
from PIL import Image
from PySide6.QtCore import QThread, Signal
from printpack.models.settings import CanvasLimits, ProcessingSettings, WatermarkSpec
from printpack.models.specs import DerivedImage, Progress
from printpack.imaging.batch import generate_batch
from printpack.utils.logging_utils import QtTailHandler

class BatchWorker(QThread):
    progress = Signal(int, int, str, bool)
    error = Signal(str)
    all_done = Signal(object)
    log_line = Signal(str)

    def __init__(self, source: Image.Image, watermark: WatermarkSpec, settings: ProcessingSettings,
                 limits: CanvasLimits = CanvasLimits(), pause: float = 0.03):
        super().__init__()
        self._source = source
        self._watermark = watermark
        self._settings = settings
        self._limits = limits
        self._pause = pause
        self._cancel = False
        self.results: List[DerivedImage] = []

    def cancel(self):
        self._cancel = True

    def _on_progress(self, p: Progress):
        self.progress.emit(p.current, p.total, p.current_task, p.is_complete)

    def run(self):
        tail = QtTailHandler(self.log_line.emit)
        logger = logging.getLogger("printpack")
        logger.addHandler(tail)
        try:
            self.results = generate_batch(
                self._source,
                self._watermark,
                self._settings,
                limits=self._limits,
                progress_cb=self._on_progress,
                should_cancel=lambda: self._cancel,
                pause=self._pause,
            )
        except Exception as e:
            self.error.emit(f"Batch failed: {e}")
        finally:
            logger.removeHandler(tail)
        self.all_done.emit(list(self.results))
