import logging

import pytest

from printpack.utils.logging_utils import LOG_FILE_NAME, QtTailHandler, build_logger, log_section, resolve_level


@pytest.fixture
def logger(tmp_path):
    log = build_logger("printpack.test_logging", log_dir=tmp_path, level="DEBUG")
    yield log
    for h in list(log.handlers):
        h.close()
    log.handlers.clear()


def test_resolve_level():
    assert resolve_level("warning") == logging.WARNING
    assert resolve_level(logging.DEBUG) == logging.DEBUG
    with pytest.raises(ValueError):
        resolve_level("chatty")


def test_build_logger_writes_file(tmp_path, logger):
    assert logger.level == logging.DEBUG
    logger.debug("hello file")
    for h in logger.handlers:
        h.flush()
    text = (tmp_path / LOG_FILE_NAME).read_text(encoding="utf-8")
    assert "hello file" in text
    assert "printpack.test_logging" in text


def test_rebuilding_does_not_duplicate_handlers(tmp_path, logger):
    again = build_logger("printpack.test_logging", log_dir=tmp_path)
    assert again is logger
    assert len(again.handlers) == 2


def test_tail_handler_forwards_lines(logger):
    lines = []
    logger.addHandler(QtTailHandler(lines.append))
    logger.info("to the gui")
    assert len(lines) == 1 and lines[0].endswith("to the gui")


def test_log_section_reports_success(caplog, logger):
    with caplog.at_level(logging.INFO, logger="printpack.test_logging"):
        with log_section("STAGE", logger) as section:
            pass
    assert section.elapsed >= 0
    assert "STAGE done in" in caplog.text


def test_log_section_reports_failure_and_reraises(caplog, logger):
    with caplog.at_level(logging.INFO, logger="printpack.test_logging"):
        with pytest.raises(RuntimeError):
            with log_section("STAGE", logger):
                raise RuntimeError("broken stage")
    assert "STAGE failed after" in caplog.text
    assert "broken stage" in caplog.text
