from __future__ import annotations
import logging, sys, time
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Union

LOG_DIR = Path("logs")
LOG_FILE_NAME = "printpack.log"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

BANNER = "=" * 75

# Pillow logs every plugin probe at DEBUG
QUIET_LOGGERS = ("PIL",)

def resolve_level(level: Union[int, str]) -> int:
    if isinstance(level, int):
        return level
    value = logging.getLevelName(level.upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return value

def build_logger(name: str = "printpack", log_dir: Path | None = LOG_DIR,
                 level: Union[int, str] = logging.INFO) -> logging.Logger:
    level = resolve_level(level)
    logger = logging.getLogger(name)
    logger.setLevel(level)
    for h in list(logger.handlers):
        h.close()
    logger.handlers.clear()

    fmt = logging.Formatter(LOG_FORMAT)

    if log_dir is not None:
        log_dir.mkdir(exist_ok=True, parents=True)
        fh = RotatingFileHandler(log_dir / LOG_FILE_NAME, maxBytes=5_000_000, backupCount=3, encoding="utf-8")
        fh.setFormatter(fmt)
        fh.setLevel(level)
        logger.addHandler(fh)

    sh = logging.StreamHandler(sys.stdout)
    sh.setFormatter(fmt)
    sh.setLevel(level)
    logger.addHandler(sh)

    for quiet in QUIET_LOGGERS:
        logging.getLogger(quiet).setLevel(max(level, logging.INFO))
    return logger

class QtTailHandler(logging.Handler):
    """Forwards formatted records to a Qt signal (or any callable)."""
    def __init__(self, signal_emit, level: int = logging.NOTSET):
        super().__init__(level)
        self.emit_to_gui = signal_emit
        self.setFormatter(logging.Formatter(LOG_FORMAT))

    def emit(self, record: logging.LogRecord) -> None:
        try:
            line = self.format(record)
            self.emit_to_gui(line)
        except Exception:
            self.handleError(record)

class log_section:
    """Banner around a stage; logs its duration and whether it failed."""
    def __init__(self, title: str, logger: logging.Logger):
        self.title = title
        self.logger = logger
        self.elapsed = 0.0
        self._t0 = 0.0

    def __enter__(self):
        self.logger.info("\n%s\n%s\n%s", BANNER, self.title, BANNER)
        self._t0 = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.elapsed = time.perf_counter() - self._t0
        if exc_type is None:
            self.logger.info("%s done in %.2fs", self.title, self.elapsed)
        else:
            self.logger.error("%s failed after %.2fs: %s", self.title, self.elapsed, exc)
        return False
