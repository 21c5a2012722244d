"""
Logging setup shared by the API and the maintenance scripts.

Lines look like:

    2024-05-01 10:00:00 [INFO] Inserted 500 employees {"service": "employee-management-api", "phase": "staff"}

Structured context goes through ``extra={"meta": {...}}`` and is appended as JSON.
"""
import json
import logging
import time
from contextlib import contextmanager
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

SERVICE_NAME = "employee-management-api"
PERFORMANCE_LOGGER = "performance"

MAX_BYTES = 5 * 1024 * 1024  # 5MB
BACKUP_COUNT = 5

_HANDLER_TAG = "_employee_manager_handler"


class MetaFormatter(logging.Formatter):
    def __init__(self, default_meta: dict[str, Any] | None = None):
        super().__init__(fmt="%(asctime)s [%(levelname)s] %(message)s", datefmt="%Y-%m-%d %H:%M:%S")
        self.default_meta = default_meta or {}

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        meta = {**self.default_meta, **(getattr(record, "meta", None) or {})}
        if meta:
            line += " " + json.dumps(meta, default=str, ensure_ascii=False)
        return line


def _rotating(path: Path, level: int, formatter: logging.Formatter) -> RotatingFileHandler:
    handler = RotatingFileHandler(path, maxBytes=MAX_BYTES, backupCount=BACKUP_COUNT, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(formatter)
    setattr(handler, _HANDLER_TAG, True)
    return handler


def configure_logging(log_level: str = "info", log_dir: str | Path | None = None, console_level: int = logging.WARNING):
    """
    Install console + rotating file handlers on the root logger.

    error.log gets ERROR and above, combined.log gets everything at ``log_level``,
    performance.log only receives records from the ``performance`` logger.
    Safe to call more than once: previously installed handlers are replaced.
    """
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    root = logging.getLogger()
    perf = logging.getLogger(PERFORMANCE_LOGGER)
    for lg in (root, perf):
        for h in list(lg.handlers):
            if getattr(h, _HANDLER_TAG, False):
                lg.removeHandler(h)
                h.close()

    formatter = MetaFormatter({"service": SERVICE_NAME})
    root.setLevel(level)

    console = logging.StreamHandler()
    console.setLevel(console_level)
    console.setFormatter(formatter)
    setattr(console, _HANDLER_TAG, True)
    root.addHandler(console)

    if log_dir is not None:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        root.addHandler(_rotating(log_path / "error.log", logging.ERROR, formatter))
        root.addHandler(_rotating(log_path / "combined.log", level, formatter))

        perf.setLevel(logging.INFO)
        perf.propagate = False
        perf.addHandler(_rotating(log_path / "performance.log", logging.INFO, MetaFormatter({"category": "performance"})))


@contextmanager
def timed(label: str, **meta):
    """Write the wall time of the wrapped block to the performance log."""
    started = time.perf_counter()
    try:
        yield
    finally:
        elapsed_ms = round((time.perf_counter() - started) * 1000, 2)
        logging.getLogger(PERFORMANCE_LOGGER).info(
            "%s took %.2fms", label, elapsed_ms, extra={"meta": {"label": label, "duration_ms": elapsed_ms, **meta}}
        )
