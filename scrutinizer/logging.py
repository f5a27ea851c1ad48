"""Logging helpers shared by the CLI, the service and the examination pipeline."""

from __future__ import annotations

import logging
from pathlib import Path

_ROOT = "scrutinizer"
_CONSOLE_FORMAT = "[scrutinizer] %(levelname)s %(message)s"
_VERBOSE_CONSOLE_FORMAT = "[scrutinizer] %(levelname)s %(component)s: %(message)s"
_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class _ComponentFilter(logging.Filter):
    """Expose the logger name without the package prefix as ``component``."""

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name
        record.component = name[len(_ROOT) + 1 :] if name.startswith(f"{_ROOT}.") else name
        return True


def get_logger(name: str | None = None) -> logging.Logger:
    """Return ``scrutinizer.<name>``, or the package logger when ``name`` is empty."""
    return logging.getLogger(f"{_ROOT}.{name}" if name else _ROOT)


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Send scrutinizer logs to stderr and, optionally, to ``log_file``.

    Verbose mode lowers the level to DEBUG and prefixes console lines with the
    emitting component (``orchestrator``, ``backends.github``...).
    """
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_ROOT)
    logger.setLevel(level)
    logger.propagate = False

    # Reconfiguring replaces handlers instead of stacking them.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler()
    console.setLevel(level)
    if verbose:
        console.addFilter(_ComponentFilter())
        console.setFormatter(logging.Formatter(_VERBOSE_CONSOLE_FORMAT))
    else:
        console.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
    logger.addHandler(console)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        sink = logging.FileHandler(log_file, encoding="utf-8")
        sink.setLevel(logging.DEBUG)
        sink.setFormatter(logging.Formatter(_FILE_FORMAT))
        logger.addHandler(sink)
        # The file always receives debug records.
        logger.setLevel(logging.DEBUG)

    return logger


__all__ = ["configure_logging", "get_logger"]
