"""Logging for rhachet-brains-anthropic.

Every module logs through one package logger. Records go to stderr at the
level named by ``RHACHET_BRAINS_LOG_LEVEL`` (WARNING by default); the CLI
can lower that with ``--debug`` and mirror all records, debug included, to
a single file with ``--log-file``. Context travels in ``extra`` and is
appended as JSON by the file formatter.
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional


LOGGER_NAME = "rhachet_brains_anthropic"
LOG_LEVEL_ENV = "RHACHET_BRAINS_LOG_LEVEL"

# Attributes every LogRecord carries; anything else came in through ``extra``.
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}

_console_handler: Optional[logging.Handler] = None
_file_handler: Optional[logging.FileHandler] = None


class StructuredFormatter(logging.Formatter):
    """UTC ISO timestamps, with ``extra`` fields appended as sorted JSON."""

    def formatTime(self, record: logging.LogRecord, datefmt: Optional[str] = None) -> str:
        timestamp = datetime.fromtimestamp(record.created, tz=timezone.utc)
        return timestamp.strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        extras = {
            key: value
            for key, value in vars(record).items()
            if key not in _RECORD_ATTRS and not key.startswith("_")
        }
        if not extras:
            return message
        return f"{message} | {json.dumps(extras, sort_keys=True, default=str)}"


def _level_from_env() -> int:
    level = logging.getLevelName(os.getenv(LOG_LEVEL_ENV, "WARNING").upper())
    return level if isinstance(level, int) else logging.WARNING


def get_logger() -> logging.Logger:
    """Return the package logger, installing the stderr handler once."""
    global _console_handler
    logger = logging.getLogger(LOGGER_NAME)
    if _console_handler is None:
        _console_handler = logging.StreamHandler(sys.stderr)
        _console_handler.setLevel(_level_from_env())
        _console_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
        logger.addHandler(_console_handler)
        # Handlers decide what is shown; the logger passes everything on.
        logger.setLevel(logging.DEBUG)
        logger.propagate = False
    return logger


def set_console_level(level: int) -> None:
    get_logger()
    if _console_handler is not None:
        _console_handler.setLevel(level)


def log_to_file(log_file: Path) -> Path:
    """Mirror all records to ``log_file``, replacing any previous log file.

    Calling it again with the same path keeps the existing handler, so
    repeated CLI invocations in one process do not duplicate lines.
    """
    global _file_handler
    logger = get_logger()
    log_file = Path(log_file).expanduser().resolve()
    if _file_handler is not None:
        if Path(_file_handler.baseFilename) == log_file:
            return log_file
        logger.removeHandler(_file_handler)
        _file_handler.close()

    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(StructuredFormatter("%(asctime)s [%(levelname)s] %(message)s"))
    logger.addHandler(handler)
    _file_handler = handler
    return log_file
