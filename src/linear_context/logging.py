"""Structured JSON logging for linear-context.

Writes JSONL to ``<log_dir>/linear-context.log`` with rotation (5MB, 3 backups),
or to stderr when no log directory is configured.  stdout is reserved for the
MCP stdio transport and is never written to.
"""

from __future__ import annotations

import json
import logging
import os
import sys
import threading
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

LOGGER_NAME = "linear_context"
_LOG_FILENAME = "linear-context.log"
_setup_lock = threading.Lock()
_MAX_BYTES = 5 * 1024 * 1024  # 5MB
_BACKUP_COUNT = 3

_EXTRA_FIELDS = (
    ("tool", "tool"),
    ("args_data", "args"),
    ("duration_ms", "duration_ms"),
    ("error", "error"),
    ("code", "code"),
)


class _JsonFormatter(logging.Formatter):
    """Format log records as single-line JSON."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "ts": self.formatTime(record, datefmt="%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "msg": record.getMessage(),
        }
        for attr, key in _EXTRA_FIELDS:
            if hasattr(record, attr):
                entry[key] = getattr(record, attr)
        if record.exc_info and record.exc_info[1]:
            entry["exception"] = str(record.exc_info[1])
        return json.dumps(entry, default=str)


def _resolve_level(level: str) -> int:
    resolved = logging.getLevelName(level.upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logging(log_dir: Path | None = None, level: str = "INFO") -> logging.Logger:
    """Set up structured JSON logging for the server process.

    With *log_dir*, records go to a rotating ``linear-context.log`` inside it;
    otherwise to stderr.  Repeated calls with the same target reuse the
    existing handler instead of stacking duplicates.
    """
    logger = logging.getLogger(LOGGER_NAME)

    with _setup_lock:
        logger.setLevel(_resolve_level(level))
        logger.propagate = False

        if log_dir is None:
            for h in logger.handlers[:]:
                if isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler):
                    return logger
                logger.removeHandler(h)
                h.close()
            stream_handler = logging.StreamHandler(sys.stderr)
            stream_handler.setFormatter(_JsonFormatter())
            logger.addHandler(stream_handler)
            return logger

        log_dir.mkdir(parents=True, exist_ok=True)
        log_path = log_dir / _LOG_FILENAME
        target_filename = os.path.abspath(str(log_path))

        for h in logger.handlers[:]:
            if isinstance(h, RotatingFileHandler) and h.baseFilename == target_filename:
                return logger
            # Different target: drop the stale handler.
            logger.removeHandler(h)
            h.close()

        handler = RotatingFileHandler(
            str(log_path),
            maxBytes=_MAX_BYTES,
            backupCount=_BACKUP_COUNT,
        )
        handler.setFormatter(_JsonFormatter())
        logger.addHandler(handler)
    return logger
