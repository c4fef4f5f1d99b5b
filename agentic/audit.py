"""Append-only audit trail of CLI actions.

Each record is one JSON object per line in ``<data dir>/audit.log``:
``{"timestamp": ..., "command": ..., "details": ...}``. Audit failures never
block a command: if the file cannot be opened the record is dropped.
"""
import json
import os
import logging
from typing import Any, Optional

from . import config
from .models import iso_timestamp

logger = logging.getLogger(__name__)

# Dedicated audit logger writing to its own file; don't bleed into root.
audit_logger = logging.getLogger('audit')
audit_logger.propagate = False
audit_logger.setLevel(logging.INFO)


def _file_handler() -> Optional[logging.FileHandler]:
    """Return a handler for the current audit file, replacing one for a stale path."""
    path = config.audit_log_file()
    for handler in list(audit_logger.handlers):
        if isinstance(handler, logging.FileHandler) and handler.baseFilename == os.path.abspath(path):
            return handler
        audit_logger.removeHandler(handler)
        handler.close()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(path, encoding='utf-8')
    except OSError:
        logger.warning('audit log unavailable at %s', path, exc_info=True)
        return None
    handler.setFormatter(logging.Formatter('%(message)s'))
    audit_logger.addHandler(handler)
    return handler


def log_audit(command: str, details: Optional[Any] = None) -> None:
    if config.DISABLE_AUDIT:
        return
    if _file_handler() is None:
        return
    payload = {'timestamp': iso_timestamp(), 'command': command, 'details': details}
    audit_logger.info(json.dumps(payload))


def close_audit_log() -> None:
    for handler in list(audit_logger.handlers):
        audit_logger.removeHandler(handler)
        handler.close()
