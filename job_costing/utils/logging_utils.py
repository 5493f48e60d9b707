"""Structured logging context for costing runs.

Costing a batch or aggregating an invoice touches many jobs; wrapping each
unit of work in ``LogContext(job_id=...)`` tags every record logged inside
it, so a warning such as "Unknown dispatch type" can be traced to its job
without repeating the id in every message.
"""

import logging
import threading
from typing import Any, Dict

_state = threading.local()


def _active() -> Dict[str, Any]:
    return getattr(_state, "fields", {})


def get_log_context() -> Dict[str, Any]:
    """Return a copy of the fields active in the current thread."""
    return dict(_active())


class LogContext:
    """Context manager tagging log records with structured fields.

    Contexts nest; inner fields override outer ones until the inner
    context exits. Fields are per thread.

    Example:
        with LogContext(invoice_id="inv-3", dispatcher_id="disp-7"):
            with LogContext(job_id="j-42"):
                logger.warning("Job has no computed gross amount")
    """

    def __init__(self, **fields: Any):
        self.fields = fields
        self._saved: Dict[str, Any] = {}

    def __enter__(self) -> "LogContext":
        self._saved = _active()
        _state.fields = {**self._saved, **self.fields}
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        _state.fields = self._saved


class ContextFilter(logging.Filter):
    """Copies the active LogContext fields onto each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in _active().items():
            setattr(record, key, value)
        return True
