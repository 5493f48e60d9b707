"""Tests for the structured logging context."""

import logging

from job_costing.utils.logging_utils import ContextFilter, LogContext, get_log_context


def _record():
    return logging.LogRecord("job_costing", logging.INFO, __file__, 1, "msg", None, None)


class TestLogContext:
    def test_fields_are_active_inside(self):
        with LogContext(job_id="j-1"):
            assert get_log_context() == {"job_id": "j-1"}
        assert get_log_context() == {}

    def test_nested_contexts_restore_outer_fields(self):
        with LogContext(dispatcher_id="disp-1"):
            with LogContext(job_id="j-2", dispatcher_id="disp-2"):
                assert get_log_context() == {"dispatcher_id": "disp-2", "job_id": "j-2"}
            assert get_log_context() == {"dispatcher_id": "disp-1"}

    def test_context_is_cleared_after_exception(self):
        try:
            with LogContext(job_id="j-3"):
                raise RuntimeError("boom")
        except RuntimeError:
            pass

        assert get_log_context() == {}

    def test_returned_context_is_a_copy(self):
        with LogContext(job_id="j-4"):
            get_log_context()["job_id"] = "changed"
            assert get_log_context()["job_id"] == "j-4"


class TestContextFilter:
    def test_copies_fields_onto_record(self):
        record = _record()

        with LogContext(job_id="j-5", row=3):
            assert ContextFilter().filter(record) is True

        assert record.job_id == "j-5"
        assert record.row == 3

    def test_no_context_leaves_record_alone(self):
        record = _record()

        ContextFilter().filter(record)

        assert not hasattr(record, "job_id")
