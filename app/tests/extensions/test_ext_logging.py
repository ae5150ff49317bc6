import logging

from extensions.ext_logging import (
    TraceIdFilter,
    TraceIdFormatter,
    bind_trace_id,
    trace_id_generator,
    trace_id_var,
)


def _record() -> logging.LogRecord:
    return logging.LogRecord("test", logging.INFO, __file__, 1, "hello", None, None)


class TestTraceId:
    def test_generator_returns_hex(self):
        trace_id = trace_id_generator()
        assert len(trace_id) == 32
        int(trace_id, 16)

    def test_bind_generates_when_missing(self):
        token = bind_trace_id()
        try:
            assert trace_id_var.get()
        finally:
            trace_id_var.reset(token)
        assert trace_id_var.get() is None


class TestTraceIdFilter:
    def test_adds_current_trace_id(self):
        token = bind_trace_id("abc")
        try:
            record = _record()
            assert TraceIdFilter().filter(record) is True
        finally:
            trace_id_var.reset(token)
        assert record.trace_id == "abc"


class TestTraceIdFormatter:
    def test_missing_trace_id_formats_empty(self):
        formatter = TraceIdFormatter("%(trace_id)s|%(message)s")
        assert formatter.format(_record()) == "|hello"
