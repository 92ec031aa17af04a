# tests/test_tracing.py
"""Tests for the optional OpenTelemetry helpers."""

from unittest.mock import MagicMock

from geminirag.tracing import add_span_attributes, create_span, end_span, record_span_exception, start_span


def test_create_span_without_tracer_is_noop():
    with create_span(None, "llm.chat", model="gemini-pro") as span:
        assert span is None


def test_create_span_drops_none_attributes():
    tracer = MagicMock()
    create_span(tracer, "llm.chat", model="gemini-pro", max_tokens=None)
    _, kwargs = tracer.start_as_current_span.call_args
    assert kwargs["attributes"] == {"model": "gemini-pro"}
    assert kwargs["context"] is None


def test_non_span_parent_is_ignored():
    tracer = MagicMock()
    create_span(tracer, "llm.chat", parent="some-event-id")
    assert tracer.start_as_current_span.call_args.kwargs["context"] is None


def test_span_helpers_accept_none():
    add_span_attributes(None, {"a": 1})
    record_span_exception(None, RuntimeError("x"))


def test_add_span_attributes_skips_none():
    span = MagicMock()
    add_span_attributes(span, {"a": 1, "b": None})
    span.set_attribute.assert_called_once_with("a", 1)


def test_record_span_exception():
    span = MagicMock()
    error = RuntimeError("boom")
    record_span_exception(span, error)
    span.record_exception.assert_called_once_with(error)
    span.set_status.assert_called_once()


def test_start_span_without_tracer():
    assert start_span(None, "llm.stream_chat") is None
    end_span(None)


def test_start_span_is_not_made_current():
    tracer = MagicMock()
    span = start_span(tracer, "llm.stream_chat", model="gemini-pro", max_tokens=None)
    assert span is tracer.start_span.return_value
    assert tracer.start_span.call_args.kwargs["attributes"] == {"model": "gemini-pro"}
    tracer.start_as_current_span.assert_not_called()
    end_span(span)
    span.end.assert_called_once()
