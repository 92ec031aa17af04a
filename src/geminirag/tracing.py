# src/geminirag/tracing.py
"""
Optional OpenTelemetry helpers for geminirag.

Sessions wrap each vendor call in a span. When the OpenTelemetry API is not
installed, or no tracer provider has been configured by the application,
the helpers degrade to no-op context managers and never affect the call.
"""

import logging
from contextlib import nullcontext
from typing import Any, Optional

logger = logging.getLogger(__name__)


def get_tracer(name: str) -> Optional[object]:
    """
    Get a tracer instance for creating manual spans.

    Args:
        name: The name of the tracer (typically the module name)

    Returns:
        OpenTelemetry tracer instance if available, None otherwise
    """
    try:
        from opentelemetry import trace
        return trace.get_tracer(name)
    except ImportError:
        return None


def create_span(tracer, name: str, parent: Any = None, **attributes):
    """
    Create a new span, optionally as a child of `parent`.

    Args:
        tracer: OpenTelemetry tracer instance (or None)
        name: Name of the span
        parent: Caller-supplied event handle. Used as the parent context only
                when it is an OpenTelemetry span; anything else is ignored.
        **attributes: Span attributes (None values are dropped)

    Returns:
        Span context manager or no-op context manager
    """
    if tracer is None:
        return nullcontext()

    try:
        from opentelemetry import trace

        context = None
        if parent is not None and isinstance(parent, trace.Span):
            context = trace.set_span_in_context(parent)
        clean_attributes = {k: v for k, v in attributes.items() if v is not None}
        return tracer.start_as_current_span(name, context=context, attributes=clean_attributes)
    except Exception as e:
        logger.debug(f"Failed to create span '{name}': {e}")
        return nullcontext()


def start_span(tracer, name: str, parent: Any = None, **attributes):
    """
    Start a span without making it current; the caller must call `end()`.

    Used where a span has to stay open across `yield`s of an async
    generator, which a current-span context manager cannot do.

    Returns:
        The started span, or None when tracing is unavailable.
    """
    if tracer is None:
        return None

    try:
        from opentelemetry import trace

        context = None
        if parent is not None and isinstance(parent, trace.Span):
            context = trace.set_span_in_context(parent)
        clean_attributes = {k: v for k, v in attributes.items() if v is not None}
        return tracer.start_span(name, context=context, attributes=clean_attributes)
    except Exception as e:
        logger.debug(f"Failed to start span '{name}': {e}")
        return None


def end_span(span) -> None:
    if span is None:
        return

    try:
        span.end()
    except Exception as e:
        logger.debug(f"Failed to end span: {e}")


def add_span_attributes(span, attributes: dict) -> None:
    """
    Safely add attributes to a span.

    Args:
        span: OpenTelemetry span instance
        attributes: Dictionary of attributes to add
    """
    if span is None:
        return

    try:
        for key, value in attributes.items():
            if value is not None:
                span.set_attribute(key, value)
    except Exception as e:
        logger.debug(f"Failed to add span attributes: {e}")


def record_span_exception(span, exception: Exception) -> None:
    """
    Record an exception in a span.

    Args:
        span: OpenTelemetry span instance
        exception: Exception to record
    """
    if span is None:
        return

    try:
        from opentelemetry import trace

        span.record_exception(exception)
        span.set_status(trace.Status(trace.StatusCode.ERROR, str(exception)))
    except Exception as e:
        logger.debug(f"Failed to record span exception: {e}")
