"""OpenTelemetry tracing helpers."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from opentelemetry import trace

tracer = trace.get_tracer("minio_bucket_operator")


@contextmanager
def trace_span(name: str, kind: str | None = None, attributes: dict[str, Any] | None = None) -> Iterator[Any]:
    """Run the enclosed block inside a span.

    Args:
        name: Span name
        kind: Custom resource kind being handled, recorded as `resource.kind`
        attributes: Extra span attributes
    """
    span_attributes: dict[str, Any] = dict(attributes or {})
    if kind:
        span_attributes["resource.kind"] = kind

    # Exceptions are recorded on the span and re-raised by the SDK context manager.
    with tracer.start_as_current_span(name, attributes=span_attributes) as span:
        yield span
