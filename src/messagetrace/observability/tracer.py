"""
Tracer protocol and implementations for composition-based tracing.

The publisher decorator and the consumer middleware never talk to the
OpenTelemetry API directly to create spans; they are handed a ``Tracer``.
This keeps the instrumentation independent of how spans are produced:

- OpenTelemetryTracer: real spans from a TracerProvider (global or injected)
- NullTracer: tracing disabled, no spans
- MockTracer: records span requests for assertions in tests

Spans returned by ``start_span`` are started immediately and MUST be ended
by the caller exactly once.

Example:
    >>> from messagetrace.observability import create_tracer, SpanKindEnum
    >>>
    >>> tracer = create_tracer(__name__)
    >>> span = tracer.start_span("orders publish", kind=SpanKindEnum.PRODUCER)
    >>> try:
    ...     do_publish()
    ... finally:
    ...     if span:
    ...         span.end()
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from opentelemetry import trace
from opentelemetry.trace import SpanKind as OtelSpanKind

if TYPE_CHECKING:
    from opentelemetry.context import Context
    from opentelemetry.trace import Span, TracerProvider


class SpanKindEnum(Enum):
    """
    Span kinds for distributed tracing.

    Used to indicate the role a span plays in a trace. Maps to
    OpenTelemetry's SpanKind.

    Values:
        INTERNAL: Default span kind for internal operations
        PRODUCER: For publish operations (e.g., sending to a topic)
        CONSUMER: For message handling operations (e.g., processing a delivery)
        CLIENT: For client operations (e.g., making HTTP requests)
        SERVER: For server operations (e.g., handling HTTP requests)
    """

    INTERNAL = "internal"
    PRODUCER = "producer"
    CONSUMER = "consumer"
    CLIENT = "client"
    SERVER = "server"


_KIND_MAPPING = {
    SpanKindEnum.INTERNAL: OtelSpanKind.INTERNAL,
    SpanKindEnum.PRODUCER: OtelSpanKind.PRODUCER,
    SpanKindEnum.CONSUMER: OtelSpanKind.CONSUMER,
    SpanKindEnum.CLIENT: OtelSpanKind.CLIENT,
    SpanKindEnum.SERVER: OtelSpanKind.SERVER,
}


@runtime_checkable
class Tracer(Protocol):
    """
    Protocol for tracers that can create tracing spans.

    Tracers are injected into the instrumentation as dependencies.

    Implementations:
    - NullTracer: No-op tracer for when tracing is disabled
    - OpenTelemetryTracer: Wrapper around OpenTelemetry tracer
    - MockTracer: Recording tracer for tests
    """

    @property
    def enabled(self) -> bool:
        """
        Check if tracing is enabled.

        Returns:
            True if tracing is active and will create real spans
        """
        ...

    def start_span(
        self,
        name: str,
        kind: SpanKindEnum = SpanKindEnum.INTERNAL,
        attributes: dict[str, Any] | None = None,
        context: Context | None = None,
    ) -> Span | None:
        """
        Start a new span with a SpanKind.

        The returned span is NOT made current; messaging instrumentation
        carries the resulting context explicitly on the message instead.

        Args:
            name: Span name (e.g., "orders publish")
            kind: The span kind (PRODUCER, CONSUMER, etc.)
            attributes: Span attributes (optional)
            context: Parent context. The consumer passes the context
                    extracted from message metadata here; ``None`` means the
                    current context.

        Returns:
            The Span object if tracing is enabled, None otherwise.
            Caller MUST call span.end() when the operation is complete.
        """
        ...


class NullTracer:
    """
    No-op tracer implementation for when tracing is disabled.

    Creates no spans. Instrumentation using it still carries any existing
    context through unchanged.

    Example:
        >>> tracer = NullTracer()
        >>> tracer.start_span("operation") is None
        True
        >>> tracer.enabled
        False
    """

    @property
    def enabled(self) -> bool:
        """Always returns False for NullTracer."""
        return False

    def start_span(
        self,
        name: str,
        kind: SpanKindEnum = SpanKindEnum.INTERNAL,
        attributes: dict[str, Any] | None = None,
        context: Context | None = None,
    ) -> None:
        """Return None (no-op for disabled tracing)."""
        return None


class OpenTelemetryTracer:
    """
    OpenTelemetry tracer implementation.

    Wraps the OpenTelemetry tracer API to conform to our Tracer protocol.

    Args:
        tracer_name: Name for the tracer (typically __name__)
        tracer_provider: Provider to obtain the tracer from. Defaults to the
                         globally registered provider.

    Example:
        >>> from opentelemetry.sdk.trace import TracerProvider
        >>> tracer = OpenTelemetryTracer(__name__, TracerProvider())
        >>> span = tracer.start_span("operation")
        >>> span.end()
    """

    def __init__(
        self,
        tracer_name: str,
        tracer_provider: TracerProvider | None = None,
    ) -> None:
        self._tracer = trace.get_tracer(tracer_name, tracer_provider=tracer_provider)

    @property
    def enabled(self) -> bool:
        """Always returns True for OpenTelemetryTracer."""
        return True

    def start_span(
        self,
        name: str,
        kind: SpanKindEnum = SpanKindEnum.INTERNAL,
        attributes: dict[str, Any] | None = None,
        context: Context | None = None,
    ) -> Span:
        """
        Start a new span with SpanKind for distributed tracing.

        Args:
            name: Span name
            kind: The span kind (PRODUCER, CONSUMER, etc.)
            attributes: Span attributes (optional)
            context: Optional OpenTelemetry context holding the parent span

        Returns:
            The OpenTelemetry Span. Caller MUST call span.end().
        """
        otel_kind = _KIND_MAPPING.get(kind, OtelSpanKind.INTERNAL)

        return self._tracer.start_span(
            name,
            context=context,
            kind=otel_kind,
            attributes=attributes or {},
        )


@dataclass
class RecordedSpan:
    """A span request captured by MockTracer."""

    name: str
    kind: SpanKindEnum
    attributes: dict[str, Any] = field(default_factory=dict)
    context: Context | None = None


class MockTracer:
    """
    Mock tracer for testing that records span information.

    Records every ``start_span`` call and returns None, so the caller behaves
    exactly as it does with tracing disabled while still letting tests verify
    the spans that would have been created.

    Example:
        >>> tracer = MockTracer()
        >>> tracer.start_span("operation", attributes={"key": "value"})
        >>> assert tracer.span_names == ["operation"]
        >>> assert tracer.spans[0].attributes == {"key": "value"}
    """

    def __init__(self) -> None:
        """Initialize MockTracer with empty span list."""
        self.spans: list[RecordedSpan] = []

    @property
    def enabled(self) -> bool:
        """Returns True to enable attribute computation in tests."""
        return True

    @property
    def span_names(self) -> list[str]:
        """Get just the span names for easy assertions."""
        return [span.name for span in self.spans]

    def clear(self) -> None:
        """Clear recorded spans."""
        self.spans.clear()

    def start_span(
        self,
        name: str,
        kind: SpanKindEnum = SpanKindEnum.INTERNAL,
        attributes: dict[str, Any] | None = None,
        context: Context | None = None,
    ) -> None:
        """Record span and return None (mock spans don't need to be ended)."""
        self.spans.append(RecordedSpan(name, kind, dict(attributes or {}), context))
        return None


def create_tracer(
    name: str,
    enable_tracing: bool = True,
    tracer_provider: TracerProvider | None = None,
) -> Tracer:
    """
    Factory function to create the appropriate tracer.

    Args:
        name: Tracer name (typically __name__)
        enable_tracing: Whether tracing should be enabled (default True)
        tracer_provider: Provider for the OpenTelemetry tracer (global if None)

    Returns:
        OpenTelemetryTracer if enabled, NullTracer otherwise

    Example:
        >>> def __init__(self, tracer: Tracer | None = None, enable_tracing: bool = True):
        ...     self._tracer = tracer or create_tracer(__name__, enable_tracing)
    """
    if enable_tracing:
        return OpenTelemetryTracer(name, tracer_provider)
    return NullTracer()


__all__ = [
    "Tracer",
    "NullTracer",
    "OpenTelemetryTracer",
    "MockTracer",
    "RecordedSpan",
    "SpanKindEnum",
    "create_tracer",
]
