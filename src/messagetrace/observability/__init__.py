"""
Observability utilities for messagetrace.

This module provides the tracer abstraction used by the publisher decorator
and consumer middleware, plus the standard attribute names they record.

Example:
    >>> from messagetrace.observability import SpanKindEnum, create_tracer
    >>>
    >>> tracer = create_tracer(__name__)
    >>> span = tracer.start_span("orders publish", kind=SpanKindEnum.PRODUCER)
    >>> span.end()
"""

from messagetrace.observability.attributes import (
    ATTR_HANDLER_NAME,
    ATTR_MESSAGING_BATCH_MESSAGE_COUNT,
    ATTR_MESSAGING_DESTINATION,
    ATTR_MESSAGING_MESSAGE_ID,
    ATTR_MESSAGING_OPERATION,
    ATTR_MESSAGING_SYSTEM,
    OPERATION_PROCESS,
    OPERATION_PUBLISH,
)
from messagetrace.observability.tracer import (
    MockTracer,
    NullTracer,
    OpenTelemetryTracer,
    RecordedSpan,
    SpanKindEnum,
    Tracer,
    create_tracer,
)

__all__ = [
    # Tracer (composition-based API)
    "Tracer",
    "NullTracer",
    "OpenTelemetryTracer",
    "MockTracer",
    "RecordedSpan",
    "SpanKindEnum",
    "create_tracer",
    # Attributes - Messaging
    "ATTR_MESSAGING_SYSTEM",
    "ATTR_MESSAGING_DESTINATION",
    "ATTR_MESSAGING_OPERATION",
    "ATTR_MESSAGING_MESSAGE_ID",
    "ATTR_MESSAGING_BATCH_MESSAGE_COUNT",
    "OPERATION_PUBLISH",
    "OPERATION_PROCESS",
    # Attributes - Component-specific
    "ATTR_HANDLER_NAME",
]
