"""
Standard span attributes for messagetrace.

This module defines attribute constants used by the publisher decorator and
the consumer middleware. Messaging attributes follow the OpenTelemetry
semantic conventions for messaging systems.

Example:
    >>> from messagetrace.observability.attributes import (
    ...     ATTR_MESSAGING_DESTINATION,
    ...     ATTR_MESSAGING_SYSTEM,
    ... )
    >>>
    >>> span = tracer.start_span(
    ...     "orders publish",
    ...     kind=SpanKindEnum.PRODUCER,
    ...     attributes={
    ...         ATTR_MESSAGING_SYSTEM: "kafka",
    ...         ATTR_MESSAGING_DESTINATION: "orders",
    ...     },
    ... )
"""

# =============================================================================
# Messaging Attributes (OpenTelemetry Semantic Conventions)
# =============================================================================

ATTR_MESSAGING_SYSTEM = "messaging.system"
"""Messaging system identifier (e.g., 'kafka', 'nats')."""

ATTR_MESSAGING_DESTINATION = "messaging.destination.name"
"""Destination topic name."""

ATTR_MESSAGING_OPERATION = "messaging.operation"
"""Messaging operation type ('publish' or 'process')."""

ATTR_MESSAGING_MESSAGE_ID = "messaging.message.id"
"""Identifier of the message (its UUID string)."""

ATTR_MESSAGING_BATCH_MESSAGE_COUNT = "messaging.batch.message_count"
"""Number of messages in a batch publish (integer, only set for batches)."""

# =============================================================================
# Component-Specific Attributes
# =============================================================================

ATTR_HANDLER_NAME = "messagetrace.handler.name"
"""Name of the message handler being invoked (string)."""

# =============================================================================
# Operation values
# =============================================================================

OPERATION_PUBLISH = "publish"
OPERATION_PROCESS = "process"


__all__ = [
    "ATTR_MESSAGING_SYSTEM",
    "ATTR_MESSAGING_DESTINATION",
    "ATTR_MESSAGING_OPERATION",
    "ATTR_MESSAGING_MESSAGE_ID",
    "ATTR_MESSAGING_BATCH_MESSAGE_COUNT",
    "ATTR_HANDLER_NAME",
    "OPERATION_PUBLISH",
    "OPERATION_PROCESS",
]
