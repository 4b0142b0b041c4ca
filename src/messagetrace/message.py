"""
Message envelope passed between publishers and handlers.

A message is an opaque payload plus string metadata. The instrumentation
layer only ever touches the metadata (for trace propagation headers) and the
ephemeral ``context`` field, which carries the OpenTelemetry context of the
operation currently working on the message. The context is never serialized;
it only lives for as long as the message object is in flight in-process.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING
from uuid import uuid4

if TYPE_CHECKING:
    from opentelemetry.context import Context

# Type alias for message metadata
Metadata = dict[str, str]


@dataclass
class Message:
    """
    A message travelling through a publisher or handler.

    Attributes:
        uuid: Opaque unique identifier of the message
        payload: Opaque message body, never inspected by instrumentation
        metadata: String key/value headers sent alongside the payload
        context: OpenTelemetry context of the operation currently processing
                 the message. ``None`` when nothing has been attached yet.
                 Set by the consumer middleware and read by the publisher
                 decorator so nested publishes become child spans.

    Example:
        >>> msg = Message("0d5427ea-7ab4-4ef1-b80d-0a22bd54a98f", b"test payload")
        >>> msg.metadata["correlation_id"] = "abc"
        >>> msg.context is None
        True
    """

    uuid: str
    payload: bytes
    metadata: Metadata = field(default_factory=dict)
    context: Context | None = field(default=None, repr=False, compare=False)

    @classmethod
    def new(cls, payload: bytes, metadata: Metadata | None = None) -> Message:
        """Create a message with a random UUID4 identifier."""
        return cls(uuid=str(uuid4()), payload=payload, metadata=dict(metadata or {}))


__all__ = [
    "Message",
    "Metadata",
]
