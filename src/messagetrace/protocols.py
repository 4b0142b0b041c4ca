"""
Canonical protocol definitions for the messagetrace library.

The instrumentation wraps two capabilities it does not implement itself:

- Publisher: sends a batch of messages to a topic on some broker
- Handler functions: process one incoming message, optionally producing
  output messages to be published downstream

Errors are signalled by raising; a successful call returns normally.

Example:
    >>> class PrintPublisher:
    ...     async def publish(self, topic: str, *messages: Message) -> None:
    ...         for msg in messages:
    ...             print(topic, msg.uuid)
    ...
    ...     async def close(self) -> None:
    ...         pass
"""

from collections.abc import Awaitable, Callable
from typing import Protocol, runtime_checkable

from messagetrace.message import Message


@runtime_checkable
class Publisher(Protocol):
    """
    Protocol for message publishers.

    Implementations deliver every given message to the topic in a single
    call, raising if delivery fails.
    """

    async def publish(self, topic: str, *messages: Message) -> None:
        """
        Publish messages to a topic.

        Args:
            topic: Destination topic name
            *messages: Messages to deliver, in order

        Raises:
            Exception: If publishing fails
        """
        ...

    async def close(self) -> None:
        """Release the publisher's resources."""
        ...


# Handler that may produce output messages for downstream publishing
HandlerFunc = Callable[[Message], Awaitable[list[Message] | None]]

# Handler that never produces output messages
NoPublishHandlerFunc = Callable[[Message], Awaitable[None]]

# Middleware wrapping a handler into another handler
Middleware = Callable[[HandlerFunc], HandlerFunc]


__all__ = [
    "Publisher",
    "HandlerFunc",
    "NoPublishHandlerFunc",
    "Middleware",
]
