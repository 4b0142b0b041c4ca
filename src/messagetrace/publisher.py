"""
Publisher decorator with OpenTelemetry tracing.

``PublisherDecorator`` wraps any ``Publisher`` and, for every message in a
publish call, opens a PRODUCER span and (when a propagator is configured)
injects that span's context into the message metadata before the batch is
handed to the wrapped publisher.

Span lifecycle per publish call:
- One span per message, started in batch order before the delegate call
- Every span stays open while the wrapped publisher blocks on I/O
- If the delegate raises, every span is marked ERROR and records the exception
- Every span is ended exactly once before the call returns or raises

Example:
    >>> publisher = PublisherDecorator(
    ...     kafka_publisher,
    ...     with_text_map_propagator(),
    ...     with_messaging_system("kafka"),
    ... )
    >>> await publisher.publish("orders", Message.new(b'{"id": 1}'))
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import ExitStack
from typing import TYPE_CHECKING, Any

from opentelemetry import trace
from opentelemetry.context import Context
from opentelemetry.trace import Status, StatusCode

from messagetrace.config import Config, Option, build_config
from messagetrace.message import Message
from messagetrace.observability import SpanKindEnum, Tracer, create_tracer
from messagetrace.observability.attributes import (
    ATTR_MESSAGING_BATCH_MESSAGE_COUNT,
    ATTR_MESSAGING_DESTINATION,
    ATTR_MESSAGING_MESSAGE_ID,
    ATTR_MESSAGING_OPERATION,
    ATTR_MESSAGING_SYSTEM,
    OPERATION_PUBLISH,
)
from messagetrace.protocols import Publisher

if TYPE_CHECKING:
    from opentelemetry.trace import Span

logger = logging.getLogger(__name__)


class PublisherDecorator:
    """
    Publisher that traces every message it publishes.

    Implements the ``Publisher`` protocol itself, so it can be used anywhere
    the wrapped publisher was used.

    Args:
        publisher: The publisher to delegate to
        *options: Configuration options (see ``messagetrace.config``)
    """

    def __init__(self, publisher: Publisher, *options: Option) -> None:
        self._publisher = publisher
        self._config = build_config(*options)
        self._tracer: Tracer = self._config.tracer or create_tracer(
            __name__, tracer_provider=self._config.tracer_provider
        )

    @property
    def config(self) -> Config:
        """The frozen configuration of this decorator."""
        return self._config

    @property
    def publisher(self) -> Publisher:
        """The wrapped publisher."""
        return self._publisher

    async def publish(self, topic: str, *messages: Message) -> None:
        """
        Trace and publish messages to a topic.

        Args:
            topic: Destination topic name
            *messages: Messages to publish, in delivery order

        Raises:
            Exception: Whatever the wrapped publisher raises, unchanged
        """
        if not messages:
            return

        with ExitStack() as stack:
            spans: list[Span] = []
            for message in messages:
                # A message without a carried context starts a new trace
                parent = message.context if message.context is not None else Context()
                span = self._tracer.start_span(
                    f"{topic} {OPERATION_PUBLISH}",
                    kind=SpanKindEnum.PRODUCER,
                    attributes=self._span_attributes(topic, message, len(messages)),
                    context=parent,
                )
                if span is not None:
                    stack.callback(span.end)
                    spans.append(span)

                if self._config.propagator is not None:
                    ctx = trace.set_span_in_context(span, parent) if span is not None else parent
                    self._config.propagator.inject(message.metadata, ctx)

            logger.debug(
                f"Publishing {len(messages)} message(s) to {topic}",
                extra={"topic": topic, "message_count": len(messages)},
            )

            try:
                await self._publisher.publish(topic, *messages)
            except asyncio.CancelledError:
                for span in spans:
                    span.set_status(Status(StatusCode.ERROR, "cancelled"))
                raise
            except Exception as e:
                for span in spans:
                    span.set_status(Status(StatusCode.ERROR, str(e)))
                    span.record_exception(e)
                logger.debug(
                    f"Publishing to {topic} failed: {e}",
                    extra={"topic": topic, "message_count": len(messages)},
                )
                raise

    async def close(self) -> None:
        """Close the wrapped publisher."""
        await self._publisher.close()

    def _span_attributes(self, topic: str, message: Message, batch_size: int) -> dict[str, Any]:
        attributes: dict[str, Any] = dict(self._config.span_attributes)
        attributes[ATTR_MESSAGING_SYSTEM] = self._config.messaging_system
        attributes[ATTR_MESSAGING_DESTINATION] = topic
        attributes[ATTR_MESSAGING_OPERATION] = OPERATION_PUBLISH
        attributes[ATTR_MESSAGING_MESSAGE_ID] = message.uuid
        if batch_size > 1:
            attributes[ATTR_MESSAGING_BATCH_MESSAGE_COUNT] = batch_size
        return attributes


def new_publisher_decorator(publisher: Publisher, *options: Option) -> Publisher:
    """Wrap a publisher so that every published message is traced."""
    return PublisherDecorator(publisher, *options)


__all__ = [
    "PublisherDecorator",
    "new_publisher_decorator",
]
