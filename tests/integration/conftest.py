"""
Shared pytest fixtures for integration tests.

Provides an in-memory broker standing in for a real message transport.
"""

from __future__ import annotations

from collections import defaultdict

import pytest

from messagetrace.message import Message
from messagetrace.protocols import HandlerFunc, Publisher


class InMemoryBroker:
    """
    Broker delivering published messages to subscribed handlers.

    Messages are copied on publish so that nothing but uuid, payload and
    metadata reaches the handler, like a process boundary. Handler outputs
    are published to the subscription's output topic through
    ``output_publisher`` (the traced publisher), mimicking a router.
    """

    def __init__(self) -> None:
        self._subscriptions: dict[str, list[tuple[HandlerFunc, str | None]]] = defaultdict(list)
        self.output_publisher: Publisher | None = None
        self.delivered: list[tuple[str, Message]] = []
        self.closed = False

    def subscribe(self, topic: str, handler: HandlerFunc, publish_topic: str | None = None) -> None:
        self._subscriptions[topic].append((handler, publish_topic))

    async def publish(self, topic: str, *messages: Message) -> None:
        for message in messages:
            for handler, publish_topic in self._subscriptions.get(topic, []):
                delivered = Message(message.uuid, message.payload, dict(message.metadata))
                self.delivered.append((topic, delivered))
                outputs = await handler(delivered)
                if outputs and publish_topic and self.output_publisher is not None:
                    await self.output_publisher.publish(publish_topic, *outputs)

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def broker() -> InMemoryBroker:
    return InMemoryBroker()
