"""
Shared test helpers for the messagetrace library.

Usage:
    from tests.fixtures import (
        MESSAGE_UUID,
        TRACEPARENT,
        CountingTracer,
        FixedIdGenerator,
        Panic,
        RecordingPublisher,
    )
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any
from unittest.mock import MagicMock

from opentelemetry.sdk.trace.id_generator import IdGenerator
from opentelemetry.trace import Span

from messagetrace.message import Message
from messagetrace.observability import SpanKindEnum

# ============================================================================
# Well-known identifiers
# ============================================================================

MESSAGE_UUID = "0d5427ea-7ab4-4ef1-b80d-0a22bd54a98f"
TRACE_ID_HEX = "093615e8ce177910353c5a09782ba62a"
SPAN_ID_HEX = "98c5fa0e132dd10d"
TRACE_ID = int(TRACE_ID_HEX, 16)
SPAN_ID = int(SPAN_ID_HEX, 16)
TRACEPARENT = f"00-{TRACE_ID_HEX}-{SPAN_ID_HEX}-00"
SAMPLED_TRACEPARENT = f"00-{TRACE_ID_HEX}-{SPAN_ID_HEX}-01"


class Panic(BaseException):
    """Non-Exception failure, escaping every ``except Exception`` clause."""


class FixedIdGenerator(IdGenerator):
    """IdGenerator that always returns the same trace and span ids."""

    def __init__(self, trace_id: int = TRACE_ID, span_id: int = SPAN_ID) -> None:
        self._trace_id = trace_id
        self._span_id = span_id

    def generate_span_id(self) -> int:
        return self._span_id

    def generate_trace_id(self) -> int:
        return self._trace_id


class RecordingPublisher:
    """
    Publisher double that records every call.

    Args:
        error: Exception (or BaseException) raised from publish, if any
        on_publish: Callback invoked with (topic, messages) before raising
    """

    def __init__(
        self,
        error: BaseException | None = None,
        on_publish: Callable[[str, tuple[Message, ...]], None] | None = None,
    ) -> None:
        self.calls: list[tuple[str, tuple[Message, ...]]] = []
        self.closed = False
        self._error = error
        self._on_publish = on_publish

    async def publish(self, topic: str, *messages: Message) -> None:
        self.calls.append((topic, messages))
        if self._on_publish is not None:
            self._on_publish(topic, messages)
        if self._error is not None:
            raise self._error

    async def close(self) -> None:
        self.closed = True


class CountingTracer:
    """Tracer handing out MagicMock spans so end() calls can be counted."""

    def __init__(self) -> None:
        self.spans: list[MagicMock] = []
        self.contexts: list[Any] = []

    @property
    def enabled(self) -> bool:
        return True

    def start_span(
        self,
        name: str,
        kind: SpanKindEnum = SpanKindEnum.INTERNAL,
        attributes: dict[str, Any] | None = None,
        context: Any | None = None,
    ) -> MagicMock:
        span = MagicMock(spec=Span)
        span.name = name
        self.spans.append(span)
        self.contexts.append(context)
        return span


__all__ = [
    "MESSAGE_UUID",
    "TRACE_ID_HEX",
    "SPAN_ID_HEX",
    "TRACE_ID",
    "SPAN_ID",
    "TRACEPARENT",
    "SAMPLED_TRACEPARENT",
    "Panic",
    "FixedIdGenerator",
    "RecordingPublisher",
    "CountingTracer",
]
