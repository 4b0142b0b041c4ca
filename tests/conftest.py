"""
Shared pytest fixtures for the messagetrace library tests.

This module provides:
- OpenTelemetry SDK fixtures (span_exporter, tracer_provider, get_spans)
- Publisher and tracer doubles (recording_publisher, counting_tracer)
- The message used by the propagation scenarios
"""

from __future__ import annotations

from collections.abc import Callable, Generator

import pytest
from opentelemetry.sdk.trace import ReadableSpan, TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter

from messagetrace.message import Message
from tests.fixtures import MESSAGE_UUID, CountingTracer, RecordingPublisher

# ============================================================================
# OpenTelemetry Fixtures
# ============================================================================


@pytest.fixture
def span_exporter() -> InMemorySpanExporter:
    """In-memory exporter capturing every finished span."""
    return InMemorySpanExporter()


@pytest.fixture
def tracer_provider(span_exporter: InMemorySpanExporter) -> Generator[TracerProvider, None, None]:
    """
    A TracerProvider exporting synchronously to ``span_exporter``.

    Each test gets its own provider; the global provider is never touched.
    """
    provider = TracerProvider()
    provider.add_span_processor(SimpleSpanProcessor(span_exporter))
    yield provider
    provider.shutdown()


@pytest.fixture
def get_spans(span_exporter: InMemorySpanExporter) -> Callable[[], list[ReadableSpan]]:
    """Return finished spans in the order they ended."""

    def _get_spans() -> list[ReadableSpan]:
        return list(span_exporter.get_finished_spans())

    return _get_spans


# ============================================================================
# Doubles
# ============================================================================


@pytest.fixture
def counting_tracer() -> CountingTracer:
    """Tracer returning mock spans."""
    return CountingTracer()


@pytest.fixture
def recording_publisher() -> RecordingPublisher:
    """Publisher that records calls and succeeds."""
    return RecordingPublisher()


@pytest.fixture
def message() -> Message:
    """The message used throughout the propagation scenarios."""
    return Message(MESSAGE_UUID, b"test payload")
