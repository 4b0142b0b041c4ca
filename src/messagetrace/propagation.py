"""
Trace context propagation via message metadata.

Trace context crosses the broker inside the message metadata using the W3C
Trace Context and W3C Baggage header formats:

- ``traceparent``: ``00-<32 hex trace-id>-<16 hex span-id>-<2 hex flags>``
- ``baggage``: comma-separated ``key=value`` pairs (only when baggage exists)

Extraction never fails the caller. A missing or malformed header yields an
empty context, so the consumer span simply becomes a new root span.

Example:
    >>> propagator = default_propagator()
    >>> metadata: dict[str, str] = {}
    >>> propagator.inject(metadata, span_context)
    >>> metadata["traceparent"]
    '00-093615e8ce177910353c5a09782ba62a-98c5fa0e132dd10d-00'
    >>> parent = propagator.extract(metadata)
"""

from __future__ import annotations

import logging

from opentelemetry.baggage.propagation import W3CBaggagePropagator
from opentelemetry.context import Context
from opentelemetry.propagators.composite import CompositePropagator
from opentelemetry.propagators.textmap import TextMapPropagator
from opentelemetry.trace.propagation.tracecontext import TraceContextTextMapPropagator

from messagetrace.message import Metadata

logger = logging.getLogger(__name__)

TRACEPARENT_HEADER = "traceparent"
BAGGAGE_HEADER = "baggage"


class MetadataPropagator:
    """
    Serializes trace context to and from message metadata.

    Wraps an OpenTelemetry ``TextMapPropagator`` and treats the message
    metadata dict as its carrier.

    Args:
        propagator: The text map propagator to use. Defaults to the composite
                    of W3C Trace Context and W3C Baggage.
    """

    def __init__(self, propagator: TextMapPropagator | None = None) -> None:
        self._propagator = propagator or CompositePropagator(
            [TraceContextTextMapPropagator(), W3CBaggagePropagator()]
        )

    @property
    def fields(self) -> set[str]:
        """Metadata keys this propagator reads and writes."""
        return set(self._propagator.fields)

    def inject(self, metadata: Metadata, context: Context | None = None) -> None:
        """
        Write trace context headers into metadata.

        Args:
            metadata: Metadata dict to write into (mutated in place)
            context: Context holding the span to propagate; the current
                     context when None. Nothing is written for an invalid
                     span context.
        """
        self._propagator.inject(metadata, context=context)

    def extract(self, metadata: Metadata) -> Context:
        """
        Read trace context headers from metadata.

        Args:
            metadata: Metadata dict of an incoming message

        Returns:
            Context carrying the remote parent span (and baggage), or an
            empty Context when the headers are absent or malformed.
        """
        try:
            return self._propagator.extract(metadata, context=Context())
        except Exception as e:
            logger.warning(
                f"Failed to extract trace context from message metadata: {e}",
                exc_info=True,
                extra={"metadata_keys": sorted(metadata)},
            )
            return Context()


def default_propagator() -> MetadataPropagator:
    """Create a propagator for W3C Trace Context and W3C Baggage headers."""
    return MetadataPropagator()


__all__ = [
    "BAGGAGE_HEADER",
    "TRACEPARENT_HEADER",
    "MetadataPropagator",
    "default_propagator",
]
