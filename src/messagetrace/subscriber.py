"""
Consumer middleware with OpenTelemetry tracing.

Handlers are wrapped so that every incoming message is processed inside a
CONSUMER span:

1. The parent context is extracted from the message metadata (when a
   propagator is configured), linking the span to the producer's span
2. The consumer span's context is stored on ``message.context``, so publishes
   made from inside the handler become its children
3. Output messages without a context inherit the consumer span's context
4. The span is ended exactly once, whether the handler returns, raises or is
   cancelled. Exceptions are recorded and re-raised unchanged.

Example:
    >>> async def update_feed(msg: Message) -> None:
    ...     ...
    >>>
    >>> handler = trace_no_publish_handler(update_feed, with_text_map_propagator())
    >>>
    >>> # Or as router-style middleware
    >>> handler = chain(process_order, trace(with_text_map_propagator()))
"""

from __future__ import annotations

import asyncio
import contextlib
import functools
import logging
from collections.abc import Generator
from typing import Any

from opentelemetry import trace as otel_trace
from opentelemetry.context import Context
from opentelemetry.trace import Status, StatusCode

from messagetrace.config import Config, Option, build_config
from messagetrace.message import Message
from messagetrace.observability import SpanKindEnum, Tracer, create_tracer
from messagetrace.observability.attributes import (
    ATTR_HANDLER_NAME,
    ATTR_MESSAGING_MESSAGE_ID,
    ATTR_MESSAGING_OPERATION,
    ATTR_MESSAGING_SYSTEM,
    OPERATION_PROCESS,
)
from messagetrace.protocols import HandlerFunc, Middleware, NoPublishHandlerFunc

logger = logging.getLogger(__name__)


def _handler_name(handler: Any) -> str:
    name = getattr(handler, "__qualname__", None) or getattr(handler, "__name__", None)
    return name or type(handler).__name__


class ConsumerTracing:
    """
    Opens and closes consumer spans around message handling.

    One instance is created per wrapped handler and shared by all concurrent
    invocations; it holds only immutable state.

    Args:
        handler_name: Name used for the span and ``messagetrace.handler.name``
        config: Frozen instrumentation configuration
    """

    def __init__(self, handler_name: str, config: Config) -> None:
        self.handler_name = handler_name
        self.config = config
        self._tracer: Tracer = config.tracer or create_tracer(
            __name__, tracer_provider=config.tracer_provider
        )

    def _parent_context(self, message: Message) -> Context:
        if self.config.propagator is not None:
            return self.config.propagator.extract(message.metadata)
        return message.context if message.context is not None else Context()

    def _span_attributes(self, message: Message) -> dict[str, Any]:
        attributes: dict[str, Any] = dict(self.config.span_attributes)
        attributes[ATTR_MESSAGING_SYSTEM] = self.config.messaging_system
        attributes[ATTR_MESSAGING_OPERATION] = OPERATION_PROCESS
        attributes[ATTR_MESSAGING_MESSAGE_ID] = message.uuid
        attributes[ATTR_HANDLER_NAME] = self.handler_name
        return attributes

    @contextlib.contextmanager
    def span(self, message: Message) -> Generator[Context, None, None]:
        """
        Run the body inside a consumer span for ``message``.

        Sets ``message.context`` to the consumer span's context while the body
        runs and yields that context. The carried context is put back on exit,
        so a retried delivery of the same message object is parented the same
        way as the first attempt.
        """
        carried = message.context
        parent = self._parent_context(message)
        span = self._tracer.start_span(
            self.handler_name,
            kind=SpanKindEnum.CONSUMER,
            attributes=self._span_attributes(message),
            context=parent,
        )
        message.context = otel_trace.set_span_in_context(span, parent) if span is not None else parent

        try:
            yield message.context
        except asyncio.CancelledError:
            if span is not None:
                span.set_status(Status(StatusCode.ERROR, "cancelled"))
            raise
        except Exception as e:
            if span is not None:
                span.set_status(Status(StatusCode.ERROR, str(e)))
                span.record_exception(e)
            logger.debug(
                f"Handler {self.handler_name} failed for message {message.uuid}: {e}",
                extra={"handler_name": self.handler_name, "message_uuid": message.uuid},
            )
            raise
        finally:
            message.context = carried
            if span is not None:
                span.end()


def trace_handler(handler: HandlerFunc, *options: Option) -> HandlerFunc:
    """
    Trace a handler that may produce output messages.

    Args:
        handler: Async handler returning output messages (or None)
        *options: Configuration options (see ``messagetrace.config``)

    Returns:
        Handler with the same signature, running inside a consumer span
    """
    return _wrap_handler(handler, build_config(*options))


def _wrap_handler(handler: HandlerFunc, config: Config) -> HandlerFunc:
    tracing = ConsumerTracing(_handler_name(handler), config)

    @functools.wraps(handler)
    async def traced_handler(message: Message) -> list[Message] | None:
        with tracing.span(message) as ctx:
            outputs = await handler(message)
            if outputs:
                for output in outputs:
                    if output.context is None:
                        output.context = ctx
            return outputs

    return traced_handler


def trace_no_publish_handler(handler: NoPublishHandlerFunc, *options: Option) -> NoPublishHandlerFunc:
    """
    Trace a handler that does not produce output messages.

    Args:
        handler: Async handler returning None
        *options: Configuration options (see ``messagetrace.config``)

    Returns:
        Handler with the same signature, running inside a consumer span
    """
    tracing = ConsumerTracing(_handler_name(handler), build_config(*options))

    @functools.wraps(handler)
    async def traced_handler(message: Message) -> None:
        with tracing.span(message):
            await handler(message)

    return traced_handler


def trace(*options: Option) -> Middleware:
    """
    Create a middleware that traces every handler it wraps.

    Options are validated once, when the middleware is created.

    Example:
        >>> handler = chain(process_order, trace(with_text_map_propagator()))
    """
    config = build_config(*options)

    def middleware(handler: HandlerFunc) -> HandlerFunc:
        return _wrap_handler(handler, config)

    return middleware


def chain(handler: HandlerFunc, *middlewares: Middleware) -> HandlerFunc:
    """
    Compose middlewares around a handler at setup time.

    The first middleware listed is the outermost one.
    """
    for middleware in reversed(middlewares):
        handler = middleware(handler)
    return handler


__all__ = [
    "ConsumerTracing",
    "chain",
    "trace",
    "trace_handler",
    "trace_no_publish_handler",
]
