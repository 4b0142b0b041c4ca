"""
messagetrace - OpenTelemetry tracing for asynchronous messaging in Python.

This library provides:
- A publisher decorator that opens a PRODUCER span per published message
  and injects trace context into the message metadata
- A consumer middleware that extracts trace context from incoming metadata,
  opens a linked CONSUMER span and closes it on every exit path
- W3C Trace Context and Baggage propagation through message metadata
- Option-function configuration producing an immutable config
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("messagetrace-py")
except PackageNotFoundError:
    # Package not installed (running from source without install)
    __version__ = "0.0.0.dev0"

from messagetrace.config import (
    Config,
    ConfigBuilder,
    Option,
    build_config,
    with_messaging_system,
    with_span_attributes,
    with_text_map_propagator,
    with_tracer,
    with_tracer_provider,
)
from messagetrace.exceptions import (
    ConfigurationError,
    InvalidSpanAttributeError,
    MessageTraceError,
)
from messagetrace.message import Message, Metadata
from messagetrace.propagation import (
    BAGGAGE_HEADER,
    TRACEPARENT_HEADER,
    MetadataPropagator,
    default_propagator,
)
from messagetrace.protocols import (
    HandlerFunc,
    Middleware,
    NoPublishHandlerFunc,
    Publisher,
)
from messagetrace.publisher import PublisherDecorator, new_publisher_decorator
from messagetrace.subscriber import (
    ConsumerTracing,
    chain,
    trace,
    trace_handler,
    trace_no_publish_handler,
)

__all__ = [
    "__version__",
    # Message
    "Message",
    "Metadata",
    # Protocols
    "Publisher",
    "HandlerFunc",
    "NoPublishHandlerFunc",
    "Middleware",
    # Configuration
    "Config",
    "ConfigBuilder",
    "Option",
    "build_config",
    "with_messaging_system",
    "with_span_attributes",
    "with_text_map_propagator",
    "with_tracer",
    "with_tracer_provider",
    # Propagation
    "MetadataPropagator",
    "default_propagator",
    "TRACEPARENT_HEADER",
    "BAGGAGE_HEADER",
    # Publisher
    "PublisherDecorator",
    "new_publisher_decorator",
    # Subscriber
    "ConsumerTracing",
    "chain",
    "trace",
    "trace_handler",
    "trace_no_publish_handler",
    # Exceptions
    "MessageTraceError",
    "ConfigurationError",
    "InvalidSpanAttributeError",
]
