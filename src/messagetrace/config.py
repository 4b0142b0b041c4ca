"""
Instrumentation configuration.

Configuration is assembled from option functions applied, in order, to a
mutable ``ConfigBuilder`` when a publisher decorator or consumer middleware is
constructed. The result is a frozen ``Config`` that is shared freely between
concurrent calls and never changes afterwards.

Example:
    >>> config = build_config(
    ...     with_span_attributes({"service.component": "billing"}),
    ...     with_text_map_propagator(),
    ... )
    >>> config.propagator is not None
    True
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from messagetrace.exceptions import ConfigurationError, InvalidSpanAttributeError
from messagetrace.propagation import MetadataPropagator

if TYPE_CHECKING:
    from opentelemetry.propagators.textmap import TextMapPropagator
    from opentelemetry.trace import TracerProvider
    from opentelemetry.util.types import AttributeValue

    from messagetrace.observability import Tracer

DEFAULT_MESSAGING_SYSTEM = "messagetrace"

_ATTRIBUTE_TYPES = (str, bool, int, float)


@dataclass
class ConfigBuilder:
    """Mutable configuration that options write into."""

    span_attributes: dict[str, AttributeValue] = field(default_factory=dict)
    propagator: MetadataPropagator | None = None
    tracer: Tracer | None = None
    tracer_provider: TracerProvider | None = None
    messaging_system: str = DEFAULT_MESSAGING_SYSTEM

    def build(self) -> Config:
        return Config(
            span_attributes=MappingProxyType(dict(self.span_attributes)),
            propagator=self.propagator,
            tracer=self.tracer,
            tracer_provider=self.tracer_provider,
            messaging_system=self.messaging_system,
        )


@dataclass(frozen=True)
class Config:
    """
    Immutable instrumentation configuration.

    Attributes:
        span_attributes: Static attributes merged into every span
        propagator: Propagator used to carry context through message
                    metadata. When None, spans are still created but the
                    producer and consumer sides are not linked.
        tracer: Explicitly injected tracer (takes precedence over
                tracer_provider)
        tracer_provider: Provider used to create the tracer when no tracer is
                         injected; the global provider when None
        messaging_system: Value recorded as ``messaging.system``
    """

    span_attributes: Mapping[str, AttributeValue] = field(
        default_factory=lambda: MappingProxyType({})
    )
    propagator: MetadataPropagator | None = None
    tracer: Tracer | None = None
    tracer_provider: TracerProvider | None = None
    messaging_system: str = DEFAULT_MESSAGING_SYSTEM


# An option mutates the builder once, at construction time
Option = Callable[[ConfigBuilder], None]


def build_config(*options: Option) -> Config:
    """
    Apply options in order and freeze the result.

    Args:
        *options: Option functions created by the ``with_*`` helpers

    Returns:
        The frozen Config

    Raises:
        ConfigurationError: If an option is not callable
    """
    builder = ConfigBuilder()
    for option in options:
        if not callable(option):
            raise ConfigurationError(f"Option must be callable, got {type(option).__name__}")
        option(builder)
    return builder.build()


def _validate_attribute(key: str, value: Any) -> None:
    if isinstance(value, _ATTRIBUTE_TYPES):
        return
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
        item_types = {type(item) for item in value}
        if len(item_types) <= 1 and all(issubclass(t, _ATTRIBUTE_TYPES) for t in item_types):
            return
    raise InvalidSpanAttributeError(key, value)


def with_span_attributes(
    attributes: Mapping[str, AttributeValue] | None = None,
    **kwargs: AttributeValue,
) -> Option:
    """
    Add static attributes to every generated span.

    Attributes are merged in order; a key given again (in a later call or in
    ``kwargs``) overwrites the earlier value.

    Args:
        attributes: Attribute mapping (use this for dotted keys)
        **kwargs: Additional attributes

    Raises:
        InvalidSpanAttributeError: If a value is not a valid attribute value
    """
    merged = {**(attributes or {}), **kwargs}
    for key, value in merged.items():
        _validate_attribute(key, value)

    def option(builder: ConfigBuilder) -> None:
        builder.span_attributes.update(merged)

    return option


def with_text_map_propagator(propagator: TextMapPropagator | None = None) -> Option:
    """
    Propagate trace context across process boundaries via message metadata.

    Args:
        propagator: Custom text map propagator. Defaults to W3C Trace Context
                    plus W3C Baggage.
    """

    def option(builder: ConfigBuilder) -> None:
        builder.propagator = MetadataPropagator(propagator)

    return option


def with_tracer(tracer: Tracer) -> Option:
    """Use the given tracer instead of creating one."""

    def option(builder: ConfigBuilder) -> None:
        builder.tracer = tracer

    return option


def with_tracer_provider(tracer_provider: TracerProvider) -> Option:
    """Create spans from the given provider instead of the global one."""

    def option(builder: ConfigBuilder) -> None:
        builder.tracer_provider = tracer_provider

    return option


def with_messaging_system(name: str) -> Option:
    """Set the ``messaging.system`` attribute (e.g. 'kafka', 'nats')."""
    if not name:
        raise ConfigurationError("Messaging system name must not be empty")

    def option(builder: ConfigBuilder) -> None:
        builder.messaging_system = name

    return option


__all__ = [
    "DEFAULT_MESSAGING_SYSTEM",
    "Config",
    "ConfigBuilder",
    "Option",
    "build_config",
    "with_messaging_system",
    "with_span_attributes",
    "with_text_map_propagator",
    "with_tracer",
    "with_tracer_provider",
]
