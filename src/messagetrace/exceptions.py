"""Library exceptions for the messagetrace package."""

from typing import Any


class MessageTraceError(Exception):
    """Base exception for messagetrace library."""

    pass


class ConfigurationError(MessageTraceError):
    """Raised when an instrumentation option is invalid."""

    pass


class InvalidSpanAttributeError(ConfigurationError):
    """Raised when a static span attribute has an unsupported value."""

    def __init__(self, key: str, value: Any) -> None:
        self.key = key
        self.value = value
        super().__init__(
            f"Invalid span attribute {key!r}: {type(value).__name__} values are not supported; "
            "use str, bool, int, float or a homogeneous sequence of those"
        )


__all__ = [
    "MessageTraceError",
    "ConfigurationError",
    "InvalidSpanAttributeError",
]
