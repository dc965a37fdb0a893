"""
Structured error types for streamd configuration resolution.

Every failure raised while turning raw daemon settings into a resolved
configuration is a :class:`StreamdError`.  The subclasses carry the name
of the failing setting, the offending value and the expected shape, so
the bootstrap code can report exactly what is wrong before the daemon
enters its consumption loop.

Manifesto:
    - **Typed Error Hierarchy:** One class per failure stage
      (conversion, binding, resolution, validation)
    - **Never Retried:** A bad setting stays bad; every error is fatal to
      startup
    - **Rich Context:** Errors carry the setting path and expected type
    - **Error Chaining:** Original exceptions are preserved as ``cause``

Architecture:
    ::

        ┌──────────────────────────────────────────────────────────┐
        │                      StreamdError                         │
        │          (category, context, cause, to_dict())           │
        ├──────────────────────────────────────────────────────────┤
        │                       ConfigError                         │
        │                        (CONFIG)                           │
        │        │              │              │             │      │
        │  ConversionError  BindingError  ResolutionError  ValidationError
        │  (CONVERSION)     (BINDING)     (RESOLUTION)     (VALIDATION)
        └──────────────────────────────────────────────────────────┘

Examples:
    >>> error = ConversionError("maxRecords", "ten", int)
    >>> error.setting
    'maxRecords'
    >>> error.to_dict()["expected"]
    'int'

Tags:
    error-handling, exception-hierarchy, error-context, streamd,
    configuration

Doc-Types:
    - API Reference
    - Error Handling Guide
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Error categories used for classification and reporting."""

    CONFIG = "CONFIG"  # Generic configuration problem
    CONVERSION = "CONVERSION"  # String value cannot become the field's type
    BINDING = "BINDING"  # Setting path matches no field or node
    RESOLUTION = "RESOLUTION"  # Named implementation type is unknown
    VALIDATION = "VALIDATION"  # Required or cross-field constraint violated

    INTERNAL = "INTERNAL"  # Bugs, unexpected state


@dataclass
class ErrorContext:
    """
    Structured metadata attached to an error.

    Attributes:
        setting: Dotted setting path that failed (e.g. ``fanoutConfig.consumerArn``)
        value: Raw string value supplied for the setting
        expected: Human-readable description of the expected type or shape
        node: Name of the nested node the setting belongs to, if any
        metadata: Additional key-value pairs
    """

    setting: str | None = None
    value: str | None = None
    expected: str | None = None
    node: str | None = None

    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["setting", "value", "expected", "node"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class StreamdError(Exception):
    """
    Base exception for all streamd errors.

    Subclasses set ``default_category``.  The ``context`` holds the
    structured details that :meth:`to_dict` exposes for reporting.
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context = context or ErrorContext()
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> StreamdError:
        """
        Add context to this error (fluent API).

        Usage:
            raise BindingError("fanoutConfig.bogus").with_context(node="fanoutConfig")
        """
        for key, value in kwargs.items():
            if hasattr(self.context, key) and key != "metadata":
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result: dict[str, Any] = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result.update(context_dict)
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================


class ConfigError(StreamdError):
    """
    Configuration error.

    Never retryable - configuration must be fixed.
    """

    default_category = ErrorCategory.CONFIG

    @property
    def setting(self) -> str | None:
        return self.context.setting


def _type_label(expected: Any) -> str:
    if isinstance(expected, str):
        return expected
    label = getattr(expected, "label", None)
    if isinstance(label, str):
        return label
    return getattr(expected, "__name__", repr(expected))


class ConversionError(ConfigError):
    """A string value cannot be converted to its target field's type."""

    default_category = ErrorCategory.CONVERSION

    def __init__(
        self,
        setting: str | None,
        value: str,
        expected: Any,
        *,
        reason: str | None = None,
        cause: Exception | None = None,
    ):
        label = _type_label(expected)
        where = f" for '{setting}'" if setting else ""
        message = f"Cannot convert {value!r}{where} to {label}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(
            message,
            context=ErrorContext(setting=setting, value=value, expected=label),
            cause=cause,
        )
        self.value = value
        self.expected = label


class BindingError(ConfigError):
    """A setting path does not correspond to any known field or nested node."""

    default_category = ErrorCategory.BINDING

    def __init__(self, setting: str, message: str | None = None, *, node: str | None = None):
        super().__init__(
            message or f"Unknown setting: {setting}",
            context=ErrorContext(setting=setting, node=node),
        )


class ResolutionError(ConfigError):
    """A named implementation type (or retrieval mode) cannot be resolved."""

    default_category = ErrorCategory.RESOLUTION

    def __init__(
        self,
        message: str,
        *,
        type_name: str | None = None,
        setting: str | None = None,
        expected: str | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(
            message,
            context=ErrorContext(setting=setting, value=type_name, expected=expected),
            cause=cause,
        )
        self.type_name = type_name


class ValidationError(ConfigError):
    """A required field is missing or a cross-field constraint is violated."""

    default_category = ErrorCategory.VALIDATION

    def __init__(self, setting: str, message: str | None = None, *, expected: str | None = None):
        super().__init__(
            message or f"Missing required setting: {setting}",
            context=ErrorContext(setting=setting, expected=expected),
        )


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "StreamdError",
    "ConfigError",
    "ConversionError",
    "BindingError",
    "ResolutionError",
    "ValidationError",
]
