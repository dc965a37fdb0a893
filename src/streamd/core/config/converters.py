"""
String-to-type conversion for setting values.

Settings arrive as strings.  :class:`TypeConverterRegistry` turns one into
the semantic type of the field it is bound to: integers, booleans,
durations, timestamps, enum members, or instances built by name through a
:class:`~streamd.core.config.factory.NamedClassFactory`.

Scalar parsing leans on pydantic's lax-mode ``TypeAdapter`` so booleans,
ISO-8601 durations and timestamps are read the same way they are
everywhere else pydantic is used.

Conversion is pure: it never touches the configuration being built, so a
failed conversion leaves the target exactly as it was.

Example::

    registry = default_converters()
    registry.convert("10", int)                    # 10
    registry.convert("1500", timedelta)            # 1.5 seconds
    registry.convert("trim_horizon", InitialPosition)
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from streamd.core.errors import ConversionError, StreamdError

from .components import RetrievalMode
from .factory import NamedClassFactory

Converter = Callable[[str, Any], Any]

_INTEGER_RE = re.compile(r"[+-]?\d+")
_ISO_DURATION_RE = re.compile(r"-?P", re.IGNORECASE)

_BOOL = TypeAdapter(bool)
_TIMEDELTA = TypeAdapter(timedelta)
_DATETIME = TypeAdapter(datetime)


@dataclass(frozen=True)
class NamedType:
    """Conversion target for values that name an implementation type."""

    factory: NamedClassFactory
    label: str = "registered implementation type"


# ── Built-in converters ──────────────────────────────────────────────────


def _to_str(text: str, target: Any) -> str:
    return text.strip()


def _to_int(text: str, target: Any) -> int:
    text = text.strip()
    if not _INTEGER_RE.fullmatch(text):
        raise ValueError("not a whole number")
    return int(text)


def _to_bool(text: str, target: Any) -> bool:
    return _BOOL.validate_python(text.strip())


def _to_timedelta(text: str, target: Any) -> timedelta:
    """Plain integers are milliseconds; anything else must be an ISO-8601 duration."""
    text = text.strip()
    if _INTEGER_RE.fullmatch(text):
        try:
            value = timedelta(milliseconds=int(text))
        except OverflowError:
            raise ValueError("duration out of range") from None
    elif _ISO_DURATION_RE.match(text):
        value = _TIMEDELTA.validate_python(text)
    else:
        raise ValueError("expected milliseconds or an ISO-8601 duration such as PT5S")
    if value < timedelta(0):
        raise ValueError("duration must not be negative")
    return value


def _to_datetime(text: str, target: Any) -> datetime:
    """Plain integers are epoch milliseconds; anything else is ISO-8601.

    Timestamps without an offset are taken as UTC.
    """
    text = text.strip()
    if _INTEGER_RE.fullmatch(text):
        try:
            return datetime.fromtimestamp(int(text) / 1000, tz=timezone.utc)
        except (OverflowError, OSError):
            raise ValueError("timestamp out of range") from None
    value = _DATETIME.validate_python(text)
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


def _to_enum(text: str, target: type[Enum]) -> Enum:
    wanted = text.strip().lower()
    for member in target:
        if str(member.value).lower() == wanted or member.name.lower() == wanted:
            return member
    allowed = ", ".join(str(m.value) for m in target)
    raise ValueError(f"expected one of: {allowed}")


def _to_retrieval_mode(text: str, target: Any) -> RetrievalMode:
    return RetrievalMode.parse(text)


def _to_named(text: str, target: NamedType) -> Any:
    return target.factory.instantiate(text)


# ── Registry ─────────────────────────────────────────────────────────────


class TypeConverterRegistry:
    """Maps conversion targets to converter functions.

    Lookup order: a converter registered for the exact target, then the
    generic enum converter for ``Enum`` subclasses, then the named-type
    converter for :class:`NamedType` targets.
    """

    def __init__(self) -> None:
        self._converters: dict[Any, Converter] = {}

    def register(self, target: Any, converter: Converter) -> None:
        self._converters[target] = converter

    def _find(self, target: Any) -> Converter | None:
        if isinstance(target, NamedType):
            return _to_named
        converter = self._converters.get(target)
        if converter is not None:
            return converter
        if isinstance(target, type) and issubclass(target, Enum):
            return _to_enum
        return None

    def supports(self, target: Any) -> bool:
        return self._find(target) is not None

    def convert(self, value: str, target: Any, *, setting: str | None = None) -> Any:
        """Convert *value* to *target*.

        Raises:
            ConversionError: *value* cannot be read as *target*.
            ResolutionError: a named type or retrieval mode is unknown.
        """
        converter = self._find(target)
        if converter is None:
            raise TypeError(f"No converter registered for {target!r}")
        if not isinstance(value, str):
            raise ConversionError(setting, repr(value), target, reason="setting values must be strings")
        try:
            return converter(value, target)
        except StreamdError as exc:
            if setting is not None and exc.context.setting is None:
                exc.with_context(setting=setting)
            raise
        except (ValueError, PydanticValidationError) as exc:
            reason = exc.errors()[0]["msg"] if isinstance(exc, PydanticValidationError) else str(exc)
            raise ConversionError(setting, value, target, reason=reason, cause=exc) from exc


def default_converters() -> TypeConverterRegistry:
    """Create a registry with the built-in converters."""
    registry = TypeConverterRegistry()
    registry.register(str, _to_str)
    registry.register(int, _to_int)
    registry.register(bool, _to_bool)
    registry.register(timedelta, _to_timedelta)
    registry.register(datetime, _to_datetime)
    registry.register(RetrievalMode, _to_retrieval_mode)
    return registry
