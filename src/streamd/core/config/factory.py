"""
Named-type factory for pluggable strategy implementations.

Manifesto:
    Settings files name implementations by a fully-qualified type name
    (``kinesisCredentialsProvider = DefaultCredentialsProvider``).  Rather
    than importing arbitrary modules at runtime, every supported
    implementation is registered explicitly under its name and aliases.
    Each :class:`NamedClassFactory` is an ordinary object, so two
    resolutions never share registration state.

Features:
    - ``register()``: add a constructor under a name plus aliases
    - ``instantiate()``: build an instance, checking declared arguments
    - ``default_factory()``: factory pre-populated with the built-in
      credentials providers

Tags:
    streamd, configuration, factory-pattern, registry, credentials

Doc-Types:
    api-reference
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from streamd.core.errors import BindingError, ResolutionError
from streamd.core.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class Parameter:
    """A constructor argument an implementation accepts from settings."""

    setting: str  # name used in the settings file, e.g. "profileName"
    keyword: str  # keyword passed to the constructor, e.g. "profile_name"
    target: Any = str
    required: bool = False


@dataclass(frozen=True, slots=True)
class FactoryEntry:
    """A registered implementation."""

    name: str
    constructor: Callable[..., Any]
    parameters: Mapping[str, Parameter] = field(default_factory=dict)
    aliases: tuple[str, ...] = ()


class NamedClassFactory:
    """Explicit registry mapping type names to constructors."""

    def __init__(self) -> None:
        self._entries: dict[str, FactoryEntry] = {}
        self._lookup: dict[str, str] = {}

    def register(
        self,
        name: str,
        constructor: Callable[..., Any],
        *,
        aliases: Iterable[str] = (),
        parameters: Iterable[Parameter] = (),
    ) -> FactoryEntry:
        """Register *constructor* under *name* and each of *aliases*."""
        entry = FactoryEntry(
            name=name,
            constructor=constructor,
            parameters={p.setting: p for p in parameters},
            aliases=tuple(aliases),
        )
        for key in (name, *entry.aliases):
            if key in self._lookup:
                raise ValueError(f"Implementation type '{key}' is already registered")
        self._entries[name] = entry
        for key in (name, *entry.aliases):
            self._lookup[key] = name
        logger.debug("implementation_registered", name=name, aliases=list(entry.aliases))
        return entry

    def is_registered(self, type_name: str) -> bool:
        return type_name.strip() in self._lookup

    def names(self) -> list[str]:
        """Canonical names of all registered implementations."""
        return sorted(self._entries)

    def entry(self, type_name: str) -> FactoryEntry:
        """Look up the entry for *type_name* (canonical name or alias)."""
        canonical = self._lookup.get(type_name.strip())
        if canonical is None:
            available = ", ".join(self.names())
            raise ResolutionError(
                f"Unknown implementation type: {type_name!r}. Available: {available}",
                type_name=type_name,
                expected="registered implementation type",
            )
        return self._entries[canonical]

    def parameters(self, type_name: str) -> Mapping[str, Parameter]:
        return self.entry(type_name).parameters

    def instantiate(self, type_name: str, arguments: Mapping[str, Any] | None = None) -> Any:
        """Build an instance of *type_name*.

        *arguments* maps setting names (already converted to their target
        types) to values.  Undeclared argument names raise
        :class:`BindingError`; missing required ones and constructor
        failures raise :class:`ResolutionError`.
        """
        entry = self.entry(type_name)
        arguments = arguments or {}

        kwargs: dict[str, Any] = {}
        for setting, value in arguments.items():
            parameter = entry.parameters.get(setting)
            if parameter is None:
                raise BindingError(
                    setting,
                    f"Implementation type '{entry.name}' does not accept argument '{setting}'",
                )
            kwargs[parameter.keyword] = value

        missing = [p.setting for p in entry.parameters.values() if p.required and p.setting not in arguments]
        if missing:
            raise ResolutionError(
                f"Implementation type '{entry.name}' requires argument(s): {', '.join(sorted(missing))}",
                type_name=entry.name,
                expected=", ".join(sorted(missing)),
            )

        try:
            instance = entry.constructor(**kwargs)
        except Exception as exc:
            raise ResolutionError(
                f"Failed to construct implementation type '{entry.name}': {exc}",
                type_name=entry.name,
                cause=exc,
            ) from exc
        logger.debug("implementation_instantiated", name=entry.name, arguments=sorted(arguments))
        return instance


def default_factory() -> NamedClassFactory:
    """Create a factory populated with the built-in credentials providers."""
    from streamd.core.credentials import register_credentials_providers

    factory = NamedClassFactory()
    register_credentials_providers(factory)
    return factory
