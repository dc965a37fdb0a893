"""
Built-in credentials providers.

Providers are opaque to configuration resolution: the engine only needs to
construct one by name and hand it to the daemon runtime.  Construction
never touches the network or the filesystem; material is looked up when
the runtime calls :meth:`resolve`.

Each provider is registered under its Python dotted path, its bare class
name, and the fully-qualified name used by existing daemon settings files
(``software.amazon.awssdk.auth.credentials.*``).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from streamd.core.config.factory import NamedClassFactory

_AWS_SDK_PREFIX = "software.amazon.awssdk.auth.credentials."


@dataclass(frozen=True, slots=True)
class Credentials:
    access_key_id: str
    secret_access_key: str = field(repr=False)
    session_token: str | None = field(default=None, repr=False)


@dataclass(frozen=True, slots=True)
class DefaultCredentialsProvider:
    """Defers to the runtime's default credential chain."""

    def resolve(self) -> Credentials | None:
        return EnvironmentVariableCredentialsProvider().resolve()


@dataclass(frozen=True, slots=True)
class EnvironmentVariableCredentialsProvider:
    """Reads ``AWS_ACCESS_KEY_ID`` / ``AWS_SECRET_ACCESS_KEY`` on demand."""

    def resolve(self) -> Credentials | None:
        key = os.environ.get("AWS_ACCESS_KEY_ID")
        secret = os.environ.get("AWS_SECRET_ACCESS_KEY")
        if not key or not secret:
            return None
        return Credentials(key, secret, os.environ.get("AWS_SESSION_TOKEN"))


@dataclass(frozen=True, slots=True)
class ProfileCredentialsProvider:
    """Names a profile in the shared credentials file; read by the runtime."""

    profile_name: str = "default"


@dataclass(frozen=True, slots=True)
class StaticCredentialsProvider:
    access_key_id: str
    secret_access_key: str = field(repr=False)
    session_token: str | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        if not self.access_key_id or not self.secret_access_key:
            raise ValueError("access key id and secret access key must be non-empty")

    def resolve(self) -> Credentials:
        return Credentials(self.access_key_id, self.secret_access_key, self.session_token)


def _names(cls: type) -> tuple[str, list[str]]:
    short = cls.__name__
    return f"{__name__}.{short}", [short, _AWS_SDK_PREFIX + short]


def register_credentials_providers(factory: NamedClassFactory) -> None:
    """Register every built-in provider on *factory*."""
    from streamd.core.config.factory import Parameter

    for cls in (DefaultCredentialsProvider, EnvironmentVariableCredentialsProvider):
        name, aliases = _names(cls)
        factory.register(name, cls, aliases=aliases)

    name, aliases = _names(ProfileCredentialsProvider)
    factory.register(
        name,
        ProfileCredentialsProvider,
        aliases=aliases,
        parameters=[Parameter("profileName", "profile_name")],
    )

    name, aliases = _names(StaticCredentialsProvider)
    factory.register(
        name,
        StaticCredentialsProvider,
        aliases=aliases,
        parameters=[
            Parameter("accessKeyId", "access_key_id", required=True),
            Parameter("secretAccessKey", "secret_access_key", required=True),
            Parameter("sessionToken", "session_token"),
        ],
    )
