"""Configuration resolution for the stream-processing client daemon.

Manifesto:
    Daemon settings arrive as a flat ``name → string`` mapping.  Parsing
    them ad hoc in each subsystem means the same value is read three
    different ways and a typo is discovered an hour into a run.  This
    package resolves them once, at startup, into a single frozen
    :class:`ResolvedConfiguration`, or refuses to start.

Quick start::

    from streamd.core.config import resolve_settings

    resolved = resolve_settings({
        "applicationName": "orders-daemon",
        "streamName": "orders",
        "kinesisCredentialsProvider": "DefaultCredentialsProvider",
        "fanoutConfig.consumerArn": "arn:aws:kinesis:...:consumer/orders",
    })
    resolved.retrieval.retrieval_specific_config   # FanOutConfig(...)

Architecture::

    components.py   RetrievalMode, InitialPosition, MetricsLevel, UnknownSettingPolicy
    converters.py   TypeConverterRegistry (string → typed value)
    factory.py      NamedClassFactory (type name → instance)
    nodes.py        NestedConfigNode variants (credentials, fan-out, polling)
    daemon.py       DaemonConfiguration builder + recognised setting table
    binder.py       PropertyBinder (dotted path → field or node)
    retrieval.py    RetrievalModeResolver (FANOUT vs POLLING)
    resolver.py     ConfigurationResolver + resolve_settings()
    models.py       frozen ResolvedConfiguration and its sections
    settings.py     ResolverSettings (pydantic-settings) + get_settings()

Guardrails:
    ❌ Reading raw settings strings in daemon subsystems
    ✅ ``resolved.lease_management.max_leases_for_worker``
    ❌ Importing credentials providers by arbitrary module path
    ✅ Registering them on a :class:`NamedClassFactory`

Tags:
    streamd, configuration, resolution, binding, factory-pattern,
    pydantic, structlog

Doc-Types:
    package-overview, architecture-map, module-index
"""

from .binder import PropertyBinder
from .components import (
    InitialPosition,
    MetricsLevel,
    RetrievalMode,
    UnknownSettingPolicy,
)
from .converters import NamedType, TypeConverterRegistry, default_converters
from .daemon import SCALAR_FIELDS, DaemonConfiguration
from .factory import FactoryEntry, NamedClassFactory, Parameter, default_factory
from .models import (
    FanOutConfig,
    LeaseManagementConfig,
    MetricsConfig,
    PollingConfig,
    ProcessorConfig,
    ResolvedConfiguration,
    RetrievalConfig,
)
from .nodes import (
    CredentialsProviderConfig,
    FanoutStrategyConfig,
    NestedConfigNode,
    PollingStrategyConfig,
)
from .resolver import ConfigurationResolver, resolve_settings
from .retrieval import RetrievalModeResolver
from .settings import ResolverSettings, clear_settings_cache, get_settings

__all__ = [
    # Components
    "InitialPosition",
    "MetricsLevel",
    "RetrievalMode",
    "UnknownSettingPolicy",
    # Conversion / factory
    "NamedType",
    "TypeConverterRegistry",
    "default_converters",
    "FactoryEntry",
    "NamedClassFactory",
    "Parameter",
    "default_factory",
    # Builder side
    "DaemonConfiguration",
    "SCALAR_FIELDS",
    "NestedConfigNode",
    "CredentialsProviderConfig",
    "FanoutStrategyConfig",
    "PollingStrategyConfig",
    "PropertyBinder",
    # Resolution
    "RetrievalModeResolver",
    "ConfigurationResolver",
    "resolve_settings",
    # Resolved types
    "ResolvedConfiguration",
    "LeaseManagementConfig",
    "RetrievalConfig",
    "FanOutConfig",
    "PollingConfig",
    "ProcessorConfig",
    "MetricsConfig",
    # Settings
    "ResolverSettings",
    "get_settings",
    "clear_settings_cache",
]
