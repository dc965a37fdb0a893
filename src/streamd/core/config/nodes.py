"""
Nested configuration nodes.

A node owns a flat set of raw settings under one path head
(``fanoutConfig.consumerArn`` is key ``consumerArn`` on the
``fanoutConfig`` node).  Values stay inert strings until
:meth:`NestedConfigNode.materialize` converts them and builds the typed
strategy object, so a node may be filled in before or after the scalar
fields it depends on, and a node that is never materialized never fails
on a bad value.

Variants:
    - :class:`CredentialsProviderConfig`: ``class`` plus provider arguments
    - :class:`FanoutStrategyConfig`: builds :class:`FanOutConfig`
    - :class:`PollingStrategyConfig`: builds :class:`PollingConfig`
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, ClassVar

from streamd.core.errors import BindingError, ResolutionError, StreamdError
from streamd.core.logging import get_logger

from .components import UnknownSettingPolicy
from .converters import TypeConverterRegistry
from .factory import NamedClassFactory
from .models import DEFAULT_MAX_RECORDS, FanOutConfig, PollingConfig

logger = get_logger(__name__)

CLASS_KEY = "class"


@dataclass(frozen=True, slots=True)
class FieldSpec:
    """Maps a setting name to an attribute and its conversion target."""

    setting: str
    attribute: str
    target: Any


def field_table(*specs: FieldSpec) -> dict[str, FieldSpec]:
    return {spec.setting: spec for spec in specs}


class NestedConfigNode:
    """Base class: stores raw settings, converts them on materialization."""

    fields: ClassVar[Mapping[str, FieldSpec]] = {}

    def __init__(self, name: str) -> None:
        self.name = name
        self._settings: dict[str, str] = {}

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r}, keys={sorted(self._settings)})"

    def path(self, key: str) -> str:
        return f"{self.name}.{key}"

    def accepts(self, key: str) -> bool:
        return key in self.fields

    def set(self, key: str, value: str) -> None:
        """Store *value* for *key* without converting it."""
        if not self.accepts(key):
            raise BindingError(self.path(key), node=self.name)
        self._settings[key] = value

    def get(self, key: str) -> str | None:
        return self._settings.get(key)

    @property
    def settings(self) -> dict[str, str]:
        return dict(self._settings)

    @property
    def is_configured(self) -> bool:
        return bool(self._settings)

    def _convert(self, converters: TypeConverterRegistry) -> dict[str, Any]:
        values: dict[str, Any] = {}
        for key, raw in sorted(self._settings.items()):
            spec = self.fields[key]
            values[spec.attribute] = converters.convert(raw, spec.target, setting=self.path(key))
        return values

    def materialize(self, converters: TypeConverterRegistry, **context: Any) -> Any:
        raise NotImplementedError


class FanoutStrategyConfig(NestedConfigNode):
    fields = field_table(
        FieldSpec("consumerArn", "consumer_arn", str),
        FieldSpec("consumerName", "consumer_name", str),
        FieldSpec("maxDescribeStreamSummaryRetries", "max_describe_stream_summary_retries", int),
        FieldSpec("maxDescribeStreamConsumerRetries", "max_describe_stream_consumer_retries", int),
        FieldSpec("registerStreamConsumerRetries", "register_stream_consumer_retries", int),
        FieldSpec("retryBackoffMillis", "retry_backoff", timedelta),
    )

    def __init__(self, name: str = "fanoutConfig") -> None:
        super().__init__(name)

    def materialize(
        self,
        converters: TypeConverterRegistry,
        *,
        stream_name: str,
        application_name: str,
    ) -> FanOutConfig:
        values = self._convert(converters)
        values.setdefault("consumer_name", application_name)
        config = FanOutConfig(stream_name=stream_name, application_name=application_name, **values)
        logger.debug("node_materialized", node=self.name, keys=sorted(self._settings))
        return config


class PollingStrategyConfig(NestedConfigNode):
    fields = field_table(
        FieldSpec("idleTimeBetweenReadsInMillis", "idle_time_between_reads", timedelta),
        FieldSpec("maxGetRecordsThreadPool", "max_get_records_thread_pool", int),
        FieldSpec("retryGetRecordsInSeconds", "retry_get_records_in_seconds", int),
    )

    def __init__(self, name: str = "pollingConfig") -> None:
        super().__init__(name)

    def materialize(
        self,
        converters: TypeConverterRegistry,
        *,
        stream_name: str,
        max_records: int | None = None,
    ) -> PollingConfig:
        values = self._convert(converters)
        config = PollingConfig(
            stream_name=stream_name,
            max_records=DEFAULT_MAX_RECORDS if max_records is None else max_records,
            **values,
        )
        logger.debug("node_materialized", node=self.name, keys=sorted(self._settings))
        return config


class CredentialsProviderConfig(NestedConfigNode):
    """Names a credentials provider (``class``) and carries its arguments.

    Any key is accepted at bind time; arguments are checked against the
    chosen provider's declared parameters when the node is materialized.
    """

    def accepts(self, key: str) -> bool:
        return bool(key)

    @property
    def type_name(self) -> str | None:
        value = self._settings.get(CLASS_KEY)
        if value is None or not value.strip():
            return None
        return value.strip()

    def materialize(
        self,
        converters: TypeConverterRegistry,
        *,
        factory: NamedClassFactory,
        unknown_settings: UnknownSettingPolicy = UnknownSettingPolicy.FAIL,
    ) -> Any:
        """Build the named provider from its declared arguments.

        An argument the provider does not declare raises
        :class:`BindingError`, or is logged as ``setting_ignored`` and
        skipped under :attr:`UnknownSettingPolicy.IGNORE`.
        """
        type_name = self.type_name
        if type_name is None:
            raise ResolutionError(
                f"No implementation type set for '{self.name}'",
                setting=self.path(CLASS_KEY),
                expected="registered implementation type",
            )

        try:
            parameters = factory.parameters(type_name)
            arguments: dict[str, Any] = {}
            for key, raw in sorted(self._settings.items()):
                if key == CLASS_KEY:
                    continue
                parameter = parameters.get(key)
                if parameter is None:
                    message = f"Implementation type '{type_name}' does not accept argument '{key}'"
                    if unknown_settings == UnknownSettingPolicy.IGNORE:
                        logger.warning("setting_ignored", setting=self.path(key), reason=message)
                        continue
                    raise BindingError(self.path(key), message, node=self.name)
                arguments[key] = converters.convert(raw, parameter.target, setting=self.path(key))
            provider = factory.instantiate(type_name, arguments)
        except StreamdError as exc:
            if exc.context.setting is None:
                exc.with_context(setting=self.path(CLASS_KEY))
            raise

        # argument values may be secrets; only their names are logged
        logger.debug("node_materialized", node=self.name, type_name=type_name, keys=sorted(self._settings))
        return provider
