"""
Top-level configuration resolution.

Manifesto:
    The daemon must never start with a half-valid configuration.
    :class:`ConfigurationResolver` is the one place where a mutable
    :class:`DaemonConfiguration` is checked and frozen into a
    :class:`ResolvedConfiguration`.  Downstream components trust the
    result and never re-validate it.

Steps::

    1. validate required and cross-field settings   → ValidationError
    2. materialize credentials providers            → ResolutionError
    3. pick FANOUT or POLLING (RetrievalModeResolver)
    4. materialize only the chosen strategy node
    5. assemble the frozen ResolvedConfiguration

Resolution only reads the configuration, so calling :meth:`resolve` twice
on the same instance yields equal results.

Example::

    resolved = resolve_settings({
        "applicationName": "orders-daemon",
        "streamName": "orders",
        "kinesisCredentialsProvider": "DefaultCredentialsProvider",
        "maxRecords": "500",
    })
    resolved.retrieval_mode          # RetrievalMode.POLLING

Tags:
    streamd, configuration, resolution, validation, immutability

Doc-Types:
    api-reference
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from streamd.core.errors import StreamdError, ValidationError
from streamd.core.logging import get_logger

from .binder import PropertyBinder
from .components import InitialPosition, RetrievalMode, UnknownSettingPolicy
from .converters import TypeConverterRegistry, default_converters
from .daemon import DaemonConfiguration
from .factory import NamedClassFactory, default_factory
from .models import (
    LeaseManagementConfig,
    MetricsConfig,
    ProcessorConfig,
    ResolvedConfiguration,
    RetrievalConfig,
    RetrievalSpecificConfig,
)
from .nodes import CLASS_KEY, CredentialsProviderConfig
from .retrieval import RetrievalModeResolver
from .settings import ResolverSettings, get_settings

logger = get_logger(__name__)

# setting name → attribute, for values that must be strictly positive
_POSITIVE_FIELDS = {
    "maxLeasesForWorker": "max_leases_for_worker",
    "maxLeasesToStealAtOneTime": "max_leases_to_steal_at_one_time",
    "maxRecords": "max_records",
    "initialLeaseTableReadCapacity": "initial_lease_table_read_capacity",
    "initialLeaseTableWriteCapacity": "initial_lease_table_write_capacity",
    "metricsMaxQueueSize": "metrics_max_queue_size",
}


class ConfigurationResolver:
    """Turns a :class:`DaemonConfiguration` into a :class:`ResolvedConfiguration`."""

    def __init__(
        self,
        converters: TypeConverterRegistry | None = None,
        factory: NamedClassFactory | None = None,
        retrieval_resolver: RetrievalModeResolver | None = None,
        *,
        unknown_settings: UnknownSettingPolicy = UnknownSettingPolicy.FAIL,
    ) -> None:
        self.converters = converters or default_converters()
        self.factory = factory or default_factory()
        self.retrieval_resolver = retrieval_resolver or RetrievalModeResolver()
        self.unknown_settings = unknown_settings

    def resolve(self, configuration: DaemonConfiguration) -> ResolvedConfiguration:
        self._validate(configuration)
        application_name = configuration.application_name.strip()
        stream_name = configuration.stream_name.strip()

        kinesis = self._credentials(configuration.kinesis_credentials_provider)
        dynamodb = self._credentials_or(configuration.dynamodb_credentials_provider, kinesis)
        cloudwatch = self._credentials_or(configuration.cloudwatch_credentials_provider, kinesis)

        mode = self.retrieval_resolver.resolve(
            configuration.retrieval_mode,
            configuration.max_records is not None,
        )
        strategy: RetrievalSpecificConfig
        if mode == RetrievalMode.POLLING:
            strategy = configuration.polling_config.materialize(
                self.converters,
                stream_name=stream_name,
                max_records=configuration.max_records,
            )
        else:
            strategy = configuration.fanout_config.materialize(
                self.converters,
                stream_name=stream_name,
                application_name=application_name,
            )

        resolved = ResolvedConfiguration(
            application_name=application_name,
            stream_name=stream_name,
            retrieval_mode=mode,
            worker_identifier=configuration.worker_identifier,
            region_name=configuration.region_name,
            lease_management=LeaseManagementConfig(
                stream_name=stream_name,
                application_name=application_name,
                worker_identifier=configuration.worker_identifier,
                max_leases_for_worker=configuration.max_leases_for_worker,
                max_leases_to_steal_at_one_time=configuration.max_leases_to_steal_at_one_time,
                failover_time=configuration.failover_time,
                shard_sync_interval=configuration.shard_sync_interval,
                cleanup_leases_upon_shard_completion=configuration.cleanup_leases_upon_shard_completion,
                initial_lease_table_read_capacity=configuration.initial_lease_table_read_capacity,
                initial_lease_table_write_capacity=configuration.initial_lease_table_write_capacity,
            ),
            retrieval=RetrievalConfig(
                stream_name=stream_name,
                application_name=application_name,
                initial_position=configuration.initial_position,
                initial_position_timestamp=configuration.initial_position_timestamp,
                retrieval_specific_config=strategy,
            ),
            processor=ProcessorConfig(
                call_process_records_even_for_empty_record_list=(
                    configuration.call_process_records_even_for_empty_record_list
                ),
                parent_shard_poll_interval=configuration.parent_shard_poll_interval,
                task_backoff_time=configuration.task_backoff_time,
            ),
            metrics=MetricsConfig(
                level=configuration.metrics_level,
                buffer_time=configuration.metrics_buffer_time,
                max_queue_size=configuration.metrics_max_queue_size,
            ),
            kinesis_credentials=kinesis,
            dynamodb_credentials=dynamodb,
            cloudwatch_credentials=cloudwatch,
        )
        logger.info(
            "configuration_resolved",
            application_name=application_name,
            stream_name=stream_name,
            retrieval_mode=mode.value,
            credentials=type(kinesis).__name__,
        )
        return resolved

    def _credentials_or(self, node: CredentialsProviderConfig, fallback: Any) -> Any:
        if node.type_name is None:
            return fallback
        return self._credentials(node)

    def _credentials(self, node: CredentialsProviderConfig) -> Any:
        return node.materialize(self.converters, factory=self.factory, unknown_settings=self.unknown_settings)

    def _validate(self, configuration: DaemonConfiguration) -> None:
        """Check required and cross-field settings before anything is built.

        The Kinesis provider's ``class`` is a required setting like
        ``applicationName``, so leaving it unset is a
        :class:`ValidationError` on ``kinesisCredentialsProvider``.
        :class:`ResolutionError` is reserved for a type name that is set
        but cannot be resolved or constructed; materializing a
        credentials node directly without a ``class`` also raises it.
        """
        for setting, value in (
            ("applicationName", configuration.application_name),
            ("streamName", configuration.stream_name),
        ):
            if value is None or not value.strip():
                raise ValidationError(setting, expected="non-empty string")

        kinesis = configuration.kinesis_credentials_provider
        if kinesis.type_name is None:
            raise ValidationError(kinesis.name, expected="registered implementation type")

        # arguments without a class would be silently dropped by the fallback
        for node in (configuration.dynamodb_credentials_provider, configuration.cloudwatch_credentials_provider):
            if node.is_configured and node.type_name is None:
                raise ValidationError(
                    node.path(CLASS_KEY),
                    f"'{node.name}' has arguments but no implementation type",
                    expected="registered implementation type",
                )

        for setting, attribute in _POSITIVE_FIELDS.items():
            value = getattr(configuration, attribute)
            if value is not None and value <= 0:
                raise ValidationError(
                    setting,
                    f"Setting '{setting}' must be positive, got {value}",
                    expected="positive integer",
                )

        if (
            configuration.initial_position == InitialPosition.AT_TIMESTAMP
            and configuration.initial_position_timestamp is None
        ):
            raise ValidationError(
                "initialPositionInStreamTimestamp",
                "initialPositionInStream is AT_TIMESTAMP but initialPositionInStreamTimestamp is not set",
                expected="ISO-8601 timestamp or epoch milliseconds",
            )


def resolve_settings(
    raw_settings: Mapping[str, str],
    *,
    settings: ResolverSettings | None = None,
    converters: TypeConverterRegistry | None = None,
    factory: NamedClassFactory | None = None,
) -> ResolvedConfiguration:
    """Bind every raw setting onto a fresh configuration and resolve it.

    Any failure is logged once as ``configuration_rejected`` with the
    failing setting and expected shape, then re-raised.
    """
    settings = settings or get_settings()
    converters = converters or default_converters()
    factory = factory or default_factory()

    configuration = DaemonConfiguration()
    binder = PropertyBinder(converters, unknown_settings=settings.unknown_settings)
    resolver = ConfigurationResolver(converters, factory, unknown_settings=settings.unknown_settings)
    try:
        binder.bind_all(configuration, raw_settings)
        return resolver.resolve(configuration)
    except StreamdError as exc:
        logger.error("configuration_rejected", **exc.to_dict())
        raise
