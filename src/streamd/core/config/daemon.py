"""
Mutable daemon configuration (the builder side of resolution).

:class:`DaemonConfiguration` is filled in setting by setting, either by
:class:`~streamd.core.config.binder.PropertyBinder` from raw strings or
directly through its typed attributes, and is then handed to
:class:`~streamd.core.config.resolver.ConfigurationResolver`, which turns
it into a frozen :class:`~streamd.core.config.models.ResolvedConfiguration`.
It is never exposed to the daemon runtime.

The recognised setting names form a closed set: :data:`SCALAR_FIELDS`
maps each scalar setting to its attribute and conversion target, and
every nested node is reachable through :meth:`DaemonConfiguration.node`.

Not safe for concurrent mutation; bind from a single thread.
"""

from __future__ import annotations

from datetime import datetime, timedelta

from .components import InitialPosition, MetricsLevel, RetrievalMode
from .models import UNLIMITED_LEASES
from .nodes import (
    CredentialsProviderConfig,
    FanoutStrategyConfig,
    FieldSpec,
    NestedConfigNode,
    PollingStrategyConfig,
    field_table,
)

# ── Recognised scalar settings ───────────────────────────────────────────

SCALAR_FIELDS: dict[str, FieldSpec] = field_table(
    FieldSpec("applicationName", "application_name", str),
    FieldSpec("streamName", "stream_name", str),
    FieldSpec("workerIdentifier", "worker_identifier", str),
    FieldSpec("regionName", "region_name", str),
    FieldSpec("initialPositionInStream", "initial_position", InitialPosition),
    FieldSpec("initialPositionInStreamTimestamp", "initial_position_timestamp", datetime),
    # lease management
    FieldSpec("maxLeasesForWorker", "max_leases_for_worker", int),
    FieldSpec("maxLeasesToStealAtOneTime", "max_leases_to_steal_at_one_time", int),
    FieldSpec("failoverTimeMillis", "failover_time", timedelta),
    FieldSpec("shardSyncIntervalMillis", "shard_sync_interval", timedelta),
    FieldSpec("cleanupLeasesUponShardCompletion", "cleanup_leases_upon_shard_completion", bool),
    FieldSpec("initialLeaseTableReadCapacity", "initial_lease_table_read_capacity", int),
    FieldSpec("initialLeaseTableWriteCapacity", "initial_lease_table_write_capacity", int),
    # retrieval
    FieldSpec("maxRecords", "max_records", int),
    FieldSpec("retrievalMode", "retrieval_mode", RetrievalMode),
    # processing
    FieldSpec("callProcessRecordsEvenForEmptyRecordList", "call_process_records_even_for_empty_record_list", bool),
    FieldSpec("parentShardPollIntervalMillis", "parent_shard_poll_interval", timedelta),
    FieldSpec("taskBackoffTimeMillis", "task_backoff_time", timedelta),
    # metrics
    FieldSpec("metricsLevel", "metrics_level", MetricsLevel),
    FieldSpec("metricsBufferTimeMillis", "metrics_buffer_time", timedelta),
    FieldSpec("metricsMaxQueueSize", "metrics_max_queue_size", int),
)

KINESIS_CREDENTIALS = "kinesisCredentialsProvider"
DYNAMODB_CREDENTIALS = "dynamoDBCredentialsProvider"
CLOUDWATCH_CREDENTIALS = "cloudWatchCredentialsProvider"
FANOUT_CONFIG = "fanoutConfig"
POLLING_CONFIG = "pollingConfig"


class DaemonConfiguration:
    """In-progress configuration graph.

    Scalars start at their defaults, except the required names (``None``)
    and ``max_records``, whose ``None`` means "never set" and is read by
    the retrieval-mode resolver as the absence of the polling signal.
    """

    def __init__(self) -> None:
        self.application_name: str | None = None
        self.stream_name: str | None = None
        self.worker_identifier: str | None = None
        self.region_name: str | None = None
        self.initial_position: InitialPosition = InitialPosition.LATEST
        self.initial_position_timestamp: datetime | None = None

        self.max_leases_for_worker: int = UNLIMITED_LEASES
        self.max_leases_to_steal_at_one_time: int = 1
        self.failover_time: timedelta = timedelta(seconds=10)
        self.shard_sync_interval: timedelta = timedelta(seconds=60)
        self.cleanup_leases_upon_shard_completion: bool = True
        self.initial_lease_table_read_capacity: int = 10
        self.initial_lease_table_write_capacity: int = 10

        self.max_records: int | None = None
        self._retrieval_mode: RetrievalMode = RetrievalMode.UNSET

        self.call_process_records_even_for_empty_record_list: bool = False
        self.parent_shard_poll_interval: timedelta = timedelta(seconds=10)
        self.task_backoff_time: timedelta = timedelta(milliseconds=500)

        self.metrics_level: MetricsLevel = MetricsLevel.DETAILED
        self.metrics_buffer_time: timedelta = timedelta(seconds=10)
        self.metrics_max_queue_size: int = 10_000

        self.kinesis_credentials_provider = CredentialsProviderConfig(KINESIS_CREDENTIALS)
        self.dynamodb_credentials_provider = CredentialsProviderConfig(DYNAMODB_CREDENTIALS)
        self.cloudwatch_credentials_provider = CredentialsProviderConfig(CLOUDWATCH_CREDENTIALS)
        self.fanout_config = FanoutStrategyConfig(FANOUT_CONFIG)
        self.polling_config = PollingStrategyConfig(POLLING_CONFIG)

    @property
    def retrieval_mode(self) -> RetrievalMode:
        return self._retrieval_mode

    @retrieval_mode.setter
    def retrieval_mode(self, value: RetrievalMode | str) -> None:
        # Unknown strings fail here, before anything is assigned.
        if not isinstance(value, RetrievalMode):
            value = RetrievalMode.parse(value)
        self._retrieval_mode = value

    @property
    def nodes(self) -> dict[str, NestedConfigNode]:
        return {
            KINESIS_CREDENTIALS: self.kinesis_credentials_provider,
            DYNAMODB_CREDENTIALS: self.dynamodb_credentials_provider,
            CLOUDWATCH_CREDENTIALS: self.cloudwatch_credentials_provider,
            FANOUT_CONFIG: self.fanout_config,
            POLLING_CONFIG: self.polling_config,
        }

    def node(self, name: str) -> NestedConfigNode | None:
        return self.nodes.get(name)
