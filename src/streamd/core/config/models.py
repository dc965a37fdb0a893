"""
Resolved, immutable configuration types.

Everything here is a frozen dataclass: once
:class:`~streamd.core.config.resolver.ConfigurationResolver` has produced a
:class:`ResolvedConfiguration`, the daemon runtime can read it without
re-validating and nothing can change it underneath.  Equality is
field-for-field, so two resolutions of the same settings compare equal.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Union

from .components import InitialPosition, MetricsLevel, RetrievalMode

DEFAULT_MAX_RECORDS = 10_000
UNLIMITED_LEASES = 2_147_483_647


# ── Retrieval strategies ─────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class FanOutConfig:
    """Enhanced fan-out: a dedicated-throughput consumer per application."""

    stream_name: str
    application_name: str
    consumer_arn: str | None = None
    consumer_name: str | None = None
    max_describe_stream_summary_retries: int = 10
    max_describe_stream_consumer_retries: int = 10
    register_stream_consumer_retries: int = 10
    retry_backoff: timedelta = timedelta(seconds=1)


@dataclass(frozen=True, slots=True)
class PollingConfig:
    """Polling: repeated batch requests of up to ``max_records`` records."""

    stream_name: str
    max_records: int = DEFAULT_MAX_RECORDS
    idle_time_between_reads: timedelta = timedelta(seconds=1)
    max_get_records_thread_pool: int | None = None
    retry_get_records_in_seconds: int | None = None


RetrievalSpecificConfig = Union[FanOutConfig, PollingConfig]


# ── Sections ─────────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class LeaseManagementConfig:
    stream_name: str
    application_name: str
    worker_identifier: str | None = None
    max_leases_for_worker: int = UNLIMITED_LEASES
    max_leases_to_steal_at_one_time: int = 1
    failover_time: timedelta = timedelta(seconds=10)
    shard_sync_interval: timedelta = timedelta(seconds=60)
    cleanup_leases_upon_shard_completion: bool = True
    initial_lease_table_read_capacity: int = 10
    initial_lease_table_write_capacity: int = 10


@dataclass(frozen=True, slots=True)
class RetrievalConfig:
    stream_name: str
    application_name: str
    initial_position: InitialPosition
    retrieval_specific_config: RetrievalSpecificConfig
    initial_position_timestamp: datetime | None = None


@dataclass(frozen=True, slots=True)
class ProcessorConfig:
    call_process_records_even_for_empty_record_list: bool = False
    parent_shard_poll_interval: timedelta = timedelta(seconds=10)
    task_backoff_time: timedelta = timedelta(milliseconds=500)


@dataclass(frozen=True, slots=True)
class MetricsConfig:
    level: MetricsLevel = MetricsLevel.DETAILED
    buffer_time: timedelta = timedelta(seconds=10)
    max_queue_size: int = 10_000


# ── Aggregate ────────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class ResolvedConfiguration:
    """The single, frozen result of a resolution.

    ``retrieval.retrieval_specific_config`` holds exactly one strategy,
    matching ``retrieval_mode`` (never ``UNSET``).
    """

    application_name: str
    stream_name: str
    retrieval_mode: RetrievalMode
    lease_management: LeaseManagementConfig
    retrieval: RetrievalConfig
    processor: ProcessorConfig
    metrics: MetricsConfig
    kinesis_credentials: Any
    dynamodb_credentials: Any
    cloudwatch_credentials: Any
    worker_identifier: str | None = None
    region_name: str | None = None
