"""Tests for streamd.core.config.resolver: ConfigurationResolver."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from streamd.core.config.components import InitialPosition, RetrievalMode
from streamd.core.config.daemon import DaemonConfiguration
from streamd.core.config.models import FanOutConfig, PollingConfig, ResolvedConfiguration
from streamd.core.config.resolver import ConfigurationResolver
from streamd.core.credentials import DefaultCredentialsProvider, ProfileCredentialsProvider
from streamd.core.errors import ConversionError, ResolutionError, ValidationError

# ── Lease management ─────────────────────────────────────────────────────


class TestLeaseManagement:
    def test_set_primitive_value(self, resolver: ConfigurationResolver, base_configuration: DaemonConfiguration):
        base_configuration.max_leases_for_worker = 10
        resolved = resolver.resolve(base_configuration)
        assert resolved.lease_management.max_leases_for_worker == 10

    def test_defaults(self, resolver: ConfigurationResolver, base_configuration: DaemonConfiguration):
        lease = resolver.resolve(base_configuration).lease_management
        assert lease.max_leases_for_worker == 2_147_483_647
        assert lease.max_leases_to_steal_at_one_time == 1
        assert lease.cleanup_leases_upon_shard_completion is True
        assert lease.application_name == "Test"


# ── Retrieval strategy selection ─────────────────────────────────────────


class TestRetrievalSelection:
    def test_default_retrieval_config(self, resolver: ConfigurationResolver, base_configuration):
        resolved = resolver.resolve(base_configuration)
        assert isinstance(resolved.retrieval.retrieval_specific_config, FanOutConfig)
        assert resolved.retrieval_mode is RetrievalMode.FANOUT

    def test_default_with_polling_config_set(self, resolver: ConfigurationResolver, base_configuration):
        base_configuration.max_records = 10
        resolved = resolver.resolve(base_configuration)
        strategy = resolved.retrieval.retrieval_specific_config
        assert isinstance(strategy, PollingConfig)
        assert strategy.max_records == 10

    def test_fanout_retrieval_mode(self, resolver: ConfigurationResolver, base_configuration):
        base_configuration.retrieval_mode = RetrievalMode.FANOUT
        resolved = resolver.resolve(base_configuration)
        assert isinstance(resolved.retrieval.retrieval_specific_config, FanOutConfig)

    def test_polling_retrieval_mode(self, resolver: ConfigurationResolver, base_configuration):
        base_configuration.retrieval_mode = RetrievalMode.POLLING
        resolved = resolver.resolve(base_configuration)
        strategy = resolved.retrieval.retrieval_specific_config
        assert isinstance(strategy, PollingConfig)
        assert strategy.max_records == 10_000

    def test_explicit_fanout_overrides_max_records(self, resolver: ConfigurationResolver, base_configuration):
        base_configuration.max_records = 10
        base_configuration.retrieval_mode = RetrievalMode.FANOUT
        resolved = resolver.resolve(base_configuration)
        assert isinstance(resolved.retrieval.retrieval_specific_config, FanOutConfig)

    def test_fanout_consumer_arn(self, resolver: ConfigurationResolver, base_configuration):
        base_configuration.retrieval_mode = RetrievalMode.FANOUT
        base_configuration.fanout_config.set("consumerArn", "test-consumer")
        strategy = resolver.resolve(base_configuration).retrieval.retrieval_specific_config
        assert isinstance(strategy, FanOutConfig)
        assert strategy.consumer_arn == "test-consumer"
        assert strategy.consumer_name == "Test"

    def test_unused_strategy_is_not_materialized(self, resolver: ConfigurationResolver, base_configuration):
        base_configuration.polling_config.set("maxGetRecordsThreadPool", "not-a-number")
        resolved = resolver.resolve(base_configuration)
        assert isinstance(resolved.retrieval.retrieval_specific_config, FanOutConfig)

    def test_chosen_strategy_bad_value_raises(self, resolver: ConfigurationResolver, base_configuration):
        base_configuration.retrieval_mode = RetrievalMode.POLLING
        base_configuration.polling_config.set("maxGetRecordsThreadPool", "not-a-number")
        with pytest.raises(ConversionError) as info:
            resolver.resolve(base_configuration)
        assert info.value.setting == "pollingConfig.maxGetRecordsThreadPool"


# ── Credentials ──────────────────────────────────────────────────────────


class TestCredentials:
    def test_kinesis_provider_materialized(self, resolver: ConfigurationResolver, base_configuration):
        resolved = resolver.resolve(base_configuration)
        assert isinstance(resolved.kinesis_credentials, DefaultCredentialsProvider)

    def test_other_providers_fall_back_to_kinesis(self, resolver: ConfigurationResolver, base_configuration):
        resolved = resolver.resolve(base_configuration)
        assert resolved.dynamodb_credentials is resolved.kinesis_credentials
        assert resolved.cloudwatch_credentials is resolved.kinesis_credentials

    def test_dynamodb_provider_overrides(self, resolver: ConfigurationResolver, base_configuration):
        base_configuration.dynamodb_credentials_provider.set("class", "ProfileCredentialsProvider")
        base_configuration.dynamodb_credentials_provider.set("profileName", "leases")
        resolved = resolver.resolve(base_configuration)
        assert resolved.dynamodb_credentials == ProfileCredentialsProvider("leases")
        assert resolved.cloudwatch_credentials is resolved.kinesis_credentials

    def test_arguments_without_class_rejected(self, resolver: ConfigurationResolver, base_configuration):
        base_configuration.cloudwatch_credentials_provider.set("profileName", "metrics")
        with pytest.raises(ValidationError) as info:
            resolver.resolve(base_configuration)
        assert info.value.setting == "cloudWatchCredentialsProvider.class"

    def test_unknown_provider(self, resolver: ConfigurationResolver, base_configuration):
        base_configuration.kinesis_credentials_provider.set("class", "com.example.Nope")
        with pytest.raises(ResolutionError, match="Unknown implementation type"):
            resolver.resolve(base_configuration)


# ── Validation ───────────────────────────────────────────────────────────


class TestValidation:
    @pytest.mark.parametrize(
        "attribute, setting",
        [("application_name", "applicationName"), ("stream_name", "streamName")],
    )
    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_required_names(self, resolver: ConfigurationResolver, base_configuration, attribute, setting, value):
        setattr(base_configuration, attribute, value)
        with pytest.raises(ValidationError, match=setting) as info:
            resolver.resolve(base_configuration)
        assert info.value.setting == setting

    def test_credentials_provider_required(self, resolver: ConfigurationResolver):
        configuration = DaemonConfiguration()
        configuration.application_name = "app"
        configuration.stream_name = "orders"
        with pytest.raises(ValidationError) as info:
            resolver.resolve(configuration)
        assert info.value.setting == "kinesisCredentialsProvider"

    @pytest.mark.parametrize("attribute", ["max_leases_for_worker", "max_records", "initial_lease_table_read_capacity"])
    def test_positive_integers(self, resolver: ConfigurationResolver, base_configuration, attribute):
        setattr(base_configuration, attribute, 0)
        with pytest.raises(ValidationError, match="must be positive"):
            resolver.resolve(base_configuration)

    def test_at_timestamp_requires_timestamp(self, resolver: ConfigurationResolver, base_configuration):
        base_configuration.initial_position = InitialPosition.AT_TIMESTAMP
        with pytest.raises(ValidationError) as info:
            resolver.resolve(base_configuration)
        assert info.value.setting == "initialPositionInStreamTimestamp"

    def test_at_timestamp_with_timestamp(self, resolver: ConfigurationResolver, base_configuration):
        moment = datetime(2024, 1, 1, tzinfo=timezone.utc)
        base_configuration.initial_position = InitialPosition.AT_TIMESTAMP
        base_configuration.initial_position_timestamp = moment
        retrieval = resolver.resolve(base_configuration).retrieval
        assert retrieval.initial_position is InitialPosition.AT_TIMESTAMP
        assert retrieval.initial_position_timestamp == moment


# ── Immutability / idempotency ───────────────────────────────────────────


class TestResolvedConfiguration:
    def test_resolving_twice_gives_equal_results(self, resolver: ConfigurationResolver, base_configuration):
        base_configuration.max_records = 42
        base_configuration.polling_config.set("idleTimeBetweenReadsInMillis", "750")
        first = resolver.resolve(base_configuration)
        second = resolver.resolve(base_configuration)
        assert first == second
        assert first is not second

    def test_result_is_frozen(self, resolver: ConfigurationResolver, base_configuration):
        resolved = resolver.resolve(base_configuration)
        assert isinstance(resolved, ResolvedConfiguration)
        with pytest.raises(AttributeError):
            resolved.stream_name = "other"  # type: ignore[misc]
        with pytest.raises(AttributeError):
            resolved.lease_management.max_leases_for_worker = 1  # type: ignore[misc]

    def test_later_mutation_does_not_leak(self, resolver: ConfigurationResolver, base_configuration):
        resolved = resolver.resolve(base_configuration)
        base_configuration.max_leases_for_worker = 3
        base_configuration.fanout_config.set("consumerArn", "late")
        assert resolved.lease_management.max_leases_for_worker == 2_147_483_647
        assert resolved.retrieval.retrieval_specific_config.consumer_arn is None
