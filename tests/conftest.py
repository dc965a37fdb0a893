"""
Shared pytest fixtures for streamd tests.

This module provides:
- Settings-cache cleanup for test isolation
- Fresh converter / factory / binder / resolver instances
- A minimal valid DaemonConfiguration
"""

import sys
from pathlib import Path
from typing import Generator

import pytest

# Ensure streamd package is importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from streamd.core.config import (
    ConfigurationResolver,
    DaemonConfiguration,
    NamedClassFactory,
    PropertyBinder,
    TypeConverterRegistry,
    clear_settings_cache,
    default_converters,
    default_factory,
)


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Auto-mark tests based on their location."""
    for item in items:
        test_path = Path(item.fspath).relative_to(Path(__file__).parent)

        if "integration" in str(test_path):
            item.add_marker(pytest.mark.integration)

        markers = {mark.name for mark in item.iter_markers()}
        if not markers.intersection({"unit", "integration"}):
            item.add_marker(pytest.mark.unit)


@pytest.fixture(autouse=True)
def clean_settings_cache() -> Generator[None, None, None]:
    """Clear the cached ResolverSettings before and after each test."""
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def converters() -> TypeConverterRegistry:
    return default_converters()


@pytest.fixture
def factory() -> NamedClassFactory:
    return default_factory()


@pytest.fixture
def binder(converters: TypeConverterRegistry) -> PropertyBinder:
    return PropertyBinder(converters)


@pytest.fixture
def resolver(converters: TypeConverterRegistry, factory: NamedClassFactory) -> ConfigurationResolver:
    return ConfigurationResolver(converters, factory)


@pytest.fixture
def base_configuration() -> DaemonConfiguration:
    """Smallest configuration that resolves: names plus a credentials provider."""
    configuration = DaemonConfiguration()
    configuration.application_name = "Test"
    configuration.stream_name = "Test"
    configuration.kinesis_credentials_provider.set("class", "DefaultCredentialsProvider")
    return configuration
