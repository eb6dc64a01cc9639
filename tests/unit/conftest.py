"""Shared fixtures for unit tests."""

import pytest

from vitals.services.alert_sinks import CollectingAlertSink
from vitals.services.measurement_store import MeasurementStore

# Fixed evaluation instant used across detector tests
NOW = 1_700_000_000_000


@pytest.fixture
def store() -> MeasurementStore:
    return MeasurementStore()


@pytest.fixture
def sink() -> CollectingAlertSink:
    return CollectingAlertSink()


@pytest.fixture
def now() -> int:
    return NOW
