"""Tests for the compound hypotensive-hypoxemia detector."""

import pytest

from vitals.config import ONE_MINUTE_MILLIS
from vitals.domain.models import Severity
from vitals.services.detectors.hypotensive_hypoxemia import HypotensiveHypoxemiaDetector
from vitals.services.measurement_store import MeasurementStore


@pytest.fixture
def detector() -> HypotensiveHypoxemiaDetector:
    return HypotensiveHypoxemiaDetector()


def test_both_signals_low_raise_one_alert(
    detector: HypotensiveHypoxemiaDetector, store: MeasurementStore, now: int
) -> None:
    store.record(1, "SystolicPressure", 89.0, now - 60_000)
    store.record(1, "Saturation", 91.0, now - 1000)
    store.record(1, "Saturation", 90.0, now - 500)

    alerts = detector.evaluate(1, store, now)

    assert len(alerts) == 1
    assert alerts[0].condition == "Hypotensive Hypoxemia Alert"
    assert alerts[0].timestamp_millis == now
    assert alerts[0].severity is Severity.CRITICAL


def test_normal_pressure_raises_nothing(
    detector: HypotensiveHypoxemiaDetector, store: MeasurementStore, now: int
) -> None:
    store.record(1, "SystolicPressure", 91.0, now - 1000)
    store.record(1, "Saturation", 91.0, now - 1000)

    assert detector.evaluate(1, store, now) == []


def test_normal_saturation_raises_nothing(
    detector: HypotensiveHypoxemiaDetector, store: MeasurementStore, now: int
) -> None:
    store.record(1, "SystolicPressure", 85.0, now - 1000)
    store.record(1, "Saturation", 92.0, now - 1000)

    assert detector.evaluate(1, store, now) == []


def test_signals_must_share_the_window(
    detector: HypotensiveHypoxemiaDetector, store: MeasurementStore, now: int
) -> None:
    store.record(1, "SystolicPressure", 85.0, now - 10 * ONE_MINUTE_MILLIS - 1)
    store.record(1, "Saturation", 88.0, now - 1000)

    assert detector.evaluate(1, store, now) == []


def test_diastolic_does_not_count(
    detector: HypotensiveHypoxemiaDetector, store: MeasurementStore, now: int
) -> None:
    store.record(1, "DiastolicPressure", 50.0, now - 1000)
    store.record(1, "Saturation", 88.0, now - 1000)

    assert detector.evaluate(1, store, now) == []
