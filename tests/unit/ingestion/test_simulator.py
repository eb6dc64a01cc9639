"""Tests for the synthetic patient data simulator."""

from unittest.mock import patch

import pytest

from adapters.simulator import PatientDataSimulator
from vitals.domain.models import MeasurementKind
from vitals.services.measurement_store import MeasurementStore


def test_generate_produces_every_vital_sign() -> None:
    simulator = PatientDataSimulator(patient_count=2, seed=1)

    readings = simulator.generate(1, now_millis=5000)
    kinds = {m.kind for m in readings}

    assert {
        MeasurementKind.SYSTOLIC_PRESSURE,
        MeasurementKind.DIASTOLIC_PRESSURE,
        MeasurementKind.SATURATION,
        MeasurementKind.HEART_RATE_PROXY,
        MeasurementKind.CHOLESTEROL,
        MeasurementKind.WHITE_BLOOD_CELLS,
        MeasurementKind.RED_BLOOD_CELLS,
    } <= kinds
    assert all(m.timestamp_millis == 5000 and m.patient_id == 1 for m in readings)


def test_values_stay_in_physiological_ranges() -> None:
    simulator = PatientDataSimulator(patient_count=1, seed=3)

    for tick in range(500):
        for m in simulator.generate(1, tick):
            if m.kind == MeasurementKind.SYSTOLIC_PRESSURE:
                assert 90 <= m.value <= 180
            elif m.kind == MeasurementKind.DIASTOLIC_PRESSURE:
                assert 60 <= m.value <= 120
            elif m.kind == MeasurementKind.SATURATION:
                assert 90 <= m.value <= 100
            elif m.kind == MeasurementKind.ALERT:
                assert m.value in (0.0, 1.0)


def test_seed_makes_series_reproducible() -> None:
    first = PatientDataSimulator(patient_count=1, seed=42).generate(1, 0)
    second = PatientDataSimulator(patient_count=1, seed=42).generate(1, 0)
    assert first == second


def test_unknown_patient_rejected() -> None:
    simulator = PatientDataSimulator(patient_count=1)
    with pytest.raises(ValueError, match="Invalid patient_id"):
        simulator.generate(2, 0)


def test_tick_records_for_all_patients() -> None:
    store = MeasurementStore()
    simulator = PatientDataSimulator(patient_count=3, seed=5)

    recorded = simulator.tick(store, 1000)

    assert store.list_patients() == {1, 2, 3}
    assert recorded == sum(store.count(pid) for pid in (1, 2, 3))


async def test_run_records_each_tick() -> None:
    store = MeasurementStore()
    simulator = PatientDataSimulator(patient_count=2, seed=9)

    with patch("asyncio.sleep") as mock_sleep:  # Skip sleep delays
        total = await simulator.run(store, ticks=3, interval_seconds=1.0)

    assert total == store.count(1) + store.count(2)
    assert store.count(1) >= 3 * 7
    assert mock_sleep.call_count == 2
