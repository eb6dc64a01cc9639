"""Tests for the PatientMonitoringService wiring."""

import math

import pytest

from vitals.config import AppConfig, MonitoringConfig
from vitals.services.alert_sinks import CollectingAlertSink
from vitals.services.monitoring import PatientMonitoringService


@pytest.fixture
def service(sink: CollectingAlertSink) -> PatientMonitoringService:
    config = AppConfig(monitoring=MonitoringConfig(evaluation_interval_seconds=0.01))
    return PatientMonitoringService(config, sink=sink)


def test_service_registers_all_detectors(service: PatientMonitoringService) -> None:
    names = {d.name for d in service.engine.detectors}
    assert names == {
        "blood_pressure",
        "oxygen_saturation",
        "cardiac_rhythm",
        "hypotensive_hypoxemia",
    }


def test_ingest_rejects_non_finite(service: PatientMonitoringService, now: int) -> None:
    assert service.ingest(1, "Saturation", math.nan, now) is None
    assert service.store.list_patients() == set()


def test_hypotensive_hypoxemia_end_to_end(
    service: PatientMonitoringService, sink: CollectingAlertSink, now: int
) -> None:
    service.ingest(1, "SystolicPressure", 89.0, now - 1000)
    service.ingest(1, "Saturation", 91.0, now - 1000)

    service.evaluate(1, now)

    assert sink.conditions().count("Hypotensive Hypoxemia Alert") == 1
    assert "Critical Systolic Pressure Alert" in sink.conditions()
    assert "Low Saturation Alert" in sink.conditions()


def test_evaluate_all_uses_engine(
    service: PatientMonitoringService, sink: CollectingAlertSink, now: int
) -> None:
    service.ingest(1, "HeartRateProxy", 30.0, now - 1000)
    service.ingest(2, "HeartRateProxy", 70.0, now - 1000)

    assert service.evaluate_all(now) == 1
    assert [a.patient_id for a in sink.alerts] == [1]


async def test_run_continuous_stops_after_cycles(
    service: PatientMonitoringService, sink: CollectingAlertSink, now: int
) -> None:
    service.ingest(1, "HeartRateProxy", 30.0, now - 1000)

    counts = [count async for count in service.run_continuous(lambda: now, cycles=3)]

    assert counts == [1, 1, 1]
    assert len(sink.alerts) == 3


async def test_stop_ends_unbounded_run(
    service: PatientMonitoringService, sink: CollectingAlertSink, now: int
) -> None:
    service.ingest(1, "HeartRateProxy", 30.0, now - 1000)

    counts = []
    async for count in service.run_continuous(lambda: now):
        counts.append(count)
        await service.stop()

    assert counts == [1]
    assert service._is_running is False
