"""
Synthetic patient data producer.

Each vital sign follows a bounded random walk per patient, so values drift the
way bedside monitors do instead of jumping around. Intended for demos and load
testing the monitoring pipeline, not for clinical realism.
"""

import asyncio
import random
import time

import structlog

from vitals.domain.errors import InvalidMeasurementError
from vitals.domain.models import Measurement, MeasurementKind
from vitals.services.measurement_store import MeasurementStore

logger = structlog.get_logger(__name__)


def _clamp(value: float, low: float, high: float) -> float:
    return min(max(value, low), high)


class PatientState:
    """Last generated values for one patient."""

    def __init__(self, rng: random.Random) -> None:
        self.systolic = 110 + rng.randrange(20)
        self.diastolic = 70 + rng.randrange(15)
        self.saturation = 95 + rng.randrange(6)
        self.heart_rate = 60.0 + rng.uniform(0, 20)
        self.alert_active = False


class PatientDataSimulator:
    """
    Generates measurements for patients 1..patient_count.

    Passing a seed makes the generated series reproducible.
    """

    def __init__(self, patient_count: int, seed: int | None = None) -> None:
        if patient_count < 1:
            raise ValueError("patient_count must be at least 1")
        self.patient_count = patient_count
        self.rng = random.Random(seed)
        self.patients = {pid: PatientState(self.rng) for pid in range(1, patient_count + 1)}
        self.logger = logger.bind(component="patient_data_simulator")

    def generate(self, patient_id: int, now_millis: int) -> list[Measurement]:
        """Produce one reading of every vital sign for a patient."""
        state = self.patients.get(patient_id)
        if state is None:
            raise ValueError(f"Invalid patient_id: {patient_id}")

        rng = self.rng
        state.systolic = _clamp(state.systolic + rng.randint(-2, 2), 90, 180)
        state.diastolic = _clamp(state.diastolic + rng.randint(-2, 2), 60, 120)
        state.saturation = _clamp(state.saturation + rng.randint(-1, 1), 90, 100)
        state.heart_rate = _clamp(state.heart_rate + rng.uniform(-3, 3), 40, 130)

        readings: list[tuple[MeasurementKind, float]] = [
            (MeasurementKind.SYSTOLIC_PRESSURE, float(state.systolic)),
            (MeasurementKind.DIASTOLIC_PRESSURE, float(state.diastolic)),
            (MeasurementKind.SATURATION, float(state.saturation)),
            (MeasurementKind.HEART_RATE_PROXY, round(state.heart_rate, 1)),
            (MeasurementKind.CHOLESTEROL, round(150 + rng.uniform(0, 50), 2)),
            (MeasurementKind.WHITE_BLOOD_CELLS, round(4 + rng.uniform(0, 6), 2)),
            (MeasurementKind.RED_BLOOD_CELLS, round(4.5 + rng.uniform(0, 1.5), 2)),
        ]

        # Alert marker: resolves 90% of the time, triggers with a small probability
        if state.alert_active and rng.random() < 0.9:
            state.alert_active = False
            readings.append((MeasurementKind.ALERT, 0.0))
        elif not state.alert_active and rng.random() < 0.1:
            state.alert_active = True
            readings.append((MeasurementKind.ALERT, 1.0))

        return [
            Measurement(patient_id=patient_id, kind=kind, value=value, timestamp_millis=now_millis)
            for kind, value in readings
        ]

    def tick(self, store: MeasurementStore, now_millis: int) -> int:
        """Generate and record one round of readings for every patient."""
        recorded = 0
        for patient_id in self.patients:
            for m in self.generate(patient_id, now_millis):
                try:
                    store.record(m.patient_id, m.kind, m.value, m.timestamp_millis)
                except InvalidMeasurementError as e:
                    self.logger.warning("simulated_measurement_rejected", error=str(e))
                    continue
                recorded += 1
        return recorded

    async def run(
        self,
        store: MeasurementStore,
        ticks: int,
        interval_seconds: float = 1.0,
    ) -> int:
        """
        Record `ticks` rounds of readings, one round every `interval_seconds`.

        Returns:
            int: total number of measurements recorded.
        """
        total = 0
        self.logger.info("simulation_started", patients=self.patient_count, ticks=ticks)
        for i in range(ticks):
            total += self.tick(store, int(time.time() * 1000))
            if i < ticks - 1:
                await asyncio.sleep(interval_seconds)
        self.logger.info("simulation_finished", recorded=total)
        return total
