"""
Cardiac-rhythm detector.

Looks at the last hour of heart-rate proxy samples:
- each sample outside the normal rate band raises an abnormal-rate alert
- the first gap between samples deviating from the mean gap by more than the
  allowed fraction raises a single irregular-beat alert
"""

from statistics import mean

from vitals.config import CardiacRhythmConfig
from vitals.domain.models import Alert, Measurement, MeasurementKind, Severity
from vitals.services.measurement_store import MeasurementStore


class CardiacRhythmDetector:
    name = "cardiac_rhythm"

    def __init__(self, config: CardiacRhythmConfig | None = None) -> None:
        self.config = config or CardiacRhythmConfig()

    def evaluate(self, patient_id: int, store: MeasurementStore, now_millis: int) -> list[Alert]:
        samples = (
            store.range(patient_id, now_millis - self.config.window_millis, now_millis)
            .of_kind(MeasurementKind.HEART_RATE_PROXY)
            .chronological()
        )
        if not samples:
            return []

        alerts = [
            Alert(
                patient_id=patient_id,
                condition="Abnormal Heart Rate Alert",
                timestamp_millis=m.timestamp_millis,
                severity=Severity.HIGH,
            )
            for m in samples
            if m.value < self.config.rate_low or m.value > self.config.rate_high
        ]

        irregular = self._first_irregular_beat(samples)
        if irregular is not None:
            alerts.append(
                Alert(
                    patient_id=patient_id,
                    condition="Irregular Beat Alert",
                    timestamp_millis=irregular.timestamp_millis,
                    severity=Severity.MEDIUM,
                )
            )
        return alerts

    def _first_irregular_beat(self, samples: list[Measurement]) -> Measurement | None:
        if len(samples) < 2:
            return None

        intervals = [
            curr.timestamp_millis - prev.timestamp_millis
            for prev, curr in zip(samples, samples[1:])
        ]
        avg_interval = mean(intervals)
        allowed = self.config.allowed_interval_variation * avg_interval

        for interval, later in zip(intervals, samples[1:]):
            if abs(interval - avg_interval) > allowed:
                return later
        return None
