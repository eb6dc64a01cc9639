"""
Blood-pressure detector.

Systolic and diastolic readings are judged independently over the last day:
- every reading strictly outside the critical band raises a critical alert
- the three most recent readings raise a trend alert when each step moves
  more than the configured amount in the same direction
"""

import structlog

from vitals.config import BloodPressureConfig
from vitals.domain.models import Alert, Measurement, MeasurementKind, Severity, Window
from vitals.services.measurement_store import MeasurementStore

logger = structlog.get_logger(__name__)

_KIND_LABELS = {
    MeasurementKind.SYSTOLIC_PRESSURE: "Systolic",
    MeasurementKind.DIASTOLIC_PRESSURE: "Diastolic",
}


class BloodPressureDetector:
    name = "blood_pressure"

    def __init__(self, config: BloodPressureConfig | None = None) -> None:
        self.config = config or BloodPressureConfig()
        self.logger = logger.bind(component="blood_pressure_detector")

    def _bounds(self, kind: MeasurementKind) -> tuple[float, float]:
        if kind == MeasurementKind.SYSTOLIC_PRESSURE:
            return self.config.systolic_low, self.config.systolic_high
        return self.config.diastolic_low, self.config.diastolic_high

    def evaluate(self, patient_id: int, store: MeasurementStore, now_millis: int) -> list[Alert]:
        window = store.range(patient_id, now_millis - self.config.window_millis, now_millis)
        alerts: list[Alert] = []
        for kind in (MeasurementKind.SYSTOLIC_PRESSURE, MeasurementKind.DIASTOLIC_PRESSURE):
            readings = window.of_kind(kind)
            if not readings:
                continue
            alerts.extend(self._critical_alerts(patient_id, kind, readings))
            trend_alert = self._trend_alert(patient_id, kind, readings, now_millis)
            if trend_alert is not None:
                alerts.append(trend_alert)
        return alerts

    def _critical_alerts(
        self, patient_id: int, kind: MeasurementKind, readings: Window
    ) -> list[Alert]:
        low, high = self._bounds(kind)
        condition = f"Critical {_KIND_LABELS[kind]} Pressure Alert"
        return [
            Alert(
                patient_id=patient_id,
                condition=condition,
                timestamp_millis=m.timestamp_millis,
                severity=Severity.CRITICAL,
            )
            for m in readings.chronological()
            if m.value > high or m.value < low
        ]

    def _trend_alert(
        self, patient_id: int, kind: MeasurementKind, readings: Window, now_millis: int
    ) -> Alert | None:
        recent = readings.newest_first()[: self.config.trend_samples]
        if len(recent) < self.config.trend_samples:
            return None

        direction = trend_direction(recent, self.config.trend_step)
        if direction is None:
            return None

        self.logger.debug(
            "pressure_trend_detected",
            patient_id=patient_id,
            kind=kind.value,
            direction=direction,
        )
        return Alert(
            patient_id=patient_id,
            condition=f"{_KIND_LABELS[kind]} Pressure {direction} Trend Alert",
            timestamp_millis=now_millis,
        )


def trend_direction(newest_first: list[Measurement], step: float) -> str | None:
    """
    Return "Increasing", "Decreasing" or None for readings ordered newest first.

    Every consecutive pair must move strictly more than `step` in the same direction.
    """
    pairs = list(zip(newest_first, newest_first[1:]))
    if not pairs:
        return None
    if all(newer.value - older.value > step for newer, older in pairs):
        return "Increasing"
    if all(older.value - newer.value > step for newer, older in pairs):
        return "Decreasing"
    return None
