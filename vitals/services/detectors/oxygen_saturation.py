"""Oxygen-saturation detector: low saturation and rapid drops over the last ten minutes."""

from vitals.config import OxygenSaturationConfig
from vitals.domain.models import Alert, Measurement, MeasurementKind, Severity
from vitals.services.measurement_store import MeasurementStore


class OxygenSaturationDetector:
    name = "oxygen_saturation"

    def __init__(self, config: OxygenSaturationConfig | None = None) -> None:
        self.config = config or OxygenSaturationConfig()

    def evaluate(self, patient_id: int, store: MeasurementStore, now_millis: int) -> list[Alert]:
        readings = (
            store.range(patient_id, now_millis - self.config.window_millis, now_millis)
            .of_kind(MeasurementKind.SATURATION)
            .chronological()
        )
        alerts: list[Alert] = []

        # First low reading only
        for m in readings:
            if m.value < self.config.low_threshold:
                alerts.append(
                    Alert(
                        patient_id=patient_id,
                        condition="Low Saturation Alert",
                        timestamp_millis=m.timestamp_millis,
                        severity=Severity.HIGH,
                    )
                )
                break

        for prev, curr in zip(readings, readings[1:]):
            if drop_percent(prev, curr) >= self.config.rapid_drop_percent:
                alerts.append(
                    Alert(
                        patient_id=patient_id,
                        condition="Rapid Blood Oxygen Drop Alert",
                        timestamp_millis=curr.timestamp_millis,
                        severity=Severity.HIGH,
                    )
                )
                break

        return alerts


def drop_percent(prev: Measurement, curr: Measurement) -> float:
    """Relative drop from prev to curr in percent; 0 when prev is zero."""
    if prev.value == 0:
        return 0.0
    return 100.0 * (prev.value - curr.value) / prev.value
