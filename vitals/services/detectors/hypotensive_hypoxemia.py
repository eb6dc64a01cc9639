"""Compound detector: low systolic pressure together with low saturation."""

from vitals.config import HypotensiveHypoxemiaConfig
from vitals.domain.models import Alert, MeasurementKind, Severity
from vitals.services.measurement_store import MeasurementStore


class HypotensiveHypoxemiaDetector:
    """
    Raises one alert when, within the window, any systolic reading is below the
    pressure limit and any saturation reading is below the saturation limit.

    The two readings need not share a timestamp.
    """

    name = "hypotensive_hypoxemia"

    def __init__(self, config: HypotensiveHypoxemiaConfig | None = None) -> None:
        self.config = config or HypotensiveHypoxemiaConfig()

    def evaluate(self, patient_id: int, store: MeasurementStore, now_millis: int) -> list[Alert]:
        window = store.range(patient_id, now_millis - self.config.window_millis, now_millis)

        low_pressure = any(
            m.value < self.config.systolic_below
            for m in window.of_kind(MeasurementKind.SYSTOLIC_PRESSURE)
        )
        low_saturation = any(
            m.value < self.config.saturation_below
            for m in window.of_kind(MeasurementKind.SATURATION)
        )

        if low_pressure and low_saturation:
            return [
                Alert(
                    patient_id=patient_id,
                    condition="Hypotensive Hypoxemia Alert",
                    timestamp_millis=now_millis,
                    severity=Severity.CRITICAL,
                )
            ]
        return []
