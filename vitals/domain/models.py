"""
Domain models for patient vitals monitoring.

These models represent the core clinical concepts and are framework-agnostic.
They use Pydantic for validation but could be swapped to dataclasses if needed.
"""

from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, ConfigDict, field_validator


class MeasurementKind(str, Enum):
    """Kinds of physiological measurements the producers emit."""

    SYSTOLIC_PRESSURE = "SystolicPressure"
    DIASTOLIC_PRESSURE = "DiastolicPressure"
    SATURATION = "Saturation"
    HEART_RATE_PROXY = "HeartRateProxy"

    # Stored but not consumed by any detector
    CHOLESTEROL = "Cholesterol"
    WHITE_BLOOD_CELLS = "WhiteBloodCells"
    RED_BLOOD_CELLS = "RedBloodCells"
    ALERT = "Alert"


# Wire labels that name a known kind differently
KIND_ALIASES: dict[str, MeasurementKind] = {
    "ECG": MeasurementKind.HEART_RATE_PROXY,
}


class Severity(str, Enum):
    """Alert severity levels, used to mark priority alerts."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


def normalize_kind(kind: "MeasurementKind | str") -> "MeasurementKind | str":
    """Map a raw label to its MeasurementKind, keeping unknown labels as strings."""
    if isinstance(kind, MeasurementKind):
        return kind
    if kind in KIND_ALIASES:
        return KIND_ALIASES[kind]
    try:
        return MeasurementKind(kind)
    except ValueError:
        return kind


class Measurement(BaseModel):
    """Single timestamped reading for one patient."""

    model_config = ConfigDict(frozen=True)  # Immutable once recorded

    patient_id: int
    kind: MeasurementKind | str
    value: float
    timestamp_millis: int

    @field_validator("kind", mode="before")
    @classmethod
    def _normalize_kind(cls, v: "MeasurementKind | str") -> "MeasurementKind | str":
        return normalize_kind(v)


class Alert(BaseModel):
    """A clinical condition detected for a patient at a point in time."""

    model_config = ConfigDict(frozen=True)

    patient_id: int
    condition: str
    timestamp_millis: int
    severity: Severity = Severity.HIGH

    @property
    def is_priority(self) -> bool:
        return self.severity == Severity.CRITICAL


@dataclass(frozen=True)
class Window:
    """Read-only view over a patient's measurements in a time range."""

    patient_id: int
    start_millis: int
    end_millis: int
    measurements: tuple[Measurement, ...] = ()

    def __iter__(self) -> Iterator[Measurement]:
        return iter(self.measurements)

    def __len__(self) -> int:
        return len(self.measurements)

    def __bool__(self) -> bool:
        return bool(self.measurements)

    def of_kind(self, kind: MeasurementKind | str) -> "Window":
        """Restrict the window to a single measurement kind."""
        kind = normalize_kind(kind)
        return Window(
            patient_id=self.patient_id,
            start_millis=self.start_millis,
            end_millis=self.end_millis,
            measurements=tuple(m for m in self.measurements if m.kind == kind),
        )

    def chronological(self) -> list[Measurement]:
        """Measurements ordered oldest first (stable for equal timestamps)."""
        return sorted(self.measurements, key=lambda m: m.timestamp_millis)

    def newest_first(self) -> list[Measurement]:
        """Measurements ordered newest first."""
        return sorted(self.measurements, key=lambda m: m.timestamp_millis, reverse=True)
