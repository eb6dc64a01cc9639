"""Error taxonomy for ingestion and evaluation."""


class VitalsMonitorError(Exception):
    """Base class for errors raised by the vitals monitoring core."""


class InvalidMeasurementError(VitalsMonitorError, ValueError):
    """A measurement was rejected at ingestion and not stored."""

    def __init__(self, patient_id: int, kind: str, value: float) -> None:
        super().__init__(f"Rejected non-finite {kind} value {value!r} for patient {patient_id}")
        self.patient_id = patient_id
        self.kind = kind
        self.value = value


class PreconditionViolationError(VitalsMonitorError, ValueError):
    """Evaluation was requested without a usable patient identifier."""
