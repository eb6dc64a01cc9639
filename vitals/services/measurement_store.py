"""
In-memory, time-indexed measurement store.

Key properties:
- Lazy per-patient records, never evicted during the process lifetime
- One lock per patient record so ingestion for one patient never blocks
  evaluation of another
- Readers always receive an immutable snapshot (Window), never a live list
"""

import math
import threading

import structlog

from vitals.domain.errors import InvalidMeasurementError
from vitals.domain.models import Measurement, MeasurementKind, Window, normalize_kind

logger = structlog.get_logger(__name__)


class PatientRecord:
    """Append-only collection of measurements for a single patient."""

    def __init__(self, patient_id: int) -> None:
        self.patient_id = patient_id
        self._measurements: list[Measurement] = []
        self._lock = threading.Lock()

    def append(self, measurement: Measurement) -> None:
        with self._lock:
            self._measurements.append(measurement)

    def between(self, start_millis: int, end_millis: int) -> tuple[Measurement, ...]:
        """Snapshot of measurements with timestamp in [start_millis, end_millis]."""
        with self._lock:
            return tuple(
                m for m in self._measurements if start_millis <= m.timestamp_millis <= end_millis
            )

    def __len__(self) -> int:
        with self._lock:
            return len(self._measurements)


class MeasurementStore:
    """
    Holds every measurement ingested for every patient.

    Writers call record() from any thread; readers call range() concurrently.
    A measurement is visible to range() calls that start after record() returns.
    """

    def __init__(self) -> None:
        self._records: dict[int, PatientRecord] = {}
        self._records_lock = threading.Lock()
        self.logger = logger.bind(component="measurement_store")

    def _record_for(self, patient_id: int) -> PatientRecord:
        record = self._records.get(patient_id)
        if record is None:
            with self._records_lock:
                record = self._records.get(patient_id)
                if record is None:
                    record = PatientRecord(patient_id)
                    self._records[patient_id] = record
                    self.logger.debug("patient_record_created", patient_id=patient_id)
        return record

    def record(
        self,
        patient_id: int,
        kind: MeasurementKind | str,
        value: float,
        timestamp_millis: int,
    ) -> Measurement:
        """
        Append a measurement to the patient's record, creating the record if needed.

        Raises:
            InvalidMeasurementError: if value is NaN, infinite or not representable
                as a float. Nothing is stored.
        """
        try:
            number = float(value)
        except (OverflowError, TypeError, ValueError):
            number = math.nan
        if not math.isfinite(number):
            normalized = normalize_kind(kind)
            label = normalized.value if isinstance(normalized, MeasurementKind) else str(normalized)
            self.logger.warning(
                "measurement_rejected",
                patient_id=patient_id,
                kind=label,
                value=str(value),
            )
            raise InvalidMeasurementError(patient_id, label, value)

        measurement = Measurement(
            patient_id=patient_id,
            kind=kind,
            value=number,
            timestamp_millis=timestamp_millis,
        )
        self._record_for(patient_id).append(measurement)
        return measurement

    def range(self, patient_id: int, start_millis: int, end_millis: int) -> Window:
        """All measurements of the patient with timestamp in [start_millis, end_millis]."""
        record = self._records.get(patient_id)
        measurements = record.between(start_millis, end_millis) if record is not None else ()
        return Window(
            patient_id=patient_id,
            start_millis=start_millis,
            end_millis=end_millis,
            measurements=measurements,
        )

    def list_patients(self) -> set[int]:
        """Snapshot of patient ids with at least one stored measurement."""
        with self._records_lock:
            return {pid for pid, record in self._records.items() if len(record) > 0}

    def count(self, patient_id: int) -> int:
        record = self._records.get(patient_id)
        return len(record) if record is not None else 0
