"""
Ingestion adapters translating producer output into store.record() calls.

Three line formats are understood, matching what the data producers write:

- File CSV:   ``1,95.0,Saturation,1700000000000``
  (patient id, value, label, timestamp in milliseconds)
- Stream CSV: ``1,1700000000000,Saturation,95%``
  (patient id, timestamp in milliseconds, label, data), as sent over TCP and WebSocket
- Labelled:   ``Patient ID: 1, Timestamp: 1700000000000, Label: Saturation, Data: 95%``
"""

import re
from pathlib import Path
from typing import Literal

import structlog
from pydantic import BaseModel, ValidationError

from vitals.domain.errors import InvalidMeasurementError, VitalsMonitorError
from vitals.domain.models import MeasurementKind
from vitals.services.measurement_store import MeasurementStore

logger = structlog.get_logger(__name__)

Layout = Literal["auto", "file", "stream"]

# Epoch milliseconds for any date after 1973 have at least twelve digits
_MILLIS_TIMESTAMP = re.compile(r"\d{12,}")

# The simulator's alert marker carries a state word instead of a number
_ALERT_STATES = {"triggered": 1.0, "resolved": 0.0}


class MeasurementParseError(VitalsMonitorError, ValueError):
    """A producer line could not be turned into a measurement."""


class ParsedMeasurement(BaseModel):
    """Arguments for one store.record() call."""

    patient_id: int
    kind: str
    value: float
    timestamp_millis: int

    def record_into(self, store: MeasurementStore) -> None:
        store.record(self.patient_id, self.kind, self.value, self.timestamp_millis)


def _parse_value(raw: str, label: str) -> float:
    raw = raw.strip().rstrip("%").strip()
    if label == MeasurementKind.ALERT.value and raw.lower() in _ALERT_STATES:
        return _ALERT_STATES[raw.lower()]
    return float(raw)


def _detect_layout(parts: list[str]) -> Layout:
    """Stream lines carry the millisecond timestamp second, file lines carry it last."""
    if _MILLIS_TIMESTAMP.fullmatch(parts[1]) and not _MILLIS_TIMESTAMP.fullmatch(parts[3]):
        return "stream"
    return "file"


def parse_measurement_line(line: str, layout: Layout = "auto") -> ParsedMeasurement:
    """
    Parse one producer line in any supported format.

    Args:
        line: raw producer line.
        layout: column order of CSV lines; "auto" tells file and stream lines
            apart by where the millisecond timestamp sits. Labelled lines are
            recognized regardless.

    Raises:
        MeasurementParseError: if the line does not have four fields or a field
            does not parse.
        ValueError: if layout is not one of "auto", "file" or "stream".
    """
    if layout not in ("auto", "file", "stream"):
        raise ValueError(f"Unknown layout: {layout!r}")

    parts = [part.strip() for part in line.strip().split(",")]
    if len(parts) != 4:
        raise MeasurementParseError(f"Expected 4 fields, got {len(parts)}: {line!r}")

    try:
        if ":" in parts[0]:
            fields = {}
            for part in parts:
                key, _, raw = part.partition(":")
                fields[key.strip().lower()] = raw.strip()
            label = fields["label"]
            return ParsedMeasurement(
                patient_id=int(fields["patient id"]),
                kind=label,
                value=_parse_value(fields["data"], label),
                timestamp_millis=int(fields["timestamp"]),
            )

        if layout == "auto":
            layout = _detect_layout(parts)

        if layout == "stream":
            patient_id, timestamp, label, raw_value = parts
        else:
            patient_id, raw_value, label, timestamp = parts
        return ParsedMeasurement(
            patient_id=int(patient_id),
            kind=label,
            value=_parse_value(raw_value, label),
            timestamp_millis=int(timestamp),
        )
    except (KeyError, ValueError, ValidationError) as e:
        raise MeasurementParseError(f"Malformed measurement line {line!r}: {e}") from e


class FileDataReader:
    """Loads every ``*.txt`` file under a directory into a MeasurementStore."""

    def __init__(self, directory: str | Path, layout: Layout = "auto") -> None:
        self.directory = Path(directory)
        self.layout = layout
        self.logger = logger.bind(component="file_data_reader", directory=str(self.directory))

    def read_into(self, store: MeasurementStore) -> int:
        """
        Read all files, skipping lines that fail to parse or are rejected.

        Returns:
            int: number of measurements stored.

        Raises:
            FileNotFoundError: if the directory does not exist.
        """
        if not self.directory.is_dir():
            raise FileNotFoundError(f"Data directory not found: {self.directory}")

        stored = 0
        skipped = 0
        for path in sorted(self.directory.rglob("*.txt")):
            with path.open(encoding="utf-8") as handle:
                for line_number, line in enumerate(handle, start=1):
                    if not line.strip():
                        continue
                    try:
                        parse_measurement_line(line, self.layout).record_into(store)
                    except (MeasurementParseError, InvalidMeasurementError) as e:
                        skipped += 1
                        self.logger.warning(
                            "line_skipped", file=path.name, line=line_number, error=str(e)
                        )
                        continue
                    stored += 1

        self.logger.info("files_loaded", stored=stored, skipped=skipped)
        return stored
