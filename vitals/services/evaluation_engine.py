"""
Evaluation engine that runs clinical detectors against the measurement store.

Key patterns demonstrated:
- Protocol-based dependency injection (detectors and sinks are structural)
- Generic Result type for per-detector error isolation
- Comprehensive error boundaries: one faulty detector never hides the others
"""

import time
from collections.abc import Callable, Iterable
from concurrent.futures import ThreadPoolExecutor
from typing import Generic, Protocol, TypeVar, runtime_checkable

import structlog

from vitals.domain.errors import PreconditionViolationError
from vitals.domain.models import Alert
from vitals.services.measurement_store import MeasurementStore

# Configure structured logging (production-ready observability)
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer(),
    ],
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger(__name__)

ValueT = TypeVar("ValueT")
ErrorT = TypeVar("ErrorT", bound=BaseException)


class Result(Generic[ValueT, ErrorT]):
    """
    Explicit error handling without exceptions for expected failures.

    The engine wraps every detector run in a Result so a failure is a value
    it can log and step over, rather than an exception unwinding the loop.
    """

    def __init__(self, value: ValueT | None = None, error: ErrorT | None = None) -> None:
        if value is not None and error is not None:
            raise ValueError("Result cannot have both value and error")
        if value is None and error is None:
            raise ValueError("Result must have either value or error")
        self._value: ValueT | None = value
        self._error: ErrorT | None = error

    @classmethod
    def ok(cls, value: ValueT) -> "Result[ValueT, ErrorT]":
        return cls(value=value)

    @classmethod
    def err(cls, error: ErrorT) -> "Result[ValueT, ErrorT]":
        return cls(error=error)

    def is_ok(self) -> bool:
        return self._error is None

    def is_err(self) -> bool:
        return self._error is not None

    def unwrap(self) -> ValueT:
        if self._error is not None:
            raise self._error
        return self._value  # type: ignore

    def unwrap_or(self, default: ValueT) -> ValueT:
        return self._value if self._error is None else default  # type: ignore

    def unwrap_err(self) -> ErrorT:
        if self._error is None:
            raise ValueError("Called unwrap_err() on an Ok value")
        return self._error


@runtime_checkable
class Detector(Protocol):
    """
    A clinical rule family evaluated for one patient at one instant.

    Implementations read the store, never write to it, and return the same
    alerts for the same store contents and the same `now_millis`.
    """

    name: str

    def evaluate(
        self, patient_id: int, store: MeasurementStore, now_millis: int
    ) -> list[Alert]: ...


@runtime_checkable
class AlertSink(Protocol):
    """Receives finished alerts. Called synchronously, once per alert."""

    def accept(self, alert: Alert) -> None: ...


class EvaluationEngine:
    """
    Runs every registered detector for a patient and forwards the alerts.

    Design principles:
    - Fail fast on a missing patient id (nothing runs)
    - Graceful degradation at runtime (a failing detector is logged and skipped)
    - Detectors are independent, so registration order never changes the result set
    """

    def __init__(
        self,
        store: MeasurementStore,
        sink: AlertSink | Callable[[Alert], None],
        detectors: Iterable[Detector] = (),
        max_workers: int = 4,
    ) -> None:
        self.store = store
        accept = getattr(sink, "accept", None)
        if callable(accept):
            self._deliver: Callable[[Alert], None] = accept
        elif callable(sink):
            self._deliver = sink
        else:
            raise TypeError(f"Sink {sink!r} must implement the AlertSink protocol or be callable")
        self.max_workers = max_workers
        self.detectors: list[Detector] = []
        self.logger = logger.bind(component="evaluation_engine")

        for detector in detectors:
            self.register_detector(detector)

    def register_detector(self, detector: Detector) -> None:
        """Add a detector. Validates it implements the Detector protocol."""
        if not callable(getattr(detector, "evaluate", None)):
            raise TypeError(f"Detector {detector!r} must implement the Detector protocol")
        self.detectors.append(detector)
        self.logger.info("detector_registered", detector=_detector_name(detector))

    def remove_detector(self, detector: Detector) -> None:
        self.detectors.remove(detector)
        self.logger.info("detector_removed", detector=_detector_name(detector))

    def _run_detector(
        self, detector: Detector, patient_id: int, now_millis: int
    ) -> Result[list[Alert], Exception]:
        try:
            return Result.ok(list(detector.evaluate(patient_id, self.store, now_millis)))
        except Exception as e:
            return Result.err(e)

    def evaluate(self, patient_id: int | None, now_millis: int) -> int:
        """
        Evaluate all detectors for one patient and forward their alerts.

        Returns:
            int: number of alerts forwarded to the sink.

        Raises:
            PreconditionViolationError: if patient_id is None. No detector runs.
        """
        if patient_id is None:
            raise PreconditionViolationError("evaluate() requires a patient identifier")

        start_time = time.perf_counter()
        forwarded = 0
        failed_detectors = 0

        for detector in list(self.detectors):
            result = self._run_detector(detector, patient_id, now_millis)
            if result.is_err():
                failed_detectors += 1
                error = result.unwrap_err()
                self.logger.error(
                    "detector_failed",
                    detector=_detector_name(detector),
                    patient_id=patient_id,
                    error=str(error),
                    error_type=type(error).__name__,
                )
                continue

            for alert in result.unwrap():
                try:
                    self._deliver(alert)
                except Exception as e:
                    # Sink failures are the sink's concern; keep delivering the rest
                    self.logger.error(
                        "alert_dispatch_failed",
                        condition=alert.condition,
                        patient_id=patient_id,
                        error=str(e),
                    )
                    continue
                forwarded += 1

        self.logger.debug(
            "evaluation_completed",
            patient_id=patient_id,
            alerts_forwarded=forwarded,
            detectors=len(self.detectors),
            failed_detectors=failed_detectors,
            duration_seconds=round(time.perf_counter() - start_time, 6),
        )
        return forwarded

    def evaluate_all(self, now_millis: int) -> int:
        """
        Evaluate every known patient, in parallel across worker threads.

        Returns:
            int: total number of alerts forwarded.
        """
        patient_ids = sorted(self.store.list_patients())
        if not patient_ids:
            return 0

        start_time = time.perf_counter()
        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            totals = list(pool.map(lambda pid: self.evaluate(pid, now_millis), patient_ids))

        self.logger.info(
            "evaluation_cycle_completed",
            patients=len(patient_ids),
            alerts_forwarded=sum(totals),
            duration_seconds=round(time.perf_counter() - start_time, 3),
        )
        return sum(totals)


def _detector_name(detector: object) -> str:
    return getattr(detector, "name", type(detector).__name__)
