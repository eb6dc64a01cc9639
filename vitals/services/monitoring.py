"""
Monitoring service that wires the store, the detectors and a sink together.

This is the entry point producers and schedulers talk to:
1. Producers call ingest() for every parsed measurement
2. A scheduler calls evaluate_all() (or runs run_continuous()) to raise alerts
"""

import asyncio
import time
from collections.abc import AsyncIterator, Callable

import structlog

from vitals.config import AppConfig, configure_logging, get_config
from vitals.domain.errors import InvalidMeasurementError
from vitals.domain.models import Alert, Measurement, MeasurementKind
from vitals.services.alert_sinks import LoggingAlertSink
from vitals.services.detectors import default_detectors
from vitals.services.evaluation_engine import AlertSink, EvaluationEngine
from vitals.services.measurement_store import MeasurementStore

logger = structlog.get_logger(__name__)


def current_time_millis() -> int:
    return int(time.time() * 1000)


class PatientMonitoringService:
    """Owns one MeasurementStore and one EvaluationEngine with the default detectors."""

    def __init__(
        self,
        config: AppConfig | None = None,
        sink: AlertSink | Callable[[Alert], None] | None = None,
        store: MeasurementStore | None = None,
    ) -> None:
        self.config = config or get_config()
        configure_logging(self.config.logging)
        self.logger = logger.bind(component="patient_monitoring")

        self.store = store or MeasurementStore()
        self.engine = EvaluationEngine(
            self.store,
            sink or LoggingAlertSink(),
            detectors=default_detectors(self.config.detectors),
            max_workers=self.config.monitoring.max_concurrent_evaluations,
        )
        self._is_running = False

    def ingest(
        self,
        patient_id: int,
        kind: MeasurementKind | str,
        value: float,
        timestamp_millis: int,
    ) -> Measurement | None:
        """Record a measurement; rejected measurements are logged and return None."""
        try:
            return self.store.record(patient_id, kind, value, timestamp_millis)
        except InvalidMeasurementError as e:
            self.logger.warning("ingest_rejected", patient_id=patient_id, error=str(e))
            return None

    def evaluate(self, patient_id: int, now_millis: int | None = None) -> int:
        return self.engine.evaluate(
            patient_id, current_time_millis() if now_millis is None else now_millis
        )

    def evaluate_all(self, now_millis: int | None = None) -> int:
        return self.engine.evaluate_all(
            current_time_millis() if now_millis is None else now_millis
        )

    async def run_continuous(
        self,
        now_fn: Callable[[], int] = current_time_millis,
        cycles: int | None = None,
    ) -> AsyncIterator[int]:
        """
        Evaluate every patient on a fixed interval, yielding the alert count per cycle.

        Runs until stop() is called or `cycles` cycles have completed.
        """
        interval = self.config.monitoring.evaluation_interval_seconds
        self.logger.info("continuous_monitoring_starting", interval=interval)
        self._is_running = True
        completed = 0

        try:
            while self._is_running and (cycles is None or completed < cycles):
                cycle_start = time.perf_counter()
                forwarded = await asyncio.to_thread(self.engine.evaluate_all, now_fn())
                completed += 1
                yield forwarded

                if cycles is not None and completed >= cycles:
                    break

                sleep_time = max(0.0, interval - (time.perf_counter() - cycle_start))
                if sleep_time > 0:
                    await asyncio.sleep(sleep_time)
                else:
                    self.logger.warning(
                        "evaluation_slower_than_interval", interval_seconds=interval
                    )
        except asyncio.CancelledError:
            self.logger.info("continuous_monitoring_cancelled")
            raise
        finally:
            self._is_running = False

    async def stop(self) -> None:
        """Gracefully stop continuous monitoring."""
        self.logger.info("stopping_monitoring_service")
        self._is_running = False
