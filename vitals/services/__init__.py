"""
Core services for the application.

This package contains the measurement store, the evaluation engine, the
clinical detectors and the alert sinks.
"""

from .alert_sinks import CollectingAlertSink, ConsoleAlertSink, LoggingAlertSink
from .evaluation_engine import AlertSink, Detector, EvaluationEngine, Result
from .measurement_store import MeasurementStore, PatientRecord
from .monitoring import PatientMonitoringService

__all__ = [
    "AlertSink",
    "CollectingAlertSink",
    "ConsoleAlertSink",
    "Detector",
    "EvaluationEngine",
    "LoggingAlertSink",
    "MeasurementStore",
    "PatientMonitoringService",
    "PatientRecord",
    "Result",
]
