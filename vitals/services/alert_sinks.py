"""
Alert sinks: the receiving end of the evaluation engine.

The engine only needs `accept(alert)`; these implementations cover the
development console, structured logs and in-memory collection.
"""

import threading
from datetime import UTC, datetime

import structlog
from rich.console import Console

from vitals.domain.models import Alert, Severity

logger = structlog.get_logger(__name__)

_SEVERITY_STYLES = {
    Severity.LOW: "cyan",
    Severity.MEDIUM: "yellow",
    Severity.HIGH: "bold red",
    Severity.CRITICAL: "bold white on red",
}


def format_timestamp(timestamp_millis: int) -> str:
    return datetime.fromtimestamp(timestamp_millis / 1000, UTC).strftime("%Y-%m-%d %H:%M:%S UTC")


class LoggingAlertSink:
    """Writes each alert as a structured log event."""

    def __init__(self) -> None:
        self.logger = logger.bind(component="alert_sink")

    def accept(self, alert: Alert) -> None:
        log = self.logger.warning if alert.is_priority else self.logger.info
        log(
            "alert_triggered",
            patient_id=alert.patient_id,
            condition=alert.condition,
            timestamp_millis=alert.timestamp_millis,
            severity=alert.severity.value,
        )


class ConsoleAlertSink:
    """Development sink that prints alerts to the terminal."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def accept(self, alert: Alert) -> None:
        style = _SEVERITY_STYLES.get(alert.severity, "")
        self.console.print(
            f"[{style}]ALERT {alert.severity.value.upper()}[/] "
            f"{alert.condition} for patient {alert.patient_id} "
            f"at {format_timestamp(alert.timestamp_millis)}"
        )
        if alert.is_priority:
            self.console.print("[bold red]Priority alert triggered.[/]")


class CollectingAlertSink:
    """Keeps every accepted alert in memory, in arrival order."""

    def __init__(self) -> None:
        self.alerts: list[Alert] = []
        self._lock = threading.Lock()

    def accept(self, alert: Alert) -> None:
        with self._lock:
            self.alerts.append(alert)

    def conditions(self) -> list[str]:
        with self._lock:
            return [alert.condition for alert in self.alerts]

    def clear(self) -> None:
        with self._lock:
            self.alerts.clear()
