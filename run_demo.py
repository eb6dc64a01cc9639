"""
End-to-end demonstration of the monitoring pipeline.

This script runs:
1. Configuration loading and validation
2. Simulated ingestion for a handful of patients
3. Scripted clinical scenarios for each detector
4. One evaluation cycle, printing every alert and a summary

Run with: uv run python run_demo.py
"""

import asyncio

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from adapters.simulator import PatientDataSimulator
from vitals.config import get_config, print_config_summary, validate_config
from vitals.domain.models import MeasurementKind
from vitals.services import CollectingAlertSink, ConsoleAlertSink, PatientMonitoringService
from vitals.services.monitoring import current_time_millis

console = Console()

SCENARIOS: dict[str, list[tuple[MeasurementKind, float, int]]] = {
    # (kind, value, offset from now in milliseconds)
    "hypertensive crisis": [
        (MeasurementKind.SYSTOLIC_PRESSURE, 150.0, -120_000),
        (MeasurementKind.SYSTOLIC_PRESSURE, 165.0, -60_000),
        (MeasurementKind.SYSTOLIC_PRESSURE, 185.0, 0),
    ],
    "desaturation": [
        (MeasurementKind.SATURATION, 96.0, -60_000),
        (MeasurementKind.SATURATION, 89.0, -30_000),
    ],
    "arrhythmia": [
        (MeasurementKind.HEART_RATE_PROXY, 72.0, -3_000),
        (MeasurementKind.HEART_RATE_PROXY, 45.0, -2_000),
        (MeasurementKind.HEART_RATE_PROXY, 118.0, 0),
    ],
    "hypotensive hypoxemia": [
        (MeasurementKind.SYSTOLIC_PRESSURE, 85.0, -90_000),
        (MeasurementKind.SATURATION, 90.0, -30_000),
    ],
}


async def run_demo() -> None:
    console.print(Panel("Patient Vitals Monitor - Demo", style="bold blue"))

    validate_config()
    print_config_summary()
    config = get_config()

    collected = CollectingAlertSink()
    printer = ConsoleAlertSink(console)

    def fan_out(alert):
        collected.accept(alert)
        printer.accept(alert)

    service = PatientMonitoringService(config, sink=fan_out)

    simulator = PatientDataSimulator(config.simulator.patient_count, seed=config.simulator.seed)
    console.print("Simulating baseline readings...", style="yellow")
    recorded = await simulator.run(service.store, ticks=3, interval_seconds=0.1)
    console.print(f"Recorded {recorded} simulated measurements", style="green")

    now = current_time_millis()
    first_scenario_id = config.simulator.patient_count + 1
    for offset, (name, readings) in enumerate(SCENARIOS.items()):
        patient_id = first_scenario_id + offset
        for kind, value, delta in readings:
            service.ingest(patient_id, kind, value, now + delta)
        console.print(f"Patient {patient_id}: {name}", style="cyan")

    console.print("\nRunning evaluation cycle...", style="yellow")
    total = service.evaluate_all(now)

    summary_table = Table(title="Alert Summary")
    summary_table.add_column("Patient", style="cyan")
    summary_table.add_column("Alerts", style="white")
    summary_table.add_column("Conditions", style="white")

    by_patient: dict[int, list[str]] = {}
    for alert in collected.alerts:
        by_patient.setdefault(alert.patient_id, []).append(alert.condition)

    for patient_id in sorted(service.store.list_patients()):
        conditions = by_patient.get(patient_id, [])
        summary_table.add_row(
            str(patient_id), str(len(conditions)), ", ".join(sorted(set(conditions))) or "-"
        )

    console.print(summary_table)
    console.print(f"\nTotal alerts forwarded: {total}")


if __name__ == "__main__":
    try:
        asyncio.run(run_demo())
    except KeyboardInterrupt:
        console.print("\nDemo stopped by user", style="yellow")
