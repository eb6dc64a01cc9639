"""
Clinical detectors.

Each detector is an independent strategy object evaluated by the
EvaluationEngine; none of them calls another or writes to the store.
"""

from vitals.config import DetectorsConfig

from .blood_pressure import BloodPressureDetector
from .cardiac_rhythm import CardiacRhythmDetector
from .hypotensive_hypoxemia import HypotensiveHypoxemiaDetector
from .oxygen_saturation import OxygenSaturationDetector


def default_detectors(
    config: DetectorsConfig | None = None,
) -> list[
    BloodPressureDetector
    | OxygenSaturationDetector
    | CardiacRhythmDetector
    | HypotensiveHypoxemiaDetector
]:
    """Build the standard detector battery from configuration."""
    config = config or DetectorsConfig()
    return [
        BloodPressureDetector(config.blood_pressure),
        OxygenSaturationDetector(config.oxygen_saturation),
        CardiacRhythmDetector(config.cardiac_rhythm),
        HypotensiveHypoxemiaDetector(config.hypotensive_hypoxemia),
    ]


__all__ = [
    "BloodPressureDetector",
    "CardiacRhythmDetector",
    "HypotensiveHypoxemiaDetector",
    "OxygenSaturationDetector",
    "default_detectors",
]
