"""
Tests for configuration management in `vitals/config.py`.

Covers:
- Environment parsing and debug defaults
- Logging level coercion to the expected Literal
- Detector threshold defaults and validation
- get_config cache behavior
- AppConfig validation (debug only allowed in development)
"""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from vitals.config import (
    AppConfig,
    BloodPressureConfig,
    CardiacRhythmConfig,
    HypotensiveHypoxemiaConfig,
    OxygenSaturationConfig,
    get_config,
    load_config_from_env,
)


@pytest.fixture(autouse=True)
def clear_config_cache() -> Iterator[None]:
    """Ensure get_config cache is cleared before and after each test."""
    get_config.cache_clear()
    yield
    get_config.cache_clear()


def test_load_config_dev_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ENVIRONMENT", "development")
    monkeypatch.delenv("LOG_LEVEL", raising=False)

    config = load_config_from_env()

    assert config.environment == "development"
    assert config.debug is True
    assert config.logging.format == "console"
    assert config.logging.level == "INFO"


def test_production_uses_json_logging(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ENVIRONMENT", "prod")

    config = load_config_from_env()

    assert config.environment == "production"
    assert config.debug is False
    assert config.logging.format == "json"


def test_logging_level_literal_coercion(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ENVIRONMENT", "staging")

    monkeypatch.setenv("LOG_LEVEL", "unknown")
    assert load_config_from_env().logging.level == "INFO"

    monkeypatch.setenv("LOG_LEVEL", "error")
    assert load_config_from_env().logging.level == "ERROR"


def test_monitoring_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EVALUATION_INTERVAL_SECONDS", "2.5")
    monkeypatch.setenv("MAX_CONCURRENT_EVALUATIONS", "8")
    monkeypatch.setenv("SIMULATOR_PATIENT_COUNT", "12")
    monkeypatch.setenv("SIMULATOR_SEED", "7")

    config = load_config_from_env()

    assert config.monitoring.evaluation_interval_seconds == 2.5
    assert config.monitoring.max_concurrent_evaluations == 8
    assert config.simulator.patient_count == 12
    assert config.simulator.seed == 7


def test_invalid_concurrency_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MAX_CONCURRENT_EVALUATIONS", "0")
    with pytest.raises(ValueError):
        load_config_from_env()


def test_detector_defaults_match_clinical_rules() -> None:
    bp = BloodPressureConfig()
    assert (bp.systolic_low, bp.systolic_high) == (90.0, 180.0)
    assert (bp.diastolic_low, bp.diastolic_high) == (60.0, 120.0)
    assert bp.trend_step == 10.0
    assert bp.trend_samples == 3
    assert bp.window_millis == 24 * 60 * 60 * 1000

    sat = OxygenSaturationConfig()
    assert sat.low_threshold == 92.0
    assert sat.rapid_drop_percent == 5.0
    assert sat.window_millis == 10 * 60 * 1000

    hr = CardiacRhythmConfig()
    assert (hr.rate_low, hr.rate_high) == (50.0, 100.0)
    assert hr.allowed_interval_variation == 0.1
    assert hr.window_millis == 60 * 60 * 1000

    compound = HypotensiveHypoxemiaConfig()
    assert (compound.systolic_below, compound.saturation_below) == (90.0, 92.0)


def test_inverted_pressure_bounds_rejected() -> None:
    with pytest.raises(ValueError, match="systolic_low"):
        BloodPressureConfig(systolic_low=200.0)


def test_get_config_cache(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ENVIRONMENT", "development")

    assert get_config() is get_config()


def test_app_config_debug_only_in_dev_validation() -> None:
    with pytest.raises(ValueError, match="debug mode is only allowed"):
        AppConfig(environment="production", debug=True)
