"""
Configuration management with environment variable support and validation.

Design principles:
- Environment-specific configs (dev, staging, prod)
- Validation at startup (fail fast)
- Type safety with Pydantic
- Clinical thresholds default to the documented rule values
"""

import logging
import os
from functools import lru_cache
from typing import Literal, cast

import structlog
from dotenv import load_dotenv
from pydantic import BaseModel, Field, model_validator

# Load environment variables from .env file
load_dotenv()

ONE_MINUTE_MILLIS = 60_000
ONE_HOUR_MILLIS = 60 * ONE_MINUTE_MILLIS
ONE_DAY_MILLIS = 24 * ONE_HOUR_MILLIS


class BloodPressureConfig(BaseModel):
    """Thresholds for the blood-pressure detector."""

    window_millis: int = Field(default=ONE_DAY_MILLIS, gt=0, description="Lookback window")
    systolic_high: float = Field(default=180.0, description="Systolic values above alert")
    systolic_low: float = Field(default=90.0, description="Systolic values below alert")
    diastolic_high: float = Field(default=120.0, description="Diastolic values above alert")
    diastolic_low: float = Field(default=60.0, description="Diastolic values below alert")
    trend_step: float = Field(
        default=10.0, gt=0.0, description="Minimum change between consecutive trend samples"
    )
    trend_samples: int = Field(default=3, ge=2, description="Most recent samples forming a trend")

    @model_validator(mode="after")
    def bounds_are_ordered(self) -> "BloodPressureConfig":
        if self.systolic_low >= self.systolic_high:
            raise ValueError("systolic_low must be below systolic_high")
        if self.diastolic_low >= self.diastolic_high:
            raise ValueError("diastolic_low must be below diastolic_high")
        return self


class OxygenSaturationConfig(BaseModel):
    """Thresholds for the oxygen-saturation detector."""

    window_millis: int = Field(default=10 * ONE_MINUTE_MILLIS, gt=0)
    low_threshold: float = Field(default=92.0, ge=0.0, le=100.0)
    rapid_drop_percent: float = Field(default=5.0, gt=0.0, le=100.0)


class CardiacRhythmConfig(BaseModel):
    """Thresholds for the cardiac-rhythm detector."""

    window_millis: int = Field(default=ONE_HOUR_MILLIS, gt=0)
    rate_low: float = Field(default=50.0, ge=0.0)
    rate_high: float = Field(default=100.0, gt=0.0)
    allowed_interval_variation: float = Field(
        default=0.1, gt=0.0, le=1.0, description="Fraction of the mean interval tolerated"
    )


class HypotensiveHypoxemiaConfig(BaseModel):
    """Thresholds for the compound hypotensive-hypoxemia detector."""

    window_millis: int = Field(default=10 * ONE_MINUTE_MILLIS, gt=0)
    systolic_below: float = Field(default=90.0)
    saturation_below: float = Field(default=92.0)


class DetectorsConfig(BaseModel):
    blood_pressure: BloodPressureConfig = Field(default_factory=BloodPressureConfig)
    oxygen_saturation: OxygenSaturationConfig = Field(default_factory=OxygenSaturationConfig)
    cardiac_rhythm: CardiacRhythmConfig = Field(default_factory=CardiacRhythmConfig)
    hypotensive_hypoxemia: HypotensiveHypoxemiaConfig = Field(
        default_factory=HypotensiveHypoxemiaConfig
    )


class MonitoringConfig(BaseModel):
    """Evaluation scheduling configuration."""

    evaluation_interval_seconds: float = Field(
        default=5.0, gt=0.0, description="Interval between evaluation cycles"
    )
    max_concurrent_evaluations: int = Field(
        default=4, gt=0, description="Maximum number of patients evaluated in parallel"
    )


class SimulatorConfig(BaseModel):
    """Synthetic data producer configuration."""

    patient_count: int = Field(default=5, gt=0)
    tick_interval_seconds: float = Field(default=1.0, gt=0.0)
    seed: int | None = Field(default=None, description="Random seed for reproducible runs")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Logging level"
    )
    format: Literal["json", "console"] = Field(default="json", description="Logging format")


class AppConfig(BaseModel):
    """Main application configuration combining all subsystems."""

    environment: Literal["development", "staging", "production"] = Field(
        default="development", description="Environment"
    )
    debug: bool = Field(default=False, description="Enable debug mode")

    detectors: DetectorsConfig = Field(default_factory=DetectorsConfig)
    monitoring: MonitoringConfig = Field(default_factory=MonitoringConfig)
    simulator: SimulatorConfig = Field(default_factory=SimulatorConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @model_validator(mode="after")
    def debug_only_in_dev(self) -> "AppConfig":
        """Ensure debug mode is only allowed in development environment."""
        if self.debug and self.environment != "development":
            raise ValueError("debug mode is only allowed in development environment")
        return self


def load_config_from_env() -> AppConfig:
    """Load configuration from environment variables with validation."""

    def _env_to_literal(val: str) -> Literal["development", "staging", "production"]:
        v = val.strip().lower()
        if v in {"dev", "development"}:
            return "development"
        if v in {"stage", "staging"}:
            return "staging"
        return "production"

    def _level_to_literal(val: str) -> Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]:
        v = val.strip().upper()
        return cast(
            Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
            v if v in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"} else "INFO",
        )

    environment = _env_to_literal(os.getenv("ENVIRONMENT", "development"))
    debug = environment == "development"

    monitoring_config = MonitoringConfig(
        evaluation_interval_seconds=float(os.getenv("EVALUATION_INTERVAL_SECONDS", "5.0")),
        max_concurrent_evaluations=int(os.getenv("MAX_CONCURRENT_EVALUATIONS", "4")),
    )

    seed = os.getenv("SIMULATOR_SEED")
    simulator_config = SimulatorConfig(
        patient_count=int(os.getenv("SIMULATOR_PATIENT_COUNT", "5")),
        seed=int(seed) if seed else None,
    )

    logging_config = LoggingConfig(
        level=_level_to_literal(os.getenv("LOG_LEVEL", "INFO")),
        format="console" if debug else "json",
    )

    return AppConfig(
        environment=environment,
        debug=debug,
        monitoring=monitoring_config,
        simulator=simulator_config,
        logging=logging_config,
    )


@lru_cache
def get_config() -> AppConfig:
    """Get cached application configuration."""
    return load_config_from_env()


def configure_logging(config: LoggingConfig) -> None:
    """Apply the logging level and renderer to stdlib logging and structlog."""
    logging.basicConfig(level=config.level, format="%(message)s")
    logging.getLogger().setLevel(config.level)

    renderer = (
        structlog.dev.ConsoleRenderer()
        if config.format == "console"
        else structlog.processors.JSONRenderer()
    )
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
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def validate_config() -> None:
    """Validate configuration at startup."""
    try:
        config = get_config()
        print(f"Configuration loaded for {config.environment} environment")
    except Exception as e:
        print(f"Configuration validation failed: {e}")
        raise


def print_config_summary() -> None:
    """Print configuration summary for debugging."""
    config = get_config()
    detectors = config.detectors

    print("\nCONFIGURATION SUMMARY")
    print(f"Environment: {config.environment}")
    print(f"Debug Mode: {config.debug}")
    print(f"Log Level: {config.logging.level}")

    print("\nDETECTOR THRESHOLDS")
    bp = detectors.blood_pressure
    print(f"Systolic: {bp.systolic_low}-{bp.systolic_high}")
    print(f"Diastolic: {bp.diastolic_low}-{bp.diastolic_high}")
    print(f"Saturation Low: {detectors.oxygen_saturation.low_threshold}")
    hr = detectors.cardiac_rhythm
    print(f"Heart Rate: {hr.rate_low}-{hr.rate_high}")

    print("\nMONITORING CONFIGURATION")
    print(f"Evaluation Interval: {config.monitoring.evaluation_interval_seconds}s")
    print(f"Max Concurrent Evaluations: {config.monitoring.max_concurrent_evaluations}")


if __name__ == "__main__":
    validate_config()
    print_config_summary()
