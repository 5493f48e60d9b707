"""
Application settings for the job-costing engine.

Billing rules (HST rate, fuel cost per hour, billing increment) and runtime
options are read from the environment, falling back to a ``.env`` file in
the working directory. Field names and their upper-case variable names are
both accepted, so tests can build a ``CostingConfig(hst_rate=...)`` directly.
"""

from decimal import Decimal
from typing import Optional

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
ENVIRONMENTS = ("development", "testing", "production")


class CostingConfig(BaseSettings):
    """Billing rules and runtime options.

    Attributes:
        hst_rate: Sales tax as a fraction of the invoice subtotal (0.13 = 13%)
        fuel_cost_per_hour: Estimated fuel spend per driver hour
        billing_increment_minutes: Hourly jobs bill in blocks of this size
        environment: development, testing or production
        debug: Forces DEBUG logging and full CLI stack traces
        log_level: Root log level when not in debug mode
    """

    hst_rate: Decimal = Field(default=Decimal("0.13"), alias="HST_RATE")
    fuel_cost_per_hour: Decimal = Field(default=Decimal("30"), alias="FUEL_COST_PER_HOUR")
    billing_increment_minutes: int = Field(default=15, alias="BILLING_INCREMENT_MINUTES")

    environment: str = Field(default="development", alias="ENVIRONMENT")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        populate_by_name=True,
        extra="ignore",
    )

    @field_validator("hst_rate")
    @classmethod
    def validate_hst_rate(cls, v):
        # A value like 13 is almost always a percentage typed by mistake
        if not Decimal("0") <= v < Decimal("1"):
            raise ValueError(f"HST rate must be a fraction in [0, 1), got {v}")
        return v

    @field_validator("fuel_cost_per_hour")
    @classmethod
    def validate_fuel_cost(cls, v):
        if v < 0:
            raise ValueError(f"Fuel cost per hour cannot be negative, got {v}")
        return v

    @field_validator("billing_increment_minutes")
    @classmethod
    def validate_billing_increment(cls, v):
        """Increment must split an hour evenly (5, 6, 10, 15, 20, 30, 60)."""
        if v <= 0 or 60 % v:
            raise ValueError(f"Billing increment must be a positive divisor of 60, got {v}")
        return v

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v):
        level = v.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Log level must be one of {', '.join(LOG_LEVELS)}, got {v!r}")
        return level

    @field_validator("environment")
    @classmethod
    def normalize_environment(cls, v):
        environment = v.strip().lower()
        if environment not in ENVIRONMENTS:
            raise ValueError(
                f"Environment must be one of {', '.join(ENVIRONMENTS)}, got {v!r}"
            )
        return environment


_config: Optional[CostingConfig] = None


def load_config(env_file: Optional[str] = None) -> CostingConfig:
    """Build settings after loading ``env_file`` (or ``./.env``) into the environment.

    Variables already set in the environment win over the file.
    """
    if env_file:
        load_dotenv(env_file)
    else:
        load_dotenv()
    return CostingConfig()


def get_config() -> CostingConfig:
    """Return the process-wide settings, loading them on first use."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reload_config(env_file: Optional[str] = None) -> CostingConfig:
    """Discard the cached settings and load them again."""
    global _config
    _config = load_config(env_file)
    return _config
