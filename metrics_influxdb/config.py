"""Reporter configuration loaded from environment variables."""

from functools import lru_cache
from typing import Any

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from metrics_influxdb.models import InfluxPrecision, from_short_name


class Settings(BaseSettings):
    """All settings are read from environment variables (case-insensitive).

    The instance is frozen: the default precision must not change while
    writes are in flight.
    """

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", frozen=True)

    # ── InfluxDB endpoint ─────────────────────────────────────────────────────
    influx_url: str = "http://localhost:8086"
    influx_database: str = "metrics"

    # ── Credentials (blank = omitted from the write URI) ──────────────────────
    influx_username: str = ""
    influx_password: str = ""

    # ── Write options ─────────────────────────────────────────────────────────
    # Blank uses the server's default retention policy.
    influx_retention_policy: str = ""
    # Accepts the member name ("seconds") or the short code ("s").
    influx_precision: InfluxPrecision = InfluxPrecision.NANOSECONDS
    influx_timeout: float = 10.0

    @field_validator("influx_precision", mode="before")
    @classmethod
    def parse_precision(cls, value: Any) -> Any:
        if not isinstance(value, str):
            return value
        text = value.strip().lower()
        try:
            return InfluxPrecision(text)
        except ValueError:
            # InvalidPrecisionError is a ValueError, so pydantic reports it
            return from_short_name(text)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
