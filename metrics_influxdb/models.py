"""Pydantic models for tags, fields, records and connection parameters."""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from metrics_influxdb.errors import InvalidPrecisionError

# ── Precision ─────────────────────────────────────────────────────────────────


class InfluxPrecision(Enum):
    """Timestamp resolution of a write.  Nanoseconds is the server default."""

    NANOSECONDS = "nanoseconds"
    MICROSECONDS = "microseconds"
    MILLISECONDS = "milliseconds"
    SECONDS = "seconds"
    MINUTES = "minutes"
    HOURS = "hours"

    @property
    def short_name(self) -> str:
        return to_short_name(self)

    @property
    def nanoseconds(self) -> int:
        """Length of one unit of this precision in nanoseconds."""
        return _NANOSECONDS_PER_UNIT[self]


# Single source of truth for the URI short codes (n,u,ms,s,m,h).
_SHORT_NAMES: dict[InfluxPrecision, str] = {
    InfluxPrecision.NANOSECONDS: "n",
    InfluxPrecision.MICROSECONDS: "u",
    InfluxPrecision.MILLISECONDS: "ms",
    InfluxPrecision.SECONDS: "s",
    InfluxPrecision.MINUTES: "m",
    InfluxPrecision.HOURS: "h",
}
_FROM_SHORT_NAMES: dict[str, InfluxPrecision] = {v: k for k, v in _SHORT_NAMES.items()}

_NANOSECONDS_PER_UNIT: dict[InfluxPrecision, int] = {
    InfluxPrecision.NANOSECONDS: 1,
    InfluxPrecision.MICROSECONDS: 1_000,
    InfluxPrecision.MILLISECONDS: 1_000_000,
    InfluxPrecision.SECONDS: 1_000_000_000,
    InfluxPrecision.MINUTES: 60 * 1_000_000_000,
    InfluxPrecision.HOURS: 3600 * 1_000_000_000,
}


def to_short_name(precision: Any) -> str:
    """Return the query-string code for *precision*.

    Raises:
        InvalidPrecisionError: if *precision* is not an ``InfluxPrecision``.
    """
    if not isinstance(precision, InfluxPrecision):
        raise InvalidPrecisionError(f"Invalid timestamp precision: {precision!r}")
    return _SHORT_NAMES[precision]


def from_short_name(code: Any) -> InfluxPrecision:
    """Return the ``InfluxPrecision`` for a short code produced by ``to_short_name``.

    Raises:
        InvalidPrecisionError: if *code* is not one of n, u, ms, s, m, h.
    """
    if not isinstance(code, str) or code not in _FROM_SHORT_NAMES:
        raise InvalidPrecisionError(f"Invalid precision specifier: {code!r}")
    return _FROM_SHORT_NAMES[code]


# ── Tags and fields ───────────────────────────────────────────────────────────


class InfluxTag(BaseModel):
    """An indexed key/value pair attached to a measurement."""

    model_config = ConfigDict(frozen=True)

    key: str
    value: str

    @property
    def is_empty(self) -> bool:
        return not self.key.strip() or not self.value.strip()

    def __str__(self) -> str:
        return f"{self.key}={self.value}"


# Returned when no tag could be parsed; never leaves the tag resolver.
EMPTY_TAG = InfluxTag(key="", value="")


class InfluxField(BaseModel):
    """A typed, unindexed value attached to a measurement."""

    model_config = ConfigDict(frozen=True)

    key: str
    value: Any


class InfluxRecord(BaseModel):
    """One point: measurement name, tags, fields and an optional timestamp.

    An ``int`` timestamp is taken to be in the units of the write precision;
    a ``datetime`` is converted (naive values are treated as UTC).
    """

    model_config = ConfigDict(frozen=True)

    measurement: str
    tags: tuple[InfluxTag, ...] = ()
    fields: tuple[InfluxField, ...] = ()
    timestamp: datetime | int | None = None


# ── Connection ────────────────────────────────────────────────────────────────


class InfluxConfig(BaseModel):
    """Connection parameters used to build the write endpoint."""

    model_config = ConfigDict(frozen=True)

    uri: str = Field(..., description="Base URI of the InfluxDB server, e.g. http://host:8086")
    database: str = Field(..., description="Database the records are written to")
    username: str | None = None
    password: str | None = None
    retention_policy: str | None = Field(
        None, description="Retention policy name; blank uses the server default"
    )
    precision: InfluxPrecision | None = Field(
        None, description="Timestamp precision; None falls back to the configured default"
    )
