"""InfluxDB line-protocol serialization.

A line has the form::

    measurement[,tag=value...] field=value[,field=value...] [timestamp]
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any

from metrics_influxdb.errors import UnsupportedValueTypeError
from metrics_influxdb.models import InfluxField, InfluxPrecision, InfluxRecord, InfluxTag
from metrics_influxdb.text import (
    escape_key,
    escape_measurement,
    escape_string_field,
    escape_tag_value,
)
from metrics_influxdb.value_types import (
    ensure_valid_value,
    is_floating_point_type,
    is_integral_type,
)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def format_field_value(value: Any) -> str:
    """Render a field value: ``true``/``false``, ``42i``, ``1.5`` or ``"text"``.

    Raises:
        UnsupportedValueTypeError: for any other type, and for NaN or infinity.
    """
    ensure_valid_value(value)
    if isinstance(value, bool):
        return str(value).lower()
    if is_integral_type(type(value)):
        return f"{value}i"
    if is_floating_point_type(type(value)):
        finite = value.is_finite() if isinstance(value, Decimal) else math.isfinite(value)
        if not finite:
            raise UnsupportedValueTypeError(f"Non-finite field value: {value!r}")
        return repr(float(value)) if isinstance(value, float) else str(value)
    return f'"{escape_string_field(value)}"'


def format_tag_value(value: Any) -> str:
    """Render and escape a scalar as a tag value."""
    ensure_valid_value(value)
    if isinstance(value, bool):
        return str(value).lower()
    return escape_tag_value(str(value))


def format_timestamp(timestamp: datetime | int, precision: InfluxPrecision) -> int:
    """Convert *timestamp* to an integer count of *precision* units.

    ``int`` timestamps are assumed to be in *precision* units already.
    Naive datetimes are treated as UTC.
    """
    if isinstance(timestamp, int):
        return timestamp
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)
    nanos = (timestamp - _EPOCH) // timedelta(microseconds=1) * 1000
    return nanos // precision.nanoseconds


def _format_tags(tags: Iterable[InfluxTag]) -> str:
    return ",".join(
        f"{escape_key(t.key)}={format_tag_value(t.value)}" for t in tags if not t.is_empty
    )


def _format_fields(fields: Iterable[InfluxField]) -> str:
    return ",".join(f"{escape_key(f.key)}={format_field_value(f.value)}" for f in fields)


def to_line_protocol(
    record: InfluxRecord, precision: InfluxPrecision = InfluxPrecision.NANOSECONDS
) -> str:
    """Serialize *record* as a single line.

    Raises:
        ValueError: if the record has no fields.
        UnsupportedValueTypeError: if a field value has an unsupported type.
    """
    if not record.fields:
        raise ValueError(f"Record {record.measurement!r} has no fields")
    line = escape_measurement(record.measurement)
    tag_str = _format_tags(record.tags)
    if tag_str:
        line += f",{tag_str}"
    line += f" {_format_fields(record.fields)}"
    if record.timestamp is not None:
        line += f" {format_timestamp(record.timestamp, precision)}"
    return line


def format_lines(
    records: Iterable[InfluxRecord],
    precision: InfluxPrecision = InfluxPrecision.NANOSECONDS,
) -> str:
    """Serialize *records* as a newline-separated write body."""
    return "\n".join(to_line_protocol(r, precision) for r in records)
