"""Unit tests for line-protocol serialization."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from metrics_influxdb.errors import UnsupportedValueTypeError
from metrics_influxdb.line_protocol import (
    format_field_value,
    format_lines,
    format_tag_value,
    format_timestamp,
    to_line_protocol,
)
from metrics_influxdb.models import InfluxField, InfluxPrecision, InfluxRecord, InfluxTag
from metrics_influxdb.tags import join_tags

NEW_YEAR_2020 = datetime(2020, 1, 1, tzinfo=timezone.utc)

# ── Field values ──────────────────────────────────────────────────────────────


@pytest.mark.parametrize(
    "value,expected",
    [
        (True, "true"),
        (False, "false"),
        (42, "42i"),
        (-7, "-7i"),
        (1.5, "1.5"),
        (2.0, "2.0"),
        (Decimal("1.25"), "1.25"),
        ("idle", '"idle"'),
        ('say "hello" \\world', r'"say \"hello\" \\world"'),
    ],
)
def test_format_field_value(value: object, expected: str) -> None:
    assert format_field_value(value) == expected


@pytest.mark.parametrize("value", [None, [1], {"a": 1}, b"raw", 1j])
def test_unsupported_field_value_raises(value: object) -> None:
    with pytest.raises(UnsupportedValueTypeError):
        format_field_value(value)


@pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
def test_non_finite_field_value_raises(value: float) -> None:
    with pytest.raises(UnsupportedValueTypeError, match="Non-finite"):
        format_field_value(value)


def test_format_tag_value() -> None:
    assert format_tag_value("us west") == "us\\ west"
    assert format_tag_value(8086) == "8086"
    assert format_tag_value(True) == "true"
    with pytest.raises(UnsupportedValueTypeError):
        format_tag_value(["a"])


# ── Timestamps ────────────────────────────────────────────────────────────────


@pytest.mark.parametrize(
    "precision,expected",
    [
        (InfluxPrecision.NANOSECONDS, 1577836800_000_000_000),
        (InfluxPrecision.MICROSECONDS, 1577836800_000_000),
        (InfluxPrecision.MILLISECONDS, 1577836800_000),
        (InfluxPrecision.SECONDS, 1577836800),
        (InfluxPrecision.MINUTES, 1577836800 // 60),
        (InfluxPrecision.HOURS, 1577836800 // 3600),
    ],
)
def test_format_timestamp_datetime(precision: InfluxPrecision, expected: int) -> None:
    assert format_timestamp(NEW_YEAR_2020, precision) == expected


def test_naive_datetime_is_utc() -> None:
    naive = datetime(2020, 1, 1, 0, 0, 0, 250_000)
    assert format_timestamp(naive, InfluxPrecision.MILLISECONDS) == 1577836800_250


def test_aware_datetime_offset_is_applied() -> None:
    plus_one = datetime(2020, 1, 1, 1, tzinfo=timezone(timedelta(hours=1)))
    assert format_timestamp(plus_one, InfluxPrecision.SECONDS) == 1577836800


def test_int_timestamp_passes_through() -> None:
    assert format_timestamp(1234, InfluxPrecision.SECONDS) == 1234


# ── Records ───────────────────────────────────────────────────────────────────


def test_to_line_protocol() -> None:
    record = InfluxRecord(
        measurement="cpu load",
        tags=join_tags([{"host": "server 01"}], item_name="requests"),
        fields=[InfluxField(key="value", value=1.5), InfluxField(key="count", value=3)],
        timestamp=NEW_YEAR_2020,
    )
    line = to_line_protocol(record, InfluxPrecision.SECONDS)
    assert line == "cpu\\ load,host=server\\ 01,Name=requests value=1.5,count=3i 1577836800"


def test_to_line_protocol_without_tags_or_timestamp() -> None:
    record = InfluxRecord(measurement="uptime", fields=[InfluxField(key="up", value=True)])
    assert to_line_protocol(record) == "uptime up=true"


def test_empty_tags_are_skipped() -> None:
    record = InfluxRecord(
        measurement="m",
        tags=[InfluxTag(key="", value=""), InfluxTag(key="a", value="1")],
        fields=[InfluxField(key="v", value=1)],
    )
    assert to_line_protocol(record) == "m,a=1 v=1i"


def test_record_without_fields_raises() -> None:
    with pytest.raises(ValueError, match="no fields"):
        to_line_protocol(InfluxRecord(measurement="empty"))


def test_unsupported_field_in_record_raises() -> None:
    record = InfluxRecord(measurement="m", fields=[InfluxField(key="v", value={"x": 1})])
    with pytest.raises(UnsupportedValueTypeError):
        to_line_protocol(record)


def test_format_lines() -> None:
    records = [
        InfluxRecord(measurement="a", fields=[InfluxField(key="v", value=1)], timestamp=10),
        InfluxRecord(measurement="b", fields=[InfluxField(key="v", value="x")], timestamp=11),
    ]
    assert format_lines(records) == 'a v=1i 10\nb v="x" 11'


# ── Escaping edge cases ───────────────────────────────────────────────────────


def test_trailing_backslash_in_tag_value_is_escaped() -> None:
    record = InfluxRecord(
        measurement="m",
        tags=[InfluxTag(key="k", value="a\\")],
        fields=[InfluxField(key="v", value=1)],
    )
    assert to_line_protocol(record) == "m,k=a\\\\ v=1i"


def test_trailing_backslash_in_key_and_measurement_is_escaped() -> None:
    record = InfluxRecord(
        measurement="m\\",
        tags=[InfluxTag(key="k\\", value="a")],
        fields=[InfluxField(key="v\\", value=1)],
    )
    assert to_line_protocol(record) == "m\\\\,k\\\\=a v\\\\=1i"


@pytest.mark.parametrize("value", [Decimal("NaN"), Decimal("sNaN"), Decimal("Infinity")])
def test_non_finite_decimal_raises(value: Decimal) -> None:
    with pytest.raises(UnsupportedValueTypeError, match="Non-finite"):
        format_field_value(value)


def test_whitespace_tags_are_skipped() -> None:
    record = InfluxRecord(
        measurement="m",
        tags=[InfluxTag(key="k", value=" "), InfluxTag(key="  ", value="x")],
        fields=[InfluxField(key="v", value=1)],
    )
    assert to_line_protocol(record) == "m v=1i"
