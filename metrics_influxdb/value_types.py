"""Line-protocol value type classification.

InfluxDB accepts integers, floats, booleans and strings as field values.
``bool`` is a subclass of ``int`` in Python but is written as ``true`` /
``false``, so it is never treated as integral.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from metrics_influxdb.errors import UnsupportedValueTypeError

INTEGRAL_TYPES: tuple[type, ...] = (int,)
FLOATING_POINT_TYPES: tuple[type, ...] = (float, Decimal)
VALID_VALUE_TYPES: tuple[type, ...] = (bool, str, *INTEGRAL_TYPES, *FLOATING_POINT_TYPES)


def _is_type(type_: Any, candidates: tuple[type, ...]) -> bool:
    return isinstance(type_, type) and issubclass(type_, candidates)


def is_valid_value_type(type_: Any) -> bool:
    """Return True if values of *type_* can be written as a field or tag value."""
    return _is_type(type_, VALID_VALUE_TYPES)


def is_integral_type(type_: Any) -> bool:
    """Return True for integer types (these get the ``i`` suffix as fields)."""
    return _is_type(type_, INTEGRAL_TYPES) and not _is_type(type_, (bool,))


def is_floating_point_type(type_: Any) -> bool:
    """Return True for ``float`` and ``Decimal``."""
    return _is_type(type_, FLOATING_POINT_TYPES)


def ensure_valid_value(value: Any) -> Any:
    """Return *value* unchanged, or raise ``UnsupportedValueTypeError``."""
    if not is_valid_value_type(type(value)):
        raise UnsupportedValueTypeError(
            f"Unsupported InfluxDB value type: {type(value).__name__}"
        )
    return value
