"""Exception hierarchy for the InfluxDB encoding layer.

Malformed individual tags are never raised; they are dropped by the tag
resolver.  Everything here signals a programming or configuration defect.
"""


class InfluxError(Exception):
    """Base class for all errors raised by this package."""


class NullInputError(InfluxError, TypeError):
    """Raised when a required string argument is ``None``."""


class UnsupportedValueTypeError(InfluxError, TypeError):
    """Raised when a value cannot be written as a line-protocol field or tag."""


class InvalidPrecisionError(InfluxError, ValueError):
    """Raised for an unknown precision member or short code."""


class UriConstructionError(InfluxError, ValueError):
    """Raised when the write endpoint URI cannot be built."""


class InfluxDBError(InfluxError):
    """Raised when an InfluxDB write operation fails."""
