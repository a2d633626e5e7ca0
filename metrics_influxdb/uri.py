"""Construction and inspection of the InfluxDB ``/write`` endpoint URI.

The URI has the fixed shape::

    {base_uri}/write?db={database}[&u=...][&p=...][&rp=...][&precision=...]

Query values are percent-encoded.  ``precision`` is omitted for nanoseconds,
which is the server default.
"""

from __future__ import annotations

import logging
import re
from urllib.parse import quote, unquote

import httpx

from metrics_influxdb.config import get_settings
from metrics_influxdb.errors import NullInputError, UriConstructionError
from metrics_influxdb.models import InfluxConfig, InfluxPrecision, to_short_name

logger = logging.getLogger(__name__)

SCHEME_HTTP = "http"
SCHEME_HTTPS = "https"
SCHEME_UDP = "udp"
_SCHEMES = (SCHEME_HTTP, SCHEME_HTTPS, SCHEME_UDP)

_QUERY_PARAM_RE = re.compile(r"[?&]([\w.]+)=([^?&]+)")


def _is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


def _encode(value: str) -> str:
    return quote(value, safe="")


def resolve_precision(
    precision: InfluxPrecision | None,
    default_precision: InfluxPrecision | None = None,
) -> InfluxPrecision:
    """Return *precision*, else *default_precision*, else the configured default."""
    if precision is not None:
        return precision
    if default_precision is not None:
        return default_precision
    return get_settings().influx_precision


def format_influx_uri(
    uri: str | httpx.URL,
    database: str,
    username: str | None = None,
    password: str | None = None,
    retention_policy: str | None = None,
    precision: InfluxPrecision | None = None,
    *,
    default_precision: InfluxPrecision | None = None,
) -> httpx.URL:
    """Build the write endpoint for *database* on the server at *uri*.

    Args:
        uri:               Base URI of the server, with or without a trailing slash.
        database:          Database to write records to.
        username:          Omitted from the query when blank.
        password:          Omitted from the query when blank.
        retention_policy:  Omitted when blank (server default policy).
        precision:         Timestamp precision of the writes.
        default_precision: Used when *precision* is None.  Falls back to
                           ``Settings.influx_precision``.

    Raises:
        NullInputError: if *uri* or *database* is None.
        UriConstructionError: if *database* is blank or the result is not a
            valid absolute URI.
        InvalidPrecisionError: if the effective precision is not an
            ``InfluxPrecision``.
    """
    if uri is None or database is None:
        raise NullInputError("uri and database must not be None")
    if _is_blank(database):
        raise UriConstructionError("database must not be blank")
    base = str(uri)
    if not base.endswith("/"):
        base += "/"

    effective = resolve_precision(precision, default_precision)
    uri_string = f"{base}write?db={_encode(database)}"
    if not _is_blank(username):
        uri_string += f"&u={_encode(username)}"
    if not _is_blank(password):
        uri_string += f"&p={_encode(password)}"
    if not _is_blank(retention_policy):
        uri_string += f"&rp={_encode(retention_policy)}"
    if effective is not InfluxPrecision.NANOSECONDS:
        uri_string += f"&precision={to_short_name(effective)}"

    try:
        url = httpx.URL(uri_string)
    except httpx.InvalidURL as exc:
        raise UriConstructionError(f"Invalid InfluxDB URI {base!r}: {exc}") from exc
    if url.scheme not in _SCHEMES or not url.host:
        raise UriConstructionError(
            f"InfluxDB URI must be an absolute {'/'.join(_SCHEMES)} URI: {base!r}"
        )

    logger.debug(
        "Built InfluxDB write URI for database %r (precision=%s, auth=%s).",
        database,
        effective.short_name,
        not _is_blank(username),
    )
    return url


def format_config_uri(
    config: InfluxConfig, default_precision: InfluxPrecision | None = None
) -> httpx.URL:
    """Build the write endpoint from an ``InfluxConfig``."""
    return format_influx_uri(
        config.uri,
        config.database,
        config.username,
        config.password,
        config.retention_policy,
        config.precision,
        default_precision=default_precision,
    )


def parse_query_string(uri: str | httpx.URL) -> dict[str, str]:
    """Parse the query parameters of *uri* into a dict of decoded values.

    A later occurrence of a key overwrites the value of an earlier one.
    """
    url = uri if isinstance(uri, httpx.URL) else httpx.URL(uri)
    path_and_query = url.raw_path.decode("ascii")
    return {
        key: unquote(value) for key, value in _QUERY_PARAM_RE.findall(path_and_query)
    }
