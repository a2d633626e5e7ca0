"""InfluxDB v1 HTTP write client.

Posts line-protocol bodies to the ``/write`` endpoint built by
``metrics_influxdb.uri``.  Retries and batching belong to the caller.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

import httpx

from metrics_influxdb.errors import InfluxDBError
from metrics_influxdb.line_protocol import to_line_protocol
from metrics_influxdb.models import InfluxConfig, InfluxPrecision, InfluxRecord
from metrics_influxdb.uri import format_config_uri, resolve_precision

__all__ = ["InfluxDBClient", "InfluxDBError"]

logger = logging.getLogger(__name__)


class InfluxDBClient:
    """Async client for the InfluxDB line-protocol write endpoint."""

    def __init__(
        self,
        config: InfluxConfig,
        timeout: float = 10.0,
        default_precision: InfluxPrecision | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._precision = resolve_precision(config.precision, default_precision)
        self._write_uri = format_config_uri(config, default_precision=self._precision)
        self._database = config.database
        self._timeout = timeout
        self._transport = transport

    @property
    def write_uri(self) -> httpx.URL:
        return self._write_uri

    @property
    def precision(self) -> InfluxPrecision:
        return self._precision

    async def write_lines(self, lines: list[str]) -> None:
        """Write a batch of line-protocol strings to InfluxDB.

        Args:
            lines: InfluxDB line protocol strings.  An empty batch is skipped.

        Raises:
            InfluxDBError: on a non-2xx response.
        """
        if not lines:
            logger.debug("No lines to write to database %r – skipping.", self._database)
            return

        body = "\n".join(lines)
        async with httpx.AsyncClient(transport=self._transport) as client:
            resp = await client.post(
                self._write_uri,
                headers={"Content-Type": "text/plain; charset=utf-8"},
                content=body.encode(),
                timeout=self._timeout,
            )
        if not resp.is_success:
            raise InfluxDBError(
                f"InfluxDB write failed (HTTP {resp.status_code}): {resp.text}"
            )
        logger.debug("Wrote %d line(s) to database %r.", len(lines), self._database)

    async def write_records(self, records: Iterable[InfluxRecord]) -> None:
        """Serialize *records* with the client's precision and write them."""
        await self.write_lines([to_line_protocol(r, self._precision) for r in records])
