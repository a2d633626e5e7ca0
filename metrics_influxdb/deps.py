"""Dependency providers.

Wire the cached ``Settings`` into the connection config and the write
client.  Tests pass their own ``Settings`` instead of touching the cache.
"""

from metrics_influxdb.clients.influxdb import InfluxDBClient
from metrics_influxdb.config import Settings, get_settings
from metrics_influxdb.models import InfluxConfig


def get_influx_config(settings: Settings | None = None) -> InfluxConfig:
    settings = settings or get_settings()
    return InfluxConfig(
        uri=settings.influx_url,
        database=settings.influx_database,
        username=settings.influx_username or None,
        password=settings.influx_password or None,
        retention_policy=settings.influx_retention_policy or None,
        precision=settings.influx_precision,
    )


def get_influxdb_client(settings: Settings | None = None) -> InfluxDBClient:
    settings = settings or get_settings()
    return InfluxDBClient(
        config=get_influx_config(settings),
        timeout=settings.influx_timeout,
    )
