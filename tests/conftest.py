"""Shared pytest fixtures.

The settings singleton is cleared around every test and the ``INFLUX_*``
environment is scrubbed so tests never depend on the host configuration.
HTTP writes go through ``httpx.MockTransport``.
"""

from __future__ import annotations

from collections.abc import Iterator

import httpx
import pytest

from metrics_influxdb.config import Settings, get_settings
from metrics_influxdb.models import InfluxConfig

_ENV_VARS = (
    "INFLUX_URL",
    "INFLUX_DATABASE",
    "INFLUX_USERNAME",
    "INFLUX_PASSWORD",
    "INFLUX_RETENTION_POLICY",
    "INFLUX_PRECISION",
    "INFLUX_TIMEOUT",
)

# ── Fixtures ──────────────────────────────────────────────────────────────────


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch: pytest.MonkeyPatch, tmp_path) -> Iterator[None]:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    # Keep a stray .env in the working directory out of the tests.
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        influx_url="http://influxdb:8086",
        influx_database="metrics",
        influx_username="reporter",
        influx_password="secret",
        influx_precision="s",
    )


@pytest.fixture()
def influx_config() -> InfluxConfig:
    return InfluxConfig(uri="http://influxdb:8086", database="metrics")


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it served."""

    def __init__(self, status_code: int = 204, text: str = "") -> None:
        self.requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return httpx.Response(status_code, text=text)

        super().__init__(handler)


@pytest.fixture()
def transport() -> RecordingTransport:
    return RecordingTransport()
