import json
from unittest.mock import MagicMock

import pytest
import requests

from infrastructure.configuration import IpWatchSettings, Settings, UpstreamSettings
from tests.fixtures.fakes import FakeProvider, FakeTimer


@pytest.fixture
def fake_timer():
    return FakeTimer()


@pytest.fixture
def fake_provider():
    return FakeProvider()


@pytest.fixture
def ipwatch_settings(tmp_path):
    return IpWatchSettings(
        refresh_interval_seconds=600,
        min_check_interval_seconds=4,
        network_debounce_seconds=4,
        notify_suppress_ms=15000,
        fetch_timeout_seconds=6,
        map_timeout_seconds=4,
        coord_precision=5,
        cache_dir=tmp_path / "cache",
        notify_on_change=True,
    )


@pytest.fixture
def upstream_settings():
    return UpstreamSettings()


@pytest.fixture
def app_settings(ipwatch_settings, upstream_settings):
    return Settings(ipwatch=ipwatch_settings, upstream=upstream_settings)


@pytest.fixture
def geo_payload():
    """Geolocation body as returned by the form POST endpoint."""
    return {
        "source": "ip2location",
        "res": {
            "ipAddress": "203.0.113.7",
            "countryCode": "GB",
            "countryName": "United Kingdom",
            "cityName": "London",
            "regionName": "England",
            "latitude": 51.50853,
            "longitude": -0.12574,
            "isp": "Example ISP",
        },
    }


@pytest.fixture
def asn_payload():
    return {
        "hostname": "host-203-0-113-7.example.net",
        "org": "Example Org",
        "timezone": "Europe/London",
    }


def make_response(status_code=200, body=b"", headers=None):
    response = MagicMock(spec=requests.Response)
    response.status_code = status_code
    if isinstance(body, (dict, list)):
        body = json.dumps(body).encode()
    elif isinstance(body, str):
        body = body.encode()
    response.content = body
    response.headers = headers or {}
    return response


@pytest.fixture
def response_factory():
    return make_response


@pytest.fixture
def mock_session():
    session = MagicMock(spec=requests.Session)
    session.headers = {}
    return session
