"""Unit tests for the detail view builder."""

from unittest.mock import MagicMock

import pytest

from packages.ipwatch.detail import ASN_FAILED_TEXT, build_detail
from packages.ipwatch.schemas import AsnRecord, CurrentState
from tests.fixtures.fakes import make_lookup


def state_for(lookup):
    return CurrentState(current_ip=lookup.ip, location=lookup.geo, last_lookup=lookup)


@pytest.fixture
def provider(asn_payload):
    provider = MagicMock()
    provider.get_asn.return_value = AsnRecord.from_provider(asn_payload)
    return provider


@pytest.fixture
def asset_cache():
    cache = MagicMock()
    cache.get_flag_path.return_value = "/cache/flags/gb.svg"
    cache.get_map_path.return_value = "/cache/maps/51.50853_-0.12574.svg"
    return cache


@pytest.mark.unit
class TestBuildDetail:
    @pytest.mark.asyncio
    async def test_full_view(self, provider, asset_cache):
        view = await build_detail(
            state_for(make_lookup()), provider, asset_cache, timeout=6
        )

        assert view.texts() == [
            "203.0.113.7",
            "Example ISP",
            "host-203-0-113-7.example.net",
            "Example Org",
            "Europe/London",
            "United Kingdom (GB), London",
            "https://maps.google.com/maps?q=51.50853,-0.12574",
        ]
        assert view.rows[5].icon == "/cache/flags/gb.svg"
        assert view.map_path == "/cache/maps/51.50853_-0.12574.svg"
        assert view.maps_url == "https://maps.google.com/maps?q=51.50853,-0.12574"
        provider.get_asn.assert_called_once_with(6)
        asset_cache.get_flag_path.assert_called_once_with("GB")

    @pytest.mark.asyncio
    async def test_asn_failure_row(self, provider, asset_cache):
        provider.get_asn.return_value = None

        view = await build_detail(
            state_for(make_lookup()), provider, asset_cache, timeout=6
        )

        assert ASN_FAILED_TEXT in view.texts()
        failed = next(row for row in view.rows if row.text == ASN_FAILED_TEXT)
        assert failed.copyable is False

    @pytest.mark.asyncio
    async def test_map_failure_falls_back_to_coordinates(self, provider, asset_cache):
        asset_cache.get_map_path.return_value = None

        view = await build_detail(
            state_for(make_lookup()), provider, asset_cache, timeout=6
        )

        assert view.texts()[-1] == "Coordinates: 51.50853, -0.12574"
        assert view.map_path is None
        assert view.maps_url == "https://maps.google.com/maps?q=51.50853,-0.12574"

    @pytest.mark.asyncio
    async def test_without_coordinates_has_no_map(self, provider, asset_cache):
        lookup = make_lookup(latitude=None, longitude=None, city=None)

        view = await build_detail(state_for(lookup), provider, asset_cache, timeout=6)

        assert view.texts()[-1] == "United Kingdom (GB)"
        assert view.maps_url is None
        asset_cache.get_map_path.assert_not_called()

    @pytest.mark.asyncio
    async def test_empty_state_has_no_rows(self, provider, asset_cache):
        view = await build_detail(CurrentState(), provider, asset_cache, timeout=6)

        assert view.rows == []
        provider.get_asn.assert_not_called()
