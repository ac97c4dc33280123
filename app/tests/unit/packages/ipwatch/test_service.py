"""Unit tests for monitor lifecycle and wiring."""

import asyncio
from unittest.mock import MagicMock

import pytest

from infrastructure.clients.http import HttpClient
from infrastructure.events import Signal
from packages.ipwatch.service import IpWatchService
from tests.fixtures.fakes import FakeProvider, make_lookup


async def drain():
    for _ in range(5):
        await asyncio.sleep(0)


@pytest.fixture
def signals():
    return Signal("presence-status-changed"), Signal("network-changed")


@pytest.fixture
def display():
    return MagicMock()


@pytest.fixture
def make_service(app_settings, fake_timer, mock_session, response_factory, signals, display):
    mock_session.request.return_value = response_factory(404, "no flag")

    def _factory(*results):
        presence, network = signals
        provider = FakeProvider(*results)
        service = IpWatchService(
            app_settings,
            display_updated=display,
            notify_user=MagicMock(),
            presence_signal=presence,
            network_signal=network,
            timer=fake_timer,
            http_client=HttpClient(session=mock_session),
            provider=provider,
        )
        return service, provider

    return _factory


@pytest.mark.unit
class TestEnable:
    @pytest.mark.asyncio
    async def test_enable_refreshes_and_starts_scheduler(
        self, make_service, signals, display
    ):
        service, provider = make_service(make_lookup())

        service.enable()
        await drain()

        presence, network = signals
        assert service.enabled
        assert service.state.current_ip == "203.0.113.7"
        display.assert_called_once_with("203.0.113.7", "GB", "Example ISP")
        assert service.scheduler.running
        assert presence.emit("available") == [None]
        assert network.emit(False) == [None]
        service.disable()

    @pytest.mark.asyncio
    async def test_enable_twice_is_noop(self, make_service, signals):
        service, provider = make_service(make_lookup())

        service.enable()
        service.enable()
        await drain()

        assert provider.calls == 1
        assert signals[1].emit(False) == [None]
        service.disable()

    @pytest.mark.asyncio
    async def test_periodic_refresh(self, make_service, fake_timer):
        service, provider = make_service(make_lookup(), make_lookup())
        service.enable()
        await drain()

        fake_timer.advance(600)
        await drain()

        assert provider.calls == 2
        service.disable()

    @pytest.mark.asyncio
    async def test_network_burst_refreshes_once(self, make_service, signals, fake_timer):
        service, provider = make_service(make_lookup(), make_lookup())
        service.enable()
        await drain()
        _, network = signals

        for _ in range(3):
            network.emit(True)
        fake_timer.advance(4)
        await drain()

        assert provider.calls == 2
        assert service.orchestrator.suppress_until == pytest.approx(fake_timer.now() + 11)
        service.disable()

    @pytest.mark.asyncio
    async def test_idle_pauses_and_wake_resumes(self, make_service, signals, fake_timer):
        service, provider = make_service(make_lookup(), make_lookup())
        service.enable()
        await drain()
        presence, _ = signals

        presence.emit("idle")
        fake_timer.advance(600)
        await drain()
        assert provider.calls == 1
        assert not service.scheduler.running

        presence.emit("available")
        await drain()
        assert provider.calls == 2
        assert service.scheduler.running
        service.disable()

    @pytest.mark.asyncio
    async def test_flag_download_triggers_redisplay(
        self, make_service, mock_session, response_factory, display
    ):
        mock_session.request.return_value = response_factory(200, b"<svg>gb</svg>")
        redisplayed = asyncio.Event()
        display.side_effect = lambda *args: (
            redisplayed.set() if display.call_count >= 2 else None
        )
        service, _ = make_service(make_lookup())

        service.enable()
        await asyncio.wait_for(redisplayed.wait(), timeout=2)

        assert display.call_count == 2
        assert service.flag_path("GB").endswith("gb.svg")
        service.disable()


@pytest.mark.unit
class TestDisable:
    @pytest.mark.asyncio
    async def test_disable_tears_down(self, make_service, signals, fake_timer):
        service, _ = make_service(make_lookup())
        service.enable()
        await drain()
        signals[1].emit(True)

        service.disable()

        assert not service.enabled
        assert service.state.is_empty
        assert signals[0].emit("idle") == []
        assert signals[1].emit(True) == []
        assert fake_timer.pending == 0
        assert service.refresh_now() is None

    @pytest.mark.asyncio
    async def test_disable_twice_is_safe(self, make_service):
        service, _ = make_service(make_lookup())
        service.enable()
        await drain()

        service.disable()
        service.disable()

    @pytest.mark.asyncio
    async def test_disable_during_refresh_discards_result(self, make_service, display):
        service, provider = make_service(make_lookup())
        provider.hold()

        service.enable()
        await provider.started.wait()
        service.disable()
        provider.release()
        await drain()

        assert service.state.is_empty
        display.assert_not_called()

    @pytest.mark.asyncio
    async def test_detail_when_disabled_is_empty(self, make_service):
        service, _ = make_service()
        view = await service.detail()
        assert view.rows == []


@pytest.mark.unit
class TestRefreshNow:
    @pytest.mark.asyncio
    async def test_refresh_now_bypasses_throttle(self, make_service):
        service, provider = make_service(make_lookup(), make_lookup())
        service.enable()
        await drain()

        await service.refresh_now()

        assert provider.calls == 2
        service.disable()
