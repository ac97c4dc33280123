"""Unit tests for network/presence event handling."""

from unittest.mock import MagicMock

import pytest

from packages.ipwatch.debouncer import (
    DebouncePlan,
    NetworkEventDebouncer,
    PresenceStatus,
    is_idle_status,
    plan_network_event,
)


@pytest.fixture
def orchestrator():
    return MagicMock()


@pytest.fixture
def scheduler():
    return MagicMock()


@pytest.fixture
def debouncer(orchestrator, scheduler, fake_timer, ipwatch_settings):
    return NetworkEventDebouncer(orchestrator, scheduler, fake_timer, ipwatch_settings)


@pytest.mark.unit
class TestPlanNetworkEvent:
    def test_available_schedules_and_suppresses(self):
        plan = plan_network_event(True, False, now=100.0, suppress_ms=15000)
        assert plan == DebouncePlan(
            cancel_pending=True, schedule_refresh=True, suppress_until=115.0
        )

    def test_unavailable_only_cancels(self):
        plan = plan_network_event(False, False, now=100.0, suppress_ms=15000)
        assert plan == DebouncePlan(cancel_pending=True, schedule_refresh=False)

    @pytest.mark.parametrize("available", [True, False])
    def test_idle_ignores_event(self, available):
        plan = plan_network_event(available, True, now=100.0, suppress_ms=15000)
        assert not plan.cancel_pending
        assert not plan.schedule_refresh
        assert plan.suppress_until is None


@pytest.mark.unit
class TestIsIdleStatus:
    @pytest.mark.parametrize("status", [PresenceStatus.IDLE, "idle", "IDLE "])
    def test_idle(self, status):
        assert is_idle_status(status)

    @pytest.mark.parametrize(
        "status", [PresenceStatus.AVAILABLE, PresenceStatus.BUSY, "invisible"]
    )
    def test_not_idle(self, status):
        assert not is_idle_status(status)


@pytest.mark.unit
class TestNetworkChanged:
    def test_burst_collapses_into_one_refresh(self, debouncer, orchestrator, fake_timer):
        for _ in range(5):
            debouncer.on_network_changed(True)
            fake_timer.advance(1)

        orchestrator.trigger.assert_not_called()
        fake_timer.advance(3)

        orchestrator.trigger.assert_called_once_with()
        assert not debouncer.pending

    def test_refresh_fires_after_delay(self, debouncer, orchestrator, fake_timer):
        debouncer.on_network_changed(True)

        fake_timer.advance(3.9)
        orchestrator.trigger.assert_not_called()
        fake_timer.advance(0.2)
        orchestrator.trigger.assert_called_once()

    def test_opens_suppression_window(self, debouncer, orchestrator, fake_timer):
        now = fake_timer.now()

        debouncer.on_network_changed(True)

        orchestrator.suppress_notifications_until.assert_called_once_with(now + 15.0)

    def test_unavailable_cancels_pending(self, debouncer, orchestrator, fake_timer):
        debouncer.on_network_changed(True)
        debouncer.on_network_changed(False)

        fake_timer.advance(10)

        orchestrator.trigger.assert_not_called()
        assert fake_timer.pending == 0

    def test_handler_errors_are_contained(self, debouncer, orchestrator):
        orchestrator.suppress_notifications_until.side_effect = RuntimeError("boom")
        debouncer.on_network_changed(True)

    def test_close_cancels_pending(self, debouncer, orchestrator, fake_timer):
        debouncer.on_network_changed(True)
        debouncer.close()

        fake_timer.advance(10)

        orchestrator.trigger.assert_not_called()


@pytest.mark.unit
class TestPresenceChanged:
    def test_idle_cancels_pending_and_ignores_network(
        self, debouncer, orchestrator, fake_timer
    ):
        debouncer.on_network_changed(True)
        debouncer.on_presence_changed(PresenceStatus.IDLE)
        debouncer.on_network_changed(True)

        fake_timer.advance(10)

        assert debouncer.is_idle
        orchestrator.trigger.assert_not_called()
        orchestrator.suppress_notifications_until.assert_called_once()

    def test_wake_from_idle_restarts_scheduler(self, debouncer, scheduler):
        debouncer.on_presence_changed(PresenceStatus.IDLE)
        debouncer.on_presence_changed(PresenceStatus.AVAILABLE)

        assert not debouncer.is_idle
        scheduler.restart.assert_called_once_with(immediate=True)

    def test_active_to_active_does_not_restart(self, debouncer, scheduler):
        debouncer.on_presence_changed(PresenceStatus.AVAILABLE)
        debouncer.on_presence_changed(PresenceStatus.BUSY)

        scheduler.restart.assert_not_called()

    def test_restart_error_is_contained(self, debouncer, scheduler):
        scheduler.restart.side_effect = RuntimeError("boom")
        debouncer.on_presence_changed("idle")
        debouncer.on_presence_changed("available")

        assert not debouncer.is_idle
