"""Tests for the status badge controller (debounce, write-through, rollback)."""
import asyncio

import pytest

from freightdesk.core.exceptions import NotFoundError, PersistenceError
from freightdesk.services.status import InvoiceStatus
from freightdesk.services.status_badge import (
    BadgeState,
    StatusBadgeController,
    StatusBadgeRegistry,
    advance,
)

from conftest import make_invoice

DEBOUNCE = 0.01


# ─── Helpers ──────────────────────────────────────────────────────────────────

class FakeWriter:
    """Records status writes; can be slowed down or made to fail."""

    def __init__(self, delay: float = 0.0, error: Exception | None = None):
        self.delay = delay
        self.error = error
        self.calls: list[tuple[str, str]] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def __call__(self, invoice_id: str, status: str):
        self.calls.append((invoice_id, status))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            if self.error is not None:
                raise self.error
        finally:
            self.in_flight -= 1


def _controller(writer, status="need_action", **kwargs):
    return StatusBadgeController(
        invoice_id="inv-1",
        initial_status=status,
        writer=writer,
        debounce_seconds=DEBOUNCE,
        **kwargs,
    )


# ─── advance ──────────────────────────────────────────────────────────────────

def test_advance_is_pure_cycle():
    assert advance("need_action") == InvoiceStatus.escalated
    assert advance("escalated") == InvoiceStatus.need_action


# ─── Debounce ─────────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_rapid_clicks_produce_single_write_with_final_value():
    """Three clicks inside the window commit only the settled value."""
    writer = FakeWriter()
    ctrl = _controller(writer)

    ctrl.click()
    ctrl.click()
    ctrl.click()
    assert ctrl.status == InvoiceStatus.escalated
    assert ctrl.state == BadgeState.PENDING_COMMIT
    assert writer.calls == []

    await ctrl.wait_idle()

    assert writer.calls == [("inv-1", "escalated")]
    assert ctrl.committed_status == InvoiceStatus.escalated
    assert ctrl.state == BadgeState.IDLE


@pytest.mark.asyncio
async def test_clicks_back_to_committed_value_skip_write():
    """An even number of clicks lands on the committed value: no write."""
    writer = FakeWriter()
    ctrl = _controller(writer)

    ctrl.click()
    ctrl.click()
    await ctrl.wait_idle()

    assert writer.calls == []
    assert ctrl.status == InvoiceStatus.need_action
    assert ctrl.state == BadgeState.IDLE


@pytest.mark.asyncio
async def test_click_notifies_change_immediately():
    changes = []
    ctrl = _controller(FakeWriter(), on_change=changes.append)

    ctrl.click()

    assert changes == [InvoiceStatus.escalated]
    await ctrl.wait_idle()


# ─── Commit outcome ───────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_successful_commit_fires_on_committed():
    committed = []
    ctrl = _controller(FakeWriter(), on_committed=committed.append)

    ctrl.click()
    await ctrl.wait_idle()

    assert committed == [InvoiceStatus.escalated]


@pytest.mark.asyncio
async def test_failed_commit_rolls_back_and_reports_error():
    """A write failure resets the display to the last committed status."""
    errors = []
    changes = []
    writer = FakeWriter(error=NotFoundError("invoice", "inv-1"))
    ctrl = _controller(writer, on_error=errors.append, on_change=changes.append)

    ctrl.click()
    await ctrl.wait_idle()

    assert ctrl.status == InvoiceStatus.need_action
    assert ctrl.committed_status == InvoiceStatus.need_action
    assert ctrl.state == BadgeState.IDLE
    assert len(errors) == 1
    assert isinstance(errors[0], PersistenceError)
    assert isinstance(errors[0].__cause__, NotFoundError)
    assert changes == [InvoiceStatus.escalated, InvoiceStatus.need_action]


@pytest.mark.asyncio
async def test_clicks_work_normally_after_failed_commit():
    writer = FakeWriter(error=PersistenceError("db down"))
    ctrl = _controller(writer)

    ctrl.click()
    await ctrl.wait_idle()
    assert ctrl.status == InvoiceStatus.need_action

    writer.error = None
    ctrl.click()
    assert ctrl.state == BadgeState.PENDING_COMMIT
    await ctrl.wait_idle()

    assert writer.calls[1:] == [("inv-1", "escalated")]
    assert ctrl.committed_status == InvoiceStatus.escalated
    assert ctrl.state == BadgeState.IDLE


@pytest.mark.asyncio
async def test_commit_passes_persistence_error_through():
    writer = FakeWriter(error=PersistenceError("db down"))
    ctrl = _controller(writer)

    with pytest.raises(PersistenceError, match="db down"):
        await ctrl.commit("inv-1", InvoiceStatus.escalated)


# ─── Serialization ────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_click_during_commit_issues_one_corrective_write():
    """Writes never overlap; the value clicked mid-write is committed after."""
    writer = FakeWriter(delay=0.05)
    ctrl = _controller(writer)

    ctrl.click()
    await asyncio.sleep(DEBOUNCE * 3)
    assert ctrl.state == BadgeState.COMMITTING

    ctrl.click()
    assert ctrl.status == InvoiceStatus.need_action
    assert ctrl.state == BadgeState.COMMITTING

    await ctrl.wait_idle()

    assert writer.calls == [("inv-1", "escalated"), ("inv-1", "need_action")]
    assert writer.max_in_flight == 1
    assert ctrl.committed_status == InvoiceStatus.need_action
    assert ctrl.state == BadgeState.IDLE


@pytest.mark.asyncio
async def test_concurrent_flushes_share_one_corrective_write():
    """Two flushes arriving during a debounced write never overlap writes."""
    writer = FakeWriter(delay=0.05)
    ctrl = _controller(writer)

    ctrl.click()
    await asyncio.sleep(DEBOUNCE * 3)
    assert ctrl.state == BadgeState.COMMITTING
    ctrl.set_status("need_action")

    results = await asyncio.gather(ctrl.flush(), ctrl.flush())

    assert writer.calls == [("inv-1", "escalated"), ("inv-1", "need_action")]
    assert writer.max_in_flight == 1
    assert results == [InvoiceStatus.need_action, InvoiceStatus.need_action]
    assert ctrl.state == BadgeState.IDLE


@pytest.mark.asyncio
async def test_flush_raises_when_in_flight_failure_drops_its_status():
    """A status set during a failing write is reported as failed, not as saved."""
    writer = FakeWriter(delay=0.05, error=RuntimeError("connection reset"))
    ctrl = StatusBadgeController("inv-1", "need_action", writer, debounce_seconds=10)

    ctrl.set_status("escalated")
    first = asyncio.create_task(ctrl.flush())
    await asyncio.sleep(0)
    assert ctrl.state == BadgeState.COMMITTING

    ctrl.set_status("escalated")
    with pytest.raises(PersistenceError):
        await ctrl.flush()
    with pytest.raises(PersistenceError):
        await first

    assert writer.calls == [("inv-1", "escalated")]
    assert ctrl.status == InvoiceStatus.need_action


@pytest.mark.asyncio
async def test_flush_commits_without_waiting_for_timer():
    writer = FakeWriter()
    ctrl = StatusBadgeController("inv-1", "need_action", writer, debounce_seconds=10)

    ctrl.click()
    result = await ctrl.flush()

    assert result == InvoiceStatus.escalated
    assert writer.calls == [("inv-1", "escalated")]
    assert ctrl.state == BadgeState.IDLE


@pytest.mark.asyncio
async def test_flush_raises_after_rollback():
    writer = FakeWriter(error=RuntimeError("connection reset"))
    ctrl = StatusBadgeController("inv-1", "escalated", writer, debounce_seconds=10)

    ctrl.set_status("need_action")
    with pytest.raises(PersistenceError):
        await ctrl.flush()

    assert ctrl.status == InvoiceStatus.escalated


# ─── Disposal ─────────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_dispose_cancels_pending_commit():
    writer = FakeWriter()
    ctrl = _controller(writer)

    ctrl.click()
    ctrl.dispose()
    await asyncio.sleep(DEBOUNCE * 3)

    assert writer.calls == []
    assert ctrl.state == BadgeState.IDLE


@pytest.mark.asyncio
async def test_dispose_during_commit_lets_write_finish_silently():
    """The in-flight write completes but its result is not applied."""
    committed = []
    errors = []
    writer = FakeWriter(delay=0.05)
    ctrl = _controller(writer, on_committed=committed.append, on_error=errors.append)

    ctrl.click()
    await asyncio.sleep(DEBOUNCE * 3)
    assert ctrl.state == BadgeState.COMMITTING

    ctrl.dispose()
    await ctrl.wait_idle()

    assert writer.calls == [("inv-1", "escalated")]
    assert ctrl.committed_status == InvoiceStatus.need_action
    assert committed == []
    assert errors == []


@pytest.mark.asyncio
async def test_click_after_dispose_raises():
    ctrl = _controller(FakeWriter())
    ctrl.dispose()

    with pytest.raises(RuntimeError):
        ctrl.click()


# ─── Registry ─────────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_registry_reuses_controller_per_invoice():
    registry = StatusBadgeRegistry(FakeWriter(), debounce_seconds=DEBOUNCE)
    invoice = make_invoice("INV-9")

    first = registry.get(invoice)
    first.click()
    second = registry.get(invoice)

    assert first is second
    assert len(registry) == 1
    await first.wait_idle()


@pytest.mark.asyncio
async def test_registry_evicts_idle_controllers():
    writer = FakeWriter()
    registry = StatusBadgeRegistry(writer, debounce_seconds=DEBOUNCE)
    settled, busy = make_invoice("INV-8"), make_invoice("INV-9")

    ctrl = registry.get(settled)
    ctrl.click()
    await ctrl.wait_idle()
    registry.get(busy).click()

    assert len(registry) == 1
    assert registry.get(settled) is not ctrl
    assert writer.calls == [(str(settled.id), "escalated")]
    await registry.close()


@pytest.mark.asyncio
async def test_registry_close_flushes_pending_commits():
    writer = FakeWriter()
    registry = StatusBadgeRegistry(writer, debounce_seconds=10)
    invoice = make_invoice("INV-9")

    registry.get(invoice).click()
    await registry.close()

    assert writer.calls == [(str(invoice.id), "escalated")]
    assert len(registry) == 0
