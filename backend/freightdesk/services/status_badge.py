"""Status badge controller: debounced, optimistic write-through of invoice status.

A controller owns the displayed status of one invoice. Each click advances the
status immediately and restarts a debounce timer; when the timer elapses the
settled value is committed through the record store. At most one write per
controller is in flight. Advances made while a write is running are
re-evaluated when it finishes, giving at most one corrective write. A failed
write rolls the displayed status back to the last committed value.

    IDLE --click--> PENDING_COMMIT --timer, value changed--> COMMITTING
    PENDING_COMMIT --click--> PENDING_COMMIT (timer restarted)
    PENDING_COMMIT --timer, value unchanged--> IDLE
    COMMITTING --ok--> IDLE (or PENDING_COMMIT if clicked meanwhile)
    COMMITTING --error--> IDLE with rollback
"""
import asyncio
import enum
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from freightdesk.core.config import settings
from freightdesk.core.exceptions import PersistenceError
from freightdesk.schemas.invoice import InvoiceRecord
from freightdesk.services.status import InvoiceStatus, next_status

logger = logging.getLogger(__name__)

StatusWriter = Callable[[str, str], Awaitable[Any]]


class BadgeState(str, enum.Enum):
    IDLE = "idle"
    PENDING_COMMIT = "pending_commit"
    COMMITTING = "committing"


def advance(current: str) -> InvoiceStatus:
    return next_status(current)


class StatusBadgeController:
    def __init__(
        self,
        invoice_id: str,
        initial_status: str,
        writer: StatusWriter,
        debounce_seconds: float | None = None,
        on_change: Callable[[InvoiceStatus], None] | None = None,
        on_committed: Callable[[InvoiceStatus], None] | None = None,
        on_error: Callable[[PersistenceError], None] | None = None,
    ):
        self.invoice_id = invoice_id
        self._writer = writer
        self._debounce_seconds = (
            settings.STATUS_DEBOUNCE_SECONDS if debounce_seconds is None else debounce_seconds
        )
        self.on_change = on_change
        self.on_committed = on_committed
        self.on_error = on_error

        self._displayed = InvoiceStatus(initial_status)
        self._committed = self._displayed
        self.state = BadgeState.IDLE
        self._timer: asyncio.Task | None = None
        self._commit_task: asyncio.Task | None = None
        self._disposed = False

    @property
    def status(self) -> InvoiceStatus:
        return self._displayed

    @property
    def committed_status(self) -> InvoiceStatus:
        return self._committed

    @property
    def disposed(self) -> bool:
        return self._disposed

    @property
    def idle(self) -> bool:
        """No debounce timer pending and no write in flight."""
        return self.state is BadgeState.IDLE and self._commit_task is None

    # ─── Interaction ───

    def click(self) -> InvoiceStatus:
        """Advance the displayed status and schedule a debounced commit."""
        return self.set_status(advance(self._displayed))

    def set_status(self, status: str) -> InvoiceStatus:
        if self._disposed:
            raise RuntimeError(f"status badge for invoice {self.invoice_id} is disposed")
        self._displayed = InvoiceStatus(status)
        self._notify(self.on_change, self._displayed)
        if self.state is not BadgeState.COMMITTING:
            self._schedule()
        return self._displayed

    # ─── Persistence ───

    async def commit(self, invoice_id: str, status: InvoiceStatus) -> None:
        """Write `status` through to the store, raising PersistenceError on failure."""
        try:
            await self._writer(invoice_id, status.value)
        except PersistenceError:
            raise
        except Exception as exc:
            raise PersistenceError(f"Failed to update invoice {invoice_id}: {exc}") from exc

    async def flush(self) -> InvoiceStatus:
        """Commit the displayed status now instead of waiting for the timer.

        Waits out any write already in flight first, so concurrent callers
        share one corrective write. Raises PersistenceError if the write
        fails, or if an in-flight failure rolled back the status this call
        was asked to land.
        """
        target = self._displayed
        failure: PersistenceError | None = None
        self._cancel_timer()
        while self._commit_task is not None:
            task = self._commit_task
            await asyncio.wait({task})
            error = task.result()
            if error is not None:
                failure = error
            self._cancel_timer()

        if self._disposed:
            return self._committed
        if failure is not None and self._displayed != target:
            raise failure
        if self._displayed != self._committed:
            self._start_commit()
            task = self._commit_task
            await asyncio.wait({task})
            error = task.result()
            if error is not None:
                raise error
        return self._committed

    async def wait_idle(self) -> None:
        """Wait until no debounce timer or write is outstanding."""
        while True:
            task = self._timer or self._commit_task
            if task is None:
                return
            await asyncio.wait({task})
            if task is self._timer and task.done():
                self._timer = None

    def dispose(self) -> None:
        """Drop a pending commit; an in-flight write finishes but is not applied."""
        self._disposed = True
        if self._timer is not None:
            logger.debug("Discarded pending status commit for invoice %s", self.invoice_id)
        self._cancel_timer()

    # ─── Internals ───

    def _cancel_timer(self) -> None:
        if self._timer is None:
            return
        self._timer.cancel()
        self._timer = None
        if self._commit_task is None:
            self.state = BadgeState.IDLE

    def _schedule(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
        self.state = BadgeState.PENDING_COMMIT
        self._timer = asyncio.get_running_loop().create_task(self._debounce())

    async def _debounce(self) -> None:
        await asyncio.sleep(self._debounce_seconds)
        self._timer = None
        if self._disposed:
            return
        if self._displayed == self._committed:
            self.state = BadgeState.IDLE
            return
        self._start_commit()

    def _start_commit(self) -> None:
        self.state = BadgeState.COMMITTING
        self._commit_task = asyncio.get_running_loop().create_task(
            self._run_commit(self._displayed)
        )

    async def _run_commit(self, value: InvoiceStatus) -> PersistenceError | None:
        """Run one write; returns the failure (already rolled back) or None."""
        try:
            await self.commit(self.invoice_id, value)
        except PersistenceError as exc:
            self._commit_task = None
            logger.warning("Status commit failed for invoice %s: %s", self.invoice_id, exc)
            if self._disposed:
                return None
            self._displayed = self._committed
            self.state = BadgeState.IDLE
            self._notify(self.on_change, self._displayed)
            self._notify(self.on_error, exc)
            return exc

        self._commit_task = None
        if self._disposed:
            logger.debug("Invoice %s committed %s after dispose", self.invoice_id, value.value)
            return None
        self._committed = value
        self._notify(self.on_committed, value)
        if self._displayed != self._committed:
            self._schedule()
        else:
            self.state = BadgeState.IDLE
        return None

    def _notify(self, callback, value) -> None:
        if callback is None:
            return
        try:
            callback(value)
        except Exception:
            logger.exception("Status badge callback failed for invoice %s", self.invoice_id)


class StatusBadgeRegistry:
    """One controller per invoice, so writes for an invoice never overlap.

    Idle controllers are evicted on the next lookup; a fresh one is built from
    the stored record when the invoice is touched again.
    """

    def __init__(self, writer: StatusWriter, debounce_seconds: float | None = None):
        self._writer = writer
        self._debounce_seconds = debounce_seconds
        self._controllers: dict[str, StatusBadgeController] = {}

    def get(self, invoice: InvoiceRecord) -> StatusBadgeController:
        self._evict_idle()
        key = str(invoice.id)
        ctrl = self._controllers.get(key)
        if ctrl is None:
            ctrl = StatusBadgeController(
                invoice_id=key,
                initial_status=invoice.status,
                writer=self._writer,
                debounce_seconds=self._debounce_seconds,
            )
            self._controllers[key] = ctrl
        return ctrl

    def _evict_idle(self) -> None:
        for key, ctrl in list(self._controllers.items()):
            if ctrl.idle or ctrl.disposed:
                del self._controllers[key]

    def __len__(self) -> int:
        return len(self._controllers)

    async def close(self) -> None:
        """Flush pending commits and wait for in-flight writes (shutdown)."""
        for ctrl in list(self._controllers.values()):
            try:
                await ctrl.flush()
            except PersistenceError as exc:
                logger.warning("Status flush on shutdown failed: %s", exc)
            ctrl.dispose()
        self._controllers.clear()
