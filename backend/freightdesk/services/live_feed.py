"""Live dashboard feed: recomputes charts and KPIs on every store snapshot."""
import asyncio
import logging
from collections.abc import Callable
from datetime import datetime, timezone

from freightdesk.schemas.dashboard import DashboardChartData, DashboardMetrics
from freightdesk.services.kpi import dashboard_metrics
from freightdesk.services.metrics import dashboard_chart_data
from freightdesk.services.store import NOT_LOADED, RecordStore, StoreSnapshot
from freightdesk.services.view_models import empty_chart_data, empty_dashboard_metrics

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DashboardFeed:
    """Keeps the dashboard view models current with the record store.

    Until the first snapshot arrives `chart` and `metrics` are NOT_LOADED,
    which callers must tell apart from an empty dashboard.
    """

    def __init__(self, store: RecordStore, clock: Callable[[], datetime] = _utcnow):
        self._store = store
        self._clock = clock
        self.chart: DashboardChartData | object = NOT_LOADED
        self.metrics: DashboardMetrics | object = NOT_LOADED
        self.version = 0
        self._cond = asyncio.Condition()
        self._task: asyncio.Task | None = None

    @property
    def loaded(self) -> bool:
        return self.chart is not NOT_LOADED

    def apply(self, snapshot: StoreSnapshot) -> None:
        self.chart = dashboard_chart_data(snapshot.invoices, snapshot.trucks, snapshot.vendors)
        self.metrics = dashboard_metrics(
            snapshot.invoices, snapshot.trucks, snapshot.vendors, now=self._clock()
        )

    def _apply_empty(self) -> None:
        self.chart = DashboardChartData(chart_data=empty_chart_data(), truck_bars=[], vendor_bars=[])
        self.metrics = empty_dashboard_metrics()

    async def run(self) -> None:
        sub = self._store.subscribe()
        try:
            while True:
                try:
                    snapshot = await sub.__anext__()
                except StopAsyncIteration:
                    break
                except Exception as exc:
                    logger.error("Dashboard feed read failed, showing empty dashboard: %s", exc)
                    snapshot = None
                async with self._cond:
                    if snapshot is None:
                        self._apply_empty()
                    else:
                        self.apply(snapshot)
                    self.version += 1
                    self._cond.notify_all()
        finally:
            sub.close()

    async def wait_for_version(self, version: int) -> None:
        async with self._cond:
            await self._cond.wait_for(lambda: self.version >= version)

    def start(self) -> asyncio.Task:
        if self._task is None or self._task.done():
            self._task = asyncio.get_running_loop().create_task(self.run())
            logger.info("Dashboard feed started")
        return self._task

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        await asyncio.wait({self._task})
        self._task = None
        logger.info("Dashboard feed stopped")
