from typing import Annotated

from fastapi import Depends, Request

from freightdesk.core.config import settings
from freightdesk.services.live_feed import DashboardFeed
from freightdesk.services.status_badge import StatusBadgeRegistry
from freightdesk.services.store import InMemoryRecordStore, RecordStore


def build_store() -> RecordStore:
    """Create the record store selected by STORE_BACKEND."""
    if settings.STORE_BACKEND == "sql":
        from freightdesk.db.session import AsyncSessionLocal
        from freightdesk.db.store import SqlRecordStore

        return SqlRecordStore(AsyncSessionLocal)
    if settings.STORE_BACKEND != "memory":
        raise ValueError(f"Unknown STORE_BACKEND '{settings.STORE_BACKEND}'")
    return InMemoryRecordStore()


def get_store(request: Request) -> RecordStore:
    return request.app.state.store


def get_badges(request: Request) -> StatusBadgeRegistry:
    return request.app.state.badges


def get_feed(request: Request) -> DashboardFeed | None:
    """The live feed, or None when it is not running."""
    return getattr(request.app.state, "feed", None)


StoreDep = Annotated[RecordStore, Depends(get_store)]
BadgesDep = Annotated[StatusBadgeRegistry, Depends(get_badges)]
FeedDep = Annotated[DashboardFeed | None, Depends(get_feed)]
