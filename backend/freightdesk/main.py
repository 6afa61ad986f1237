from contextlib import asynccontextmanager
import logging

import sentry_sdk
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from freightdesk.core.config import settings
from freightdesk.core.deps import build_store
from freightdesk.core.exceptions import NotFoundError, PersistenceError
from freightdesk.core.limiter import limiter
from freightdesk.core.logging import setup_logging
from freightdesk.core.seed import seed_memory_store
from freightdesk.services.escalation_email import install_default_templates
from freightdesk.middleware.request_id import RequestIdMiddleware
from freightdesk.services.live_feed import DashboardFeed
from freightdesk.services.status_badge import StatusBadgeRegistry
from freightdesk.services.store import InMemoryRecordStore

setup_logging()

logger = logging.getLogger(__name__)

# Initialize Sentry error monitoring
if settings.SENTRY_DSN:
    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        traces_sample_rate=settings.SENTRY_TRACES_SAMPLE_RATE,
        environment=settings.APP_ENV,
        send_default_pii=False,
    )
    logger.info("Sentry initialized")


@asynccontextmanager
async def lifespan(app: FastAPI):
    store = build_store()
    if isinstance(store, InMemoryRecordStore) and settings.SEED_DEMO_DATA:
        seed_memory_store(store)
    try:
        await install_default_templates(store)
    except PersistenceError as exc:
        logger.warning("Could not install default email templates: %s", exc)
    app.state.store = store
    app.state.badges = StatusBadgeRegistry(store.update_invoice_status)
    app.state.feed = DashboardFeed(store)
    app.state.feed.start()
    logger.info("Record store ready (backend=%s)", settings.STORE_BACKEND)
    yield
    # Shutdown: land pending status commits before the store goes away
    await app.state.badges.close()
    await app.state.feed.stop()
    if settings.STORE_BACKEND == "sql":
        from freightdesk.db.session import dispose_engine
        await dispose_engine()


app = FastAPI(
    title="FreightDesk Invoice Dashboard",
    version="0.1.0",
    docs_url="/api/docs" if settings.APP_ENV != "production" else None,
    redoc_url="/api/redoc" if settings.APP_ENV != "production" else None,
    lifespan=lifespan,
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

app.add_middleware(RequestIdMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(PersistenceError)
async def persistence_error_handler(request: Request, exc: PersistenceError):
    logger.warning("Persistence failure on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=409, content={"detail": str(exc)})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error("Unhandled exception: %s %s: %s", request.method, request.url.path, exc, exc_info=True)
    return JSONResponse(status_code=500, content={"detail": "Internal server error."})


# ─── Routers ───
from freightdesk.api.v1.router import api_router  # noqa: E402

app.include_router(api_router, prefix="/api/v1")


@app.get("/health")
async def health():
    return {"status": "ok", "env": settings.APP_ENV}
