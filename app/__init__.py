"""
Soft Play UK App Package
========================
FastAPI app with lifespan, CORS, rate limiting, and router registration.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded

from app.config import settings

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(name)s %(levelname)s %(message)s",
)
logger = logging.getLogger("softplay")

# Rate limiter, keyed by client IP
limiter = Limiter(key_func=get_remote_address, enabled=settings.rate_limit_enabled)

from app.analytics import AnalyticsClient  # noqa: E402
from app.auth import AdminAuthError, SessionStore  # noqa: E402
from app.database import database  # noqa: E402
from app.responses import error_response  # noqa: E402


@asynccontextmanager
async def lifespan(app: FastAPI):
    await database.connect()
    logger.info(f"Serving {app.state.settings.site_url}")
    if not app.state.settings.admin_secret:
        logger.warning("ADMIN_SECRET is not set; admin routes will answer 503")
    yield
    await app.state.analytics.drain()
    await database.disconnect()


app = FastAPI(
    title="Soft Play UK",
    description="Soft play venue directory API",
    version="0.1.0",
    lifespan=lifespan
)

app.state.settings = settings
app.state.analytics = AnalyticsClient.from_settings(settings)
app.state.admin_sessions = SessionStore(ttl_seconds=settings.admin_session_ttl_seconds)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(AdminAuthError)
async def _admin_auth_error_handler(request: Request, exc: AdminAuthError):
    return error_response(exc.message, status_code=exc.status_code)


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register all routers
from app.routers import health, venues, pages, admin_pages, admin_api  # noqa: E402

app.include_router(health.router)
app.include_router(venues.router)
app.include_router(pages.router)
app.include_router(admin_pages.router)
app.include_router(admin_api.router)
