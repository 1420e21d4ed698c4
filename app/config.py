"""
Application Configuration
=========================
Central config loaded from environment variables.

The canonical site URL is resolved here and nowhere else. It comes from
NEXT_PUBLIC_SITE_URL or the hardcoded production domain, and never from a
platform preview hostname such as VERCEL_URL.
"""

import os
from dataclasses import dataclass
from typing import List, Mapping, Optional

from fastapi import Request

FALLBACK_SITE_URL = "https://softplayuk.co.uk"


def resolve_site_url(env: Mapping[str, str]) -> str:
    """Canonical site URL: NEXT_PUBLIC_SITE_URL if set, else the fallback, minus one trailing slash."""
    url = env.get("NEXT_PUBLIC_SITE_URL") or FALLBACK_SITE_URL
    if url.endswith("/"):
        url = url[:-1]
    return url


def _normalize_database_url(url: str) -> str:
    # Hosted Postgres providers hand out postgres://, SQLAlchemy wants postgresql://
    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql://", 1)
    return url


def _parse_int(raw: Optional[str], default: int) -> int:
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return value if value > 0 else default


@dataclass(frozen=True)
class Settings:
    site_url: str
    database_url: str
    admin_secret: Optional[str]
    cors_origins: List[str]
    ga_measurement_id: Optional[str]
    ga_api_secret: Optional[str]
    ga_debug: bool
    google_places_configured: bool
    rate_limit_enabled: bool
    admin_login_rate_limit: str
    admin_session_ttl_seconds: int
    log_level: str


def load_settings(env: Mapping[str, str] = os.environ) -> Settings:
    return Settings(
        site_url=resolve_site_url(env),
        database_url=_normalize_database_url(env.get("DATABASE_URL", "sqlite:///./softplay.db")),
        admin_secret=env.get("ADMIN_SECRET") or None,
        cors_origins=env.get("CORS_ORIGINS", "http://localhost:3000,http://localhost:8000").split(","),
        ga_measurement_id=env.get("GA_MEASUREMENT_ID") or None,
        ga_api_secret=env.get("GA_API_SECRET") or None,
        ga_debug=env.get("GA_DEBUG", "false").lower() == "true",
        google_places_configured=bool(env.get("GOOGLE_PLACES_API_KEY")),
        rate_limit_enabled=env.get("RATE_LIMIT_ENABLED", "true").lower() == "true",
        admin_login_rate_limit=env.get("ADMIN_LOGIN_RATE_LIMIT", "10/minute"),
        admin_session_ttl_seconds=_parse_int(env.get("ADMIN_SESSION_TTL_SECONDS"), 86400),
        log_level=env.get("LOG_LEVEL", "INFO").upper(),
    )


# Resolved once at process start.
settings = load_settings()


def get_settings(request: Request) -> Settings:
    """FastAPI dependency returning the settings attached to the running app."""
    return request.app.state.settings
