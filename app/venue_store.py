"""
Venue Queries
=============
Read-only queries against the venues table.
"""

import logging
from typing import Any, Dict, Optional

import sqlalchemy
from sqlalchemy import func

from app.database import database, venues

logger = logging.getLogger(__name__)

ACTIVE = "active"


async def get_venue_count() -> int:
    """Number of active venues right now. Not cached."""
    query = sqlalchemy.select(func.count()).select_from(venues).where(venues.c.status == ACTIVE)
    return int(await database.fetch_val(query) or 0)


async def get_venue_by_slug(slug: str) -> Optional[Dict[str, Any]]:
    query = sqlalchemy.select(venues).where(
        venues.c.slug == slug, venues.c.status == ACTIVE
    ).limit(1)
    row = await database.fetch_one(query)
    if not row:
        return None
    return {
        "id": row["id"],
        "slug": row["slug"],
        "name": row["name"],
        "city": row["city"],
        "county": row["county"],
        "postcode": row["postcode"],
        "website": row["website"],
    }


async def check_db_health() -> Dict[str, Any]:
    """Probe the store for the health endpoint. Never raises."""
    try:
        count = await get_venue_count()
        latest = await database.fetch_val(
            sqlalchemy.select(func.max(venues.c.last_google_sync))
        )
        return {
            "ok": True,
            "venueCount": count,
            "latestSync": str(latest) if latest else None,
        }
    except Exception as e:
        logger.warning(f"Database health check failed: {e}")
        return {"ok": False, "venueCount": 0, "latestSync": None}
