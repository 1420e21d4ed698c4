"""
Backfill Run Queries
====================
Read side of the admin backfill tool: run history, progress for one run,
and the per-venue log a run produced.
"""

from typing import Any, Dict, List, Optional

import sqlalchemy
from sqlalchemy import func

from app.database import database, backfill_runs, backfill_venues, venues

RUN_LIST_LIMIT = 50
VENUE_LOG_LIMIT = 200


class RunNotFound(LookupError):
    """Raised when a backfill run id has no row."""

    def __init__(self, run_id: int):
        super().__init__(f"Run {run_id} not found")
        self.run_id = run_id


def _iso(value) -> Optional[str]:
    if not value:
        return None
    return value.isoformat() if hasattr(value, "isoformat") else str(value)


def _run_progress(r) -> Dict[str, Any]:
    return {
        "runId": int(r["id"]),
        "status": r["status"],
        "mode": r["mode"] or "full_uk",
        "region": r["region_label"],
        "totalCells": r["total_cells"] or 0,
        "processedCells": r["processed_cells"] or 0,
        "discovered": r["venues_discovered"] or 0,
        "inserted": r["venues_inserted"] or 0,
        "updated": r["venues_updated"] or 0,
        "skipped": r["venues_skipped"] or 0,
        "failed": r["failed_venues"] or 0,
        "enriched": r["enriched_venues"] or 0,
        "startedAt": _iso(r["started_at"]) or _iso(r["created_at"]) or "",
        "updatedAt": _iso(r["updated_at"]) or "",
        "error": r["error_log"],
        "durationMs": r["duration_ms"] or None,
    }


async def list_runs(limit: int = RUN_LIST_LIMIT) -> List[Dict[str, Any]]:
    query = sqlalchemy.select(backfill_runs).order_by(
        backfill_runs.c.created_at.desc(), backfill_runs.c.id.desc()
    ).limit(limit)
    rows = await database.fetch_all(query)
    return [_run_progress(r) for r in rows]


async def get_run_progress(run_id: int) -> Dict[str, Any]:
    row = await database.fetch_one(
        sqlalchemy.select(backfill_runs).where(backfill_runs.c.id == run_id)
    )
    if not row:
        raise RunNotFound(run_id)
    return _run_progress(row)


async def get_run_venues(run_id: int) -> Dict[str, Any]:
    total = await database.fetch_val(
        sqlalchemy.select(func.count()).select_from(backfill_venues)
        .where(backfill_venues.c.run_id == run_id)
    ) or 0

    query = sqlalchemy.select(
        backfill_venues,
        venues.c.name.label("venue_name"),
        venues.c.city.label("venue_city"),
    ).select_from(
        backfill_venues.outerjoin(venues, backfill_venues.c.venue_id == venues.c.id)
    ).where(
        backfill_venues.c.run_id == run_id
    ).order_by(
        backfill_venues.c.created_at.desc(), backfill_venues.c.id.desc()
    ).limit(VENUE_LOG_LIMIT)
    rows = await database.fetch_all(query)

    return {
        "total": int(total),
        "venues": [{
            "googlePlaceId": r["google_place_id"],
            "venueId": r["venue_id"],
            "venueName": r["venue_name"],
            "venueCity": r["venue_city"],
            "status": r["status"],
            "confidence": r["confidence_score"] or 0,
            "enrichment": r["enrichment_status"] or "basic",
            "error": r["error_message"],
            "createdAt": _iso(r["created_at"]) or "",
        } for r in rows],
    }
