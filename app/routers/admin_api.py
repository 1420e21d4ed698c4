"""
Admin Backfill API
==================
Read-only run history for the backfill dashboard. Every route requires admin
credentials.
"""

import logging

from fastapi import APIRouter, Depends

from app import backfill_store
from app.auth import require_admin
from app.backfill_store import RunNotFound
from app.responses import error_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin/backfill", dependencies=[Depends(require_admin)])


@router.get("/runs")
async def list_backfill_runs():
    try:
        runs = await backfill_store.list_runs()
    except Exception:
        logger.exception("Failed to list backfill runs")
        return error_response("Failed to list runs", status_code=500)
    return {"runs": runs}


@router.get("/runs/{run_id}")
async def get_backfill_run(run_id: str):
    """Progress counters plus the per-venue log for one run."""
    try:
        rid = int(run_id)
    except ValueError:
        return error_response("Invalid run ID", status_code=400)

    try:
        progress = await backfill_store.get_run_progress(rid)
        venue_log = await backfill_store.get_run_venues(rid)
    except RunNotFound as e:
        return error_response(str(e), status_code=404)
    except Exception:
        logger.exception(f"Failed to load backfill run {rid}")
        return error_response("Failed to load run", status_code=500)

    return {"progress": progress, "venueLog": venue_log}
