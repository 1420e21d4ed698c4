"""
Venue API Endpoints
===================
Public JSON endpoints over the venue directory.
"""

import logging

from fastapi import APIRouter

from app import venue_store
from app.responses import error_response
from app.schemas import ErrorBody, VenueCount

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/api/venues/count", response_model=VenueCount, responses={500: {"model": ErrorBody}})
async def venue_count():
    """Current number of active venues. Recomputed on every call."""
    try:
        count = await venue_store.get_venue_count()
    except Exception:
        logger.exception("Count API error")
        return error_response("Failed to get venue count", status_code=500)
    return VenueCount(count=count)
