"""
Health Check Router
===================
Health check endpoint for the hosting platform / load balancers.
"""

from datetime import datetime, UTC

from fastapi import APIRouter, Depends

from app import venue_store
from app.config import Settings, get_settings

router = APIRouter()


@router.get("/api/health")
async def health(settings: Settings = Depends(get_settings)):
    """Database reachability plus which integrations are configured."""
    db = await venue_store.check_db_health()
    return {
        "status": "healthy" if db["ok"] else "degraded",
        "timestamp": datetime.now(UTC).isoformat(),
        "services": {
            "database": {
                "connected": db["ok"],
                "venueCount": db["venueCount"],
                "latestSync": db["latestSync"],
            },
            "googlePlaces": {
                # Never expose the actual key
                "configured": settings.google_places_configured,
            },
        },
    }
