"""
HTML Page Endpoints
===================
Public venue page. Kept minimal: it exists to host the view tracker and the
canonical link.
"""

import html
import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import HTMLResponse

from app import venue_store
from app.config import Settings, get_settings
from app.responses import error_response
from app.tracking import VenueViewTracker

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/venue/{slug}", response_class=HTMLResponse)
async def venue_page(slug: str, request: Request, settings: Settings = Depends(get_settings)):
    """Venue detail page. Each page view mounts one tracker."""
    try:
        venue = await venue_store.get_venue_by_slug(slug)
    except Exception:
        logger.exception(f"Venue lookup failed for {slug!r}")
        return error_response("Failed to load venue", status_code=500)
    if not venue:
        raise HTTPException(status_code=404, detail="Venue not found")

    tracker = VenueViewTracker(request.app.state.analytics)
    name = html.escape(venue["name"] or "")
    location = ", ".join(html.escape(part) for part in (venue["city"], venue["postcode"]) if part)
    canonical = html.escape(f"{settings.site_url}/venue/{venue['slug']}")
    tracker_html = tracker.render(venue["id"], venue["slug"])

    return f"""
    <!DOCTYPE html>
    <html>
    <head>
        <title>{name} - Soft Play UK</title>
        <meta charset="utf-8">
        <meta name="viewport" content="width=device-width, initial-scale=1.0">
        <link rel="canonical" href="{canonical}">
    </head>
    <body>
        <main>
            <h1>{name}</h1>
            <p class="location">{location}</p>
        </main>
        {tracker_html}
    </body>
    </html>
    """
