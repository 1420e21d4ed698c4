"""
Venue View Tracker
==================
Renders nothing; fires one venue_view event per distinct (venue_id, slug).
"""

from typing import Optional, Tuple


class VenueViewTracker:
    def __init__(self, emitter):
        self._emitter = emitter
        self._deps: Optional[Tuple[int, str]] = None

    def render(self, venue_id: int, slug: str) -> str:
        deps = (venue_id, slug)
        if deps != self._deps:
            self._deps = deps
            self._emitter.track_venue_view(venue_id, slug)
        return ""

    def unmount(self):
        # Nothing in flight to cancel.
        self._deps = None
