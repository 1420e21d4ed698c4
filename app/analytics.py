"""
GA4 Event Tracking
==================
Sends events to the GA4 Measurement Protocol when GA_MEASUREMENT_ID and
GA_API_SECRET are configured. With GA_DEBUG=true every event is also logged.

Never raises to the caller: sends are fire-and-forget and transport errors
are logged, not propagated.
"""

import asyncio
import logging
import uuid
from typing import Any, Dict, Optional, Set

import httpx

from app.config import Settings

logger = logging.getLogger(__name__)

MEASUREMENT_PROTOCOL_URL = "https://www.google-analytics.com/mp/collect"
SEND_TIMEOUT_SECONDS = 5.0


class AnalyticsClient:
    def __init__(
        self,
        measurement_id: Optional[str] = None,
        api_secret: Optional[str] = None,
        debug: bool = False,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.measurement_id = measurement_id
        self.api_secret = api_secret
        self.debug = debug
        self._transport = transport
        self._pending: Set[asyncio.Task] = set()

    @classmethod
    def from_settings(cls, settings: Settings) -> "AnalyticsClient":
        return cls(settings.ga_measurement_id, settings.ga_api_secret, settings.ga_debug)

    @property
    def enabled(self) -> bool:
        return bool(self.measurement_id and self.api_secret)

    def track(self, event_name: str, params: Optional[Dict[str, Any]] = None, client_id: Optional[str] = None):
        clean = {k: v for k, v in (params or {}).items() if v is not None}

        if self.debug:
            logger.debug(f"[GA4 Debug] {event_name} {clean}")

        if not self.enabled:
            return

        payload = {
            "client_id": client_id or uuid.uuid4().hex,
            "events": [{"name": event_name, "params": clean}],
        }
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug(f"No running event loop, dropping {event_name}")
            return
        task = loop.create_task(self.send(payload))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def send(self, payload: Dict[str, Any]) -> bool:
        params = {"measurement_id": self.measurement_id, "api_secret": self.api_secret}
        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=SEND_TIMEOUT_SECONDS) as client:
                response = await client.post(MEASUREMENT_PROTOCOL_URL, params=params, json=payload)
                response.raise_for_status()
            return True
        except httpx.HTTPError as e:
            logger.warning(f"GA4 send failed: {e}")
            return False

    async def drain(self):
        """Wait for in-flight sends. Used at shutdown."""
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)

    # -- event helpers -------------------------------------------------------

    def track_postcode_search(self, postcode: str, lat: Optional[float] = None, lng: Optional[float] = None):
        """User submits a postcode search."""
        self.track("postcode_search", {"postcode": postcode, "lat": lat, "lng": lng})

    def track_filter_change(self, filter_name: str, filter_value: str):
        self.track("filter_change", {"filter_name": filter_name, "filter_value": filter_value})

    def track_venue_view(self, venue_id: int, slug: str):
        """Venue detail page loaded."""
        self.track("venue_view", {"venue_id": venue_id, "venue_slug": slug})

    def track_outbound_click(self, venue_id: int, domain: str):
        self.track("outbound_click", {"venue_id": venue_id, "domain": domain})

    def track_directions_click(self, venue_id: int):
        self.track("directions_click", {"venue_id": venue_id})

    def track_call_click(self, venue_id: int):
        self.track("call_click", {"venue_id": venue_id})
