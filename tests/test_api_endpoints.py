"""
API Endpoint Tests
==================
Public endpoints: venue count, health, and the venue page.
"""
import pytest

from app import venue_store


class TestVenueCountEndpoint:
    """GET /api/venues/count"""

    @pytest.mark.asyncio
    async def test_count_empty_store(self, client):
        response = await client.get("/api/venues/count")
        assert response.status_code == 200
        assert response.json() == {"count": 0}

    @pytest.mark.asyncio
    async def test_count_only_active_venues(self, client, sample_venues):
        response = await client.get("/api/venues/count")
        assert response.status_code == 200
        assert response.json() == {"count": 3}

    @pytest.mark.asyncio
    async def test_count_is_not_cached(self, client, sample_venues, db):
        first = await client.get("/api/venues/count")
        await db.execute(venue_store.venues.delete().where(venue_store.venues.c.id == 43))
        second = await client.get("/api/venues/count")
        assert first.json()["count"] == 3
        assert second.json()["count"] == 2

    @pytest.mark.asyncio
    @pytest.mark.parametrize("value", [0, 1, 987654])
    async def test_count_passes_store_value_through(self, client, monkeypatch, value):
        async def fake_count():
            return value

        monkeypatch.setattr(venue_store, "get_venue_count", fake_count)
        response = await client.get("/api/venues/count")
        assert response.status_code == 200
        assert response.json() == {"count": value}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("exc", [
        RuntimeError("connection refused on 10.0.0.5:5432"),
        ValueError("bad row"),
        KeyError("cnt"),
    ])
    async def test_count_store_failure_returns_generic_500(self, client, monkeypatch, exc):
        async def broken_count():
            raise exc

        monkeypatch.setattr(venue_store, "get_venue_count", broken_count)
        response = await client.get("/api/venues/count")
        assert response.status_code == 500
        assert response.json() == {"error": "Failed to get venue count"}

    @pytest.mark.asyncio
    async def test_count_failure_is_logged_server_side(self, client, monkeypatch, caplog):
        async def broken_count():
            raise RuntimeError("password authentication failed")

        monkeypatch.setattr(venue_store, "get_venue_count", broken_count)
        response = await client.get("/api/venues/count")
        assert "password" not in response.text
        assert any("Count API error" in r.getMessage() for r in caplog.records)
        assert any(r.exc_info for r in caplog.records)


class TestHealthEndpoint:
    """GET /api/health"""

    @pytest.mark.asyncio
    async def test_health_healthy(self, client, sample_venues):
        response = await client.get("/api/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert "timestamp" in data
        assert data["services"]["database"]["connected"] is True
        assert data["services"]["database"]["venueCount"] == 3
        assert data["services"]["database"]["latestSync"] is not None

    @pytest.mark.asyncio
    async def test_health_degraded_when_store_fails(self, client, monkeypatch):
        async def broken_count():
            raise RuntimeError("db down")

        monkeypatch.setattr(venue_store, "get_venue_count", broken_count)
        response = await client.get("/api/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "degraded"
        assert data["services"]["database"] == {
            "connected": False, "venueCount": 0, "latestSync": None,
        }

    @pytest.mark.asyncio
    async def test_health_reports_places_key_presence_only(self, client, override_settings):
        override_settings(google_places_configured=True)
        response = await client.get("/api/health")
        assert response.json()["services"]["googlePlaces"] == {"configured": True}


class TestVenuePage:
    """GET /venue/{slug}"""

    @pytest.mark.asyncio
    async def test_venue_page_renders(self, client, sample_venues, emitter):
        response = await client.get("/venue/ball-pit-park")
        assert response.status_code == 200
        assert "Ball Pit Park" in response.text
        assert '<link rel="canonical" href="https://softplayuk.co.uk/venue/ball-pit-park">' in response.text

    @pytest.mark.asyncio
    async def test_venue_page_fires_one_view(self, client, sample_venues, emitter):
        await client.get("/venue/ball-pit-park")
        assert emitter.venue_views == [(42, "ball-pit-park")]

    @pytest.mark.asyncio
    async def test_each_page_view_is_tracked(self, client, sample_venues, emitter):
        await client.get("/venue/ball-pit-park")
        await client.get("/venue/jungle-jims")
        await client.get("/venue/ball-pit-park")
        assert emitter.venue_views == [
            (42, "ball-pit-park"), (43, "jungle-jims"), (42, "ball-pit-park"),
        ]

    @pytest.mark.asyncio
    async def test_venue_name_is_escaped(self, client, sample_venues, emitter):
        response = await client.get("/venue/jungle-jims")
        assert "Jungle Jim&#x27;s" in response.text

    @pytest.mark.asyncio
    async def test_unknown_venue_404(self, client, sample_venues, emitter):
        response = await client.get("/venue/no-such-place")
        assert response.status_code == 404
        assert emitter.venue_views == []

    @pytest.mark.asyncio
    async def test_closed_venue_404(self, client, sample_venues, emitter):
        response = await client.get("/venue/closed-castle")
        assert response.status_code == 404
        assert emitter.venue_views == []

    @pytest.mark.asyncio
    async def test_store_failure_returns_generic_500(self, client, monkeypatch, emitter, caplog):
        async def broken_lookup(slug):
            raise RuntimeError("relation venues does not exist")

        monkeypatch.setattr(venue_store, "get_venue_by_slug", broken_lookup)
        response = await client.get("/venue/ball-pit-park")
        assert response.status_code == 500
        assert response.json() == {"error": "Failed to load venue"}
        assert emitter.venue_views == []
        assert any("Venue lookup failed" in r.getMessage() for r in caplog.records)
