"""
Pytest configuration and fixtures for Soft Play UK tests.
"""
import dataclasses
import os
from datetime import datetime, timedelta

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

# Set test environment before importing the app
os.environ["DATABASE_URL"] = "sqlite:///./test_softplay.db"
os.environ["ADMIN_SECRET"] = "test-admin-secret"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ.pop("NEXT_PUBLIC_SITE_URL", None)
os.environ.pop("GA_MEASUREMENT_ID", None)
os.environ.pop("GA_API_SECRET", None)

from main import app, database, venues, backfill_runs, backfill_venues  # noqa: E402

ADMIN_SECRET = "test-admin-secret"


class RecordingEmitter:
    """Stands in for AnalyticsClient; records venue_view calls."""

    def __init__(self):
        self.venue_views = []

    def track_venue_view(self, venue_id, slug):
        self.venue_views.append((venue_id, slug))


def pytest_sessionfinish(session, exitstatus):
    if os.path.exists("test_softplay.db"):
        os.remove("test_softplay.db")


@pytest_asyncio.fixture
async def db():
    """Connected database with empty tables."""
    if not database.is_connected:
        await database.connect()
    for table in (backfill_venues, backfill_runs, venues):
        await database.execute(table.delete())
    yield database
    await database.disconnect()


@pytest_asyncio.fixture
async def client(db):
    """Async HTTP client for API testing."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def emitter():
    """Swap the app's analytics client for a recorder."""
    original = app.state.analytics
    recorder = RecordingEmitter()
    app.state.analytics = recorder
    yield recorder
    app.state.analytics = original


@pytest.fixture
def override_settings():
    """Replace fields on the app settings for one test."""
    original = app.state.settings

    def _override(**changes):
        app.state.settings = dataclasses.replace(original, **changes)
        return app.state.settings

    yield _override
    app.state.settings = original


@pytest.fixture
def admin_headers():
    return {"Authorization": f"Bearer {ADMIN_SECRET}"}


@pytest_asyncio.fixture
async def sample_venues(db):
    """Three active venues and one closed one."""
    now = datetime.utcnow()
    rows = [
        {"id": 42, "slug": "ball-pit-park", "name": "Ball Pit Park", "city": "Leeds",
         "postcode": "LS1 4AP", "status": "active", "last_google_sync": now - timedelta(days=2)},
        {"id": 43, "slug": "jungle-jims", "name": "Jungle Jim's", "city": "York",
         "postcode": "YO1 7HH", "status": "active", "last_google_sync": now - timedelta(days=1)},
        {"id": 44, "slug": "tumble-town", "name": "Tumble Town", "city": "Hull",
         "postcode": "HU1 1AA", "status": "active", "last_google_sync": None},
        {"id": 45, "slug": "closed-castle", "name": "Closed Castle", "city": "Leeds",
         "postcode": "LS2 9JT", "status": "closed", "last_google_sync": None},
    ]
    for row in rows:
        await database.execute(venues.insert().values(**row))
    return rows


@pytest_asyncio.fixture
async def sample_runs(db, sample_venues):
    """Two backfill runs; the newer one has a venue log."""
    now = datetime.utcnow()
    await database.execute(backfill_runs.insert().values(
        id=1, provider="google_places", mode="region", region_label="Yorkshire",
        status="completed", total_cells=10, processed_cells=10, venues_discovered=12,
        venues_inserted=8, venues_updated=3, venues_skipped=1, failed_venues=0,
        enriched_venues=8, duration_ms=45000, created_at=now - timedelta(hours=5),
        started_at=now - timedelta(hours=5), updated_at=now - timedelta(hours=4),
    ))
    await database.execute(backfill_runs.insert().values(
        id=2, provider="google_places", mode=None, region_label=None, status="running",
        total_cells=40, processed_cells=7, created_at=now - timedelta(minutes=10),
    ))
    await database.execute(backfill_venues.insert().values(
        run_id=2, venue_id=42, google_place_id="ChIJ-ball-pit", status="inserted",
        confidence_score=0.92, enrichment_status="enriched", created_at=now - timedelta(minutes=9),
    ))
    await database.execute(backfill_venues.insert().values(
        run_id=2, venue_id=None, google_place_id="ChIJ-unknown", status="failed",
        confidence_score=None, enrichment_status=None, error_message="Details lookup failed",
        created_at=now - timedelta(minutes=8),
    ))
    return {"run_ids": [1, 2]}
