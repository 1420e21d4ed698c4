"""
Database Setup
==============
SQLAlchemy table definitions, async database connection, and engine.
Tables are module-level objects importable by stores and routers.
"""

from datetime import datetime

import databases
import sqlalchemy

from app.config import settings


def psycopg_url(url: str) -> str:
    """Force the psycopg3 dialect for Postgres URLs; leave others alone."""
    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql+psycopg://", 1)
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+psycopg://", 1)
    return url


DATABASE_URL = psycopg_url(settings.database_url)

database = databases.Database(DATABASE_URL)

metadata = sqlalchemy.MetaData()

# Venues table - directory listings shown on the public site
venues = sqlalchemy.Table(
    "venues",
    metadata,
    sqlalchemy.Column("id", sqlalchemy.Integer, primary_key=True),
    sqlalchemy.Column("slug", sqlalchemy.String(160), unique=True, index=True),
    sqlalchemy.Column("name", sqlalchemy.String(200)),
    sqlalchemy.Column("city", sqlalchemy.String(100), nullable=True),
    sqlalchemy.Column("county", sqlalchemy.String(100), nullable=True),
    sqlalchemy.Column("postcode", sqlalchemy.String(16), nullable=True),
    sqlalchemy.Column("website", sqlalchemy.String(500), nullable=True),
    sqlalchemy.Column("status", sqlalchemy.String(20), index=True, default="active"),
    sqlalchemy.Column("last_google_sync", sqlalchemy.DateTime, nullable=True),
    sqlalchemy.Column("created_at", sqlalchemy.DateTime, default=datetime.utcnow),
    sqlalchemy.Column("updated_at", sqlalchemy.DateTime, default=datetime.utcnow),
)

# Backfill runs table - one row per admin backfill job
backfill_runs = sqlalchemy.Table(
    "backfill_runs",
    metadata,
    sqlalchemy.Column("id", sqlalchemy.Integer, primary_key=True),
    sqlalchemy.Column("provider", sqlalchemy.String(50), default="google_places"),
    sqlalchemy.Column("mode", sqlalchemy.String(20), nullable=True),
    sqlalchemy.Column("region_label", sqlalchemy.String(100), nullable=True),
    sqlalchemy.Column("status", sqlalchemy.String(20), index=True, default="pending"),
    sqlalchemy.Column("total_cells", sqlalchemy.Integer, default=0),
    sqlalchemy.Column("processed_cells", sqlalchemy.Integer, default=0),
    sqlalchemy.Column("venues_discovered", sqlalchemy.Integer, default=0),
    sqlalchemy.Column("venues_inserted", sqlalchemy.Integer, default=0),
    sqlalchemy.Column("venues_updated", sqlalchemy.Integer, default=0),
    sqlalchemy.Column("venues_skipped", sqlalchemy.Integer, default=0),
    sqlalchemy.Column("failed_venues", sqlalchemy.Integer, default=0),
    sqlalchemy.Column("enriched_venues", sqlalchemy.Integer, default=0),
    sqlalchemy.Column("error_log", sqlalchemy.Text, nullable=True),
    sqlalchemy.Column("duration_ms", sqlalchemy.Integer, nullable=True),
    sqlalchemy.Column("started_at", sqlalchemy.DateTime, nullable=True),
    sqlalchemy.Column("updated_at", sqlalchemy.DateTime, nullable=True),
    sqlalchemy.Column("created_at", sqlalchemy.DateTime, default=datetime.utcnow, index=True),
)

# Per-venue log lines written by a backfill run
backfill_venues = sqlalchemy.Table(
    "backfill_venues",
    metadata,
    sqlalchemy.Column("id", sqlalchemy.Integer, primary_key=True),
    sqlalchemy.Column("run_id", sqlalchemy.Integer, index=True),
    sqlalchemy.Column("venue_id", sqlalchemy.Integer, nullable=True),
    sqlalchemy.Column("google_place_id", sqlalchemy.String(200)),
    sqlalchemy.Column("status", sqlalchemy.String(20), index=True, default="discovered"),
    sqlalchemy.Column("confidence_score", sqlalchemy.Float, nullable=True),
    sqlalchemy.Column("enrichment_status", sqlalchemy.String(20), nullable=True),
    sqlalchemy.Column("error_message", sqlalchemy.Text, nullable=True),
    sqlalchemy.Column("created_at", sqlalchemy.DateTime, default=datetime.utcnow),
)

engine = sqlalchemy.create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False} if "sqlite" in DATABASE_URL else {}
)
metadata.create_all(engine)
