"""
Soft Play UK - Backend
======================
Venue directory API, public venue pages, and the gated admin backfill panel.

Run locally:
    uvicorn main:app --reload
"""

import os

from app import app, limiter  # noqa: F401
from app.config import settings  # noqa: F401
from app.database import database, metadata, engine, venues, backfill_runs, backfill_venues  # noqa: F401


# =============================================================================
# RUN
# =============================================================================

if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", 8000))
    uvicorn.run(app, host="0.0.0.0", port=port)
