"""
Pydantic Models
===============
Response schemas for API endpoints.
"""

from pydantic import BaseModel


class VenueCount(BaseModel):
    """Active venue count."""
    count: int


class ErrorBody(BaseModel):
    """Generic error body; never carries internal detail."""
    error: str
