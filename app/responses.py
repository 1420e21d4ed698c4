"""
Standardized Error Responses
============================
Error bodies are always {"error": <message>}; callers never see internal detail.
"""

from fastapi.responses import JSONResponse


def error_response(message, status_code=500):
    """Wrap error in the standard error body."""
    return JSONResponse(content={"error": message}, status_code=status_code)
