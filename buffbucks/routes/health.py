# buffbucks/routes/health.py
"""
Health check endpoints.
"""

from fastapi import APIRouter

router = APIRouter()


@router.get("/healthz")
async def healthz():
    """Basic health check - always returns 200 if app is running."""
    return {"status": "ok", "service": "buffbucks"}
