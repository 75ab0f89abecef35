"""
API router combining the edge function routes.
"""
from fastapi import APIRouter
from . import (
    oauth,
    place_info,
)

router = APIRouter()

router.include_router(oauth.router)
router.include_router(place_info.router)


# Health check endpoint
@router.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": "1.0.0"}
