"""
Top‑level router for version 1 of the API.

This router aggregates the domain routers under a unified prefix.
When new endpoints are added, update this file to include their
routers.
"""

from fastapi import APIRouter

from .endpoints import meetings, votes

router = APIRouter()

router.include_router(meetings.router, prefix="/meetings", tags=["meetings"])
# The votes router spells out "/meetings/{meeting_id}/votes" itself.
router.include_router(votes.router, tags=["votes"])


@router.get("/health", tags=["info"])
async def health() -> dict:
    return {"status": "ok"}
