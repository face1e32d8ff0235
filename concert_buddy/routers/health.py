"""
Health Check Router
===================
Simple health check endpoint for load balancers.
"""

from datetime import datetime

from fastapi import APIRouter

from concert_buddy.state import realtime_hub, booth_boards

router = APIRouter()


@router.get("/health")
async def health():
    """Health check with live feed counters."""
    return {
        "status": "healthy",
        "timestamp": datetime.utcnow().isoformat(),
        "realtime_channels": len(realtime_hub.channels),
        "watched_venues": len(booth_boards.boards),
    }
