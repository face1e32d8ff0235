"""
Merch Booth Endpoints
=====================
Seed booths, read aggregated line status, and submit line reports.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request

from concert_buddy import limiter
from concert_buddy.auth import require_user
from concert_buddy.booths import BoothStatusBoard
from concert_buddy.booths.aggregator import LINE_LENGTH_COLORS, LINE_LENGTH_HINTS, WAIT_TIME_CHOICES
from concert_buddy.config import REPORT_RATE_LIMIT
from concert_buddy.responses import error_response, success_response
from concert_buddy.routers.venues import get_venue_or_404
from concert_buddy.schemas import BoothCreate, LineReportIn
from concert_buddy.state import booth_boards
from concert_buddy.store import StoreError, store

logger = logging.getLogger(__name__)

router = APIRouter()


def board_for(venue_id: str) -> BoothStatusBoard:
    """The watched board for a venue if there is one, else a one-off board."""
    return booth_boards.get(venue_id) or BoothStatusBoard(store, venue_id)


@router.post("/venues/{venue_id}/booths")
async def create_booth(venue_id: str, booth: BoothCreate):
    await get_venue_or_404(venue_id)
    if await store.get("merch_booths", booth.id):
        raise HTTPException(status_code=400, detail="Booth with this ID already exists")
    await store.create("merch_booths", {"venue_id": venue_id, **booth.model_dump()})
    return success_response({"booth_id": booth.id, "venue_id": venue_id})


@router.get("/venues/{venue_id}/booths")
async def get_booth_statuses(venue_id: str):
    """Fresh aggregation for every booth at the venue, shortest line first."""
    await get_venue_or_404(venue_id)
    statuses = await board_for(venue_id).refresh()
    return success_response({
        "venue_id": venue_id,
        "booths": [s.to_dict() for s in statuses],
    })


@router.get("/booths/report-options")
async def get_report_options():
    """Choices offered by the report form."""
    return success_response({
        "line_lengths": [
            {"value": level, "label": LINE_LENGTH_HINTS[level], "color": LINE_LENGTH_COLORS[level]}
            for level in sorted(LINE_LENGTH_HINTS)
        ],
        "wait_times": WAIT_TIME_CHOICES,
    })


@router.post("/booths/{booth_id}/reports", status_code=201)
@limiter.limit(REPORT_RATE_LIMIT)
async def submit_line_report(
    request: Request,
    booth_id: str,
    report: LineReportIn,
    user: dict = Depends(require_user),
):
    """Append a line report and return the refreshed statuses for the venue."""
    booth = await store.get("merch_booths", booth_id)
    if not booth:
        raise HTTPException(status_code=404, detail="Booth not found")

    board = board_for(booth["venue_id"])
    try:
        created = await board.submit_report(
            booth_id=booth_id,
            user_id=user["id"],
            line_length=report.line_length,
            wait_time_minutes=report.wait_time_minutes,
        )
    except StoreError as e:
        logger.error("Error submitting report for booth %s: %s", booth_id, e)
        return error_response("Failed to submit report", status_code=503)

    return success_response({
        "report_id": created["id"],
        "booths": [s.to_dict() for s in board.statuses],
    }, status_code=201)
