"""
Venue Endpoints
===============
Seed and list venues, and serve the parsed seating chart sections.
"""

from fastapi import APIRouter, HTTPException

from concert_buddy.responses import success_response
from concert_buddy.schemas import VenueCreate
from concert_buddy.seating import parse_layout, section_label_anchor
from concert_buddy.seating.viewport import CHART_SIZE, MAX_ZOOM, MIN_ZOOM
from concert_buddy.store import store

router = APIRouter()


def venue_summary(row):
    return {
        "id": row["id"],
        "name": row["name"],
        "description": row["description"] or "",
        "created_at": row["created_at"].isoformat() if row.get("created_at") else None,
    }


async def get_venue_or_404(venue_id: str):
    venue = await store.get("venues", venue_id)
    if not venue:
        raise HTTPException(status_code=404, detail="Venue not found")
    return venue


@router.post("/venues")
async def create_venue(venue: VenueCreate):
    """Register a venue with its seating chart layout."""
    if await store.get("venues", venue.id):
        raise HTTPException(status_code=400, detail="Venue with this ID already exists")
    await store.create("venues", {
        "id": venue.id,
        "name": venue.name,
        "description": venue.description,
        "seating_chart_data": venue.seating_chart_data,
    })

    layout = parse_layout(venue.seating_chart_data)
    return success_response({"venue_id": venue.id, "sections": len(layout.sections)})


@router.get("/venues")
async def list_venues():
    """All venues, alphabetical."""
    rows = await store.list("venues", order_by=[("name", "asc")])
    return success_response([venue_summary(r) for r in rows])


@router.get("/venues/{venue_id}")
async def get_venue(venue_id: str):
    venue = await get_venue_or_404(venue_id)
    return success_response({**venue_summary(venue), "seating_chart_data": venue["seating_chart_data"]})


@router.get("/venues/{venue_id}/chart")
async def get_venue_chart(venue_id: str):
    """Parsed sections for drawing the chart. A broken layout yields no sections."""
    venue = await get_venue_or_404(venue_id)
    layout = parse_layout(venue["seating_chart_data"])

    sections = []
    for section in layout.sections:
        anchor = section_label_anchor(section)
        sections.append({
            "id": section.id,
            "name": section.name,
            "color": section.color,
            "path": section.path,
            "label_x": anchor[0] if anchor else None,
            "label_y": anchor[1] if anchor else None,
        })

    return success_response({
        "venue_id": venue_id,
        "name": venue["name"],
        "canvas": {"width": CHART_SIZE, "height": CHART_SIZE},
        "zoom": {"min": MIN_ZOOM, "max": MAX_ZOOM},
        "sections": sections,
    })
