"""
Room Endpoints
==============
Create/join/leave rooms, read room locations, and mark your own location
either in chart coordinates or from a raw pointer click.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request

from concert_buddy import limiter
from concert_buddy.auth import require_user
from concert_buddy.config import LOCATION_RATE_LIMIT
from concert_buddy.helpers import generate_room_code, utcnow
from concert_buddy.realtime import RealtimeError
from concert_buddy.responses import error_response, success_response
from concert_buddy.rooms import RoomSession
from concert_buddy.routers.venues import get_venue_or_404
from concert_buddy.schemas import ChartClick, LocationIn, RoomCreate, RoomJoin
from concert_buddy.seating import ChartInteraction, ViewportState, hit_test, parse_layout, render_markers
from concert_buddy.seating.markers import location_text
from concert_buddy.state import realtime_hub
from concert_buddy.store import StoreError, store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/rooms")


def room_summary(room):
    return {
        "id": room["id"],
        "name": room["name"],
        "venue_id": room["venue_id"],
        "created_by": room["created_by"],
    }


async def get_room_or_404(room_id: str):
    room = await store.get("rooms", room_id.strip().upper())
    if not room:
        raise HTTPException(status_code=404, detail="Room not found")
    return room


async def load_layout(venue_id: str):
    venue = await store.get("venues", venue_id)
    return parse_layout(venue["seating_chart_data"] if venue else None)


async def save_location(session: RoomSession, x: float, y: float, section_name=None, seat_info=None):
    """Upsert + broadcast; returns an error envelope instead of raising."""
    try:
        location = await session.update_location(x, y, section_name=section_name, seat_info=seat_info)
    except (StoreError, RealtimeError) as e:
        logger.error("Failed to update location for %s in %s: %s", session.user["id"], session.room_id, e)
        return error_response("Failed to update your location", status_code=503)

    return success_response({
        "selected": True,
        "location": location,
        "message": f"You're now marked at {section_name or 'your selected seat'}",
    })


@router.post("", status_code=201)
async def create_room(body: RoomCreate, user: dict = Depends(require_user)):
    """Open a room at a venue. The returned id is the code to share."""
    name = body.name.strip()
    if not name:
        raise HTTPException(status_code=400, detail="Room name is required")
    await get_venue_or_404(body.venue_id)

    room = {
        "id": generate_room_code(),
        "name": name,
        "venue_id": body.venue_id,
        "created_by": user["id"],
        "is_active": True,
        "created_at": utcnow(),
    }
    try:
        await store.create("rooms", room)
    except StoreError as e:
        logger.error("Failed to create room: %s", e)
        return error_response("Failed to create room", status_code=503)

    logger.info("Room %s created by %s at %s", room["id"], user["id"], body.venue_id)
    return success_response({
        **room_summary(room),
        "message": f'Share code "{room["id"]}" with your friends',
    }, status_code=201)


@router.post("/join")
async def join_room(body: RoomJoin, user: dict = Depends(require_user)):
    """Look up an active room by its share code."""
    code = body.code.strip().upper()
    try:
        matches = await store.list("rooms", where={"id": code, "is_active": True})
    except StoreError as e:
        logger.error("Failed to join room %s: %s", code, e)
        return error_response("Failed to join room", status_code=503)

    if not matches:
        return error_response("Room not found", status_code=404)

    room = matches[0]
    return success_response({
        **room_summary(room),
        "message": f'Welcome to "{room["name"]}"',
    })


@router.post("/{room_id}/leave")
async def leave_room(room_id: str, user: dict = Depends(require_user)):
    """Tell the room you left and remove your stored location."""
    room = await get_room_or_404(room_id)
    session = RoomSession(store, realtime_hub, room, user)
    try:
        await session.leave()
    except (StoreError, RealtimeError) as e:
        logger.error("Failed to leave room %s: %s", room["id"], e)
        return error_response("Failed to leave room", status_code=503)
    return success_response({"message": "You've left the room successfully"})


@router.get("/{room_id}/locations")
async def get_room_locations(room_id: str, user: dict = Depends(require_user)):
    """Stored locations for the room plus marker render data for the caller."""
    room = await get_room_or_404(room_id)
    session = RoomSession(store, realtime_hub, room, user)
    locations = await session.load()

    render = render_markers(locations, user["id"], session.my_location)
    friends = [
        {"user_id": loc["user_id"], "user_name": loc["user_name"], "location_text": location_text(loc)}
        for loc in locations if loc["user_id"] != user["id"]
    ]
    return success_response({
        "room_id": room["id"],
        "online": len(locations),
        "locations": locations,
        "chart": render.to_dict(),
        "friends": friends,
    })


@router.put("/{room_id}/locations")
@limiter.limit(LOCATION_RATE_LIMIT)
async def set_location(request: Request, room_id: str, body: LocationIn, user: dict = Depends(require_user)):
    """Mark yourself at chart coordinates; the section is resolved server-side."""
    room = await get_room_or_404(room_id)
    layout = await load_layout(room["venue_id"])
    section = hit_test(layout, body.x, body.y)

    session = RoomSession(store, realtime_hub, room, user)
    return await save_location(
        session, body.x, body.y,
        section_name=section.name if section else None,
        seat_info=body.seat_info,
    )


@router.post("/{room_id}/locations/click")
@limiter.limit(LOCATION_RATE_LIMIT)
async def click_location(request: Request, room_id: str, click: ChartClick, user: dict = Depends(require_user)):
    """
    Resolve a raw pointer click with the viewer's pan/zoom into a location.
    A click that lands while the viewer is still dragging selects nothing.
    """
    room = await get_room_or_404(room_id)
    layout = await load_layout(room["venue_id"])

    viewport = ViewportState(
        zoom=click.zoom, pan_x=click.pan_x, pan_y=click.pan_y, is_dragging=click.is_dragging,
    )
    selection = ChartInteraction(layout, viewport=viewport).click(
        click.px, click.py, click.rect_left, click.rect_top
    )
    if selection is None:
        return success_response({"selected": False})

    session = RoomSession(store, realtime_hub, room, user)
    return await save_location(session, selection.x, selection.y, section_name=selection.section_name)
