"""
Live Feeds
==========
WebSocket endpoints: room location updates and booth line statuses.
Each connection owns one realtime subscription and cancels it on disconnect.
A room feed also ends once its own user leaves the room.
"""

import asyncio
import logging

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect

from concert_buddy.auth import require_ws_user
from concert_buddy.rooms import USER_LEFT, RoomSession
from concert_buddy.state import BOOTH_STATUS_EVENT, booth_boards, booth_channel, realtime_hub
from concert_buddy.store import store

logger = logging.getLogger(__name__)

router = APIRouter()

SNAPSHOT = "snapshot"
NORMAL_CLOSURE = 1000
POLICY_VIOLATION = 1008


async def _drain(websocket: WebSocket) -> None:
    """Keep the socket open until the client goes away; answer pings."""
    while True:
        text = await websocket.receive_text()
        if text == "ping":
            await websocket.send_text("pong")


async def _drain_until(websocket: WebSocket, done: asyncio.Event) -> bool:
    """
    Drain the socket until the client disconnects or `done` is set.
    Returns True when `done` ended it; a client disconnect propagates.
    """
    drain = asyncio.create_task(_drain(websocket))
    finished = asyncio.create_task(done.wait())
    try:
        await asyncio.wait({drain, finished}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        for task in (drain, finished):
            task.cancel()
        await asyncio.gather(drain, finished, return_exceptions=True)

    if not finished.cancelled():
        return True
    error = None if drain.cancelled() else drain.exception()
    if error is not None:
        raise error
    return False


@router.websocket("/ws/rooms/{room_id}")
async def room_feed(websocket: WebSocket, room_id: str, user=Depends(require_ws_user)):
    """Send the current room locations, then every location-update / user-left."""
    if user is None:
        await websocket.close(code=POLICY_VIOLATION)
        return
    room = await store.get("rooms", room_id.strip().upper())
    if room is None:
        await websocket.close(code=POLICY_VIOLATION)
        return

    await websocket.accept()
    session = RoomSession(store, realtime_hub, room, user)
    left = asyncio.Event()

    async def forward(message):
        await websocket.send_json(message)
        if message["type"] == USER_LEFT and message["data"].get("userId") == user["id"]:
            left.set()

    try:
        snapshot = await session.open(on_change=forward)
        await websocket.send_json({"type": SNAPSHOT, "data": snapshot})
        logger.info("Room feed opened: room=%s user=%s", room["id"], user["id"])
        if await _drain_until(websocket, left):
            await websocket.close(code=NORMAL_CLOSURE)
    except WebSocketDisconnect:
        pass
    finally:
        session.close()
        logger.info("Room feed closed: room=%s user=%s", room["id"], user["id"])


@router.websocket("/ws/venues/{venue_id}/booths")
async def booth_feed(websocket: WebSocket, venue_id: str):
    """Booth statuses for a venue, pushed after every refresh while connected."""
    venue = await store.get("venues", venue_id)
    if venue is None:
        await websocket.close(code=POLICY_VIOLATION)
        return

    await websocket.accept()
    acquired = False
    subscription = None
    try:
        board = await booth_boards.acquire(venue_id)
        acquired = True
        subscription = realtime_hub.subscribe(booth_channel(venue_id), websocket.send_json)
        await websocket.send_json({
            "type": BOOTH_STATUS_EVENT,
            "data": [s.to_dict() for s in board.statuses],
        })
        await _drain(websocket)
    except WebSocketDisconnect:
        pass
    finally:
        if subscription is not None:
            subscription.cancel()
        if acquired:
            await booth_boards.release(venue_id)
