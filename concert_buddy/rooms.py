"""
Room Sessions
=============
Live location sharing inside a room: upsert + broadcast on every confirmed
click, last-write-wins merge of incoming updates, and clean teardown on leave.
"""

import inspect
import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

from concert_buddy.helpers import utcnow
from concert_buddy.realtime import RealtimeHub, Subscription

logger = logging.getLogger(__name__)

LOCATION_UPDATE = "location-update"
USER_LEFT = "user-left"


def location_id(user_id: str, room_id: str) -> str:
    """One location row per (user, room)."""
    return f"{user_id}-{room_id}"


def channel_name(room_id: str) -> str:
    return f"room-{room_id}"


def display_name(user: Dict[str, Any]) -> str:
    return user.get("display_name") or user["email"]


def serialize_location(location: Dict[str, Any]) -> Dict[str, Any]:
    """JSON-safe copy of a user_locations record."""
    data = dict(location)
    if data.get("updated_at") is not None and not isinstance(data["updated_at"], str):
        data["updated_at"] = data["updated_at"].isoformat()
    return data


class LiveLocations:
    """
    Known locations in a room, keyed by user.

    Updates are applied in receipt order and the latest one for a user wins,
    with no sequencing: a late delivery can overwrite a newer position.
    """

    def __init__(self, rows: Optional[List[Dict[str, Any]]] = None):
        self._items: List[Dict[str, Any]] = []
        if rows:
            self.load(rows)

    def load(self, rows: List[Dict[str, Any]]) -> None:
        self._items = [serialize_location(r) for r in rows]

    def upsert(self, location: Dict[str, Any]) -> None:
        """Drop any entry for the same user and append the new one."""
        others = [loc for loc in self._items if loc["user_id"] != location["user_id"]]
        self._items = others + [serialize_location(location)]

    def remove(self, user_id: str) -> None:
        self._items = [loc for loc in self._items if loc["user_id"] != user_id]

    def apply(self, message: Dict[str, Any]) -> bool:
        """Apply a realtime message. Returns False for unknown event types."""
        event_type = message.get("type")
        data = message.get("data") or {}
        if event_type == LOCATION_UPDATE:
            self.upsert(data)
        elif event_type == USER_LEFT:
            self.remove(data["userId"])
        else:
            return False
        return True

    def find(self, user_id: str) -> Optional[Dict[str, Any]]:
        for loc in self._items:
            if loc["user_id"] == user_id:
                return loc
        return None

    def snapshot(self) -> List[Dict[str, Any]]:
        return list(self._items)

    def __len__(self):
        return len(self._items)


class RoomSession:
    """
    One user's presence in one room.

    `open` loads the room's stored locations and subscribes to its channel;
    `close` cancels that subscription. `update_location` and `leave` write to
    the store first and broadcast second; a failure in either aborts the
    action without rolling back local state already applied.
    """

    def __init__(self, store, hub: RealtimeHub, room: Dict[str, Any], user: Dict[str, Any]):
        self.store = store
        self.hub = hub
        self.room = room
        self.user = user
        self.locations = LiveLocations()
        self.my_location: Optional[Tuple[float, float]] = None
        self._subscription: Optional[Subscription] = None

    @property
    def room_id(self) -> str:
        return self.room["id"]

    @property
    def channel(self) -> str:
        return channel_name(self.room_id)

    async def load(self) -> List[Dict[str, Any]]:
        rows = await self.store.list(
            "user_locations",
            where={"room_id": self.room_id},
            order_by=[("updated_at", "desc")],
        )
        self.locations.load(rows)
        mine = self.locations.find(self.user["id"])
        if mine:
            self.my_location = (mine["x_position"], mine["y_position"])
        return self.locations.snapshot()

    async def open(self, on_change: Optional[Callable[[Dict[str, Any]], Any]] = None) -> List[Dict[str, Any]]:
        """Load current locations, then follow the room channel."""
        snapshot = await self.load()

        async def handle(message: Dict[str, Any]) -> None:
            if not self.locations.apply(message):
                return
            if on_change is not None:
                result = on_change(message)
                if inspect.isawaitable(result):
                    await result

        self._subscription = self.hub.subscribe(self.channel, handle)
        return snapshot

    def close(self) -> None:
        subscription, self._subscription = self._subscription, None
        if subscription is not None:
            subscription.cancel()

    async def update_location(
        self,
        x: float,
        y: float,
        section_name: Optional[str] = None,
        seat_info: Optional[str] = None,
    ) -> Dict[str, Any]:
        location = {
            "id": location_id(self.user["id"], self.room_id),
            "room_id": self.room_id,
            "user_id": self.user["id"],
            "user_name": display_name(self.user),
            "user_avatar": None,
            "x_position": x,
            "y_position": y,
            "section_name": section_name,
            "seat_info": seat_info,
            "updated_at": utcnow(),
        }
        await self.store.upsert("user_locations", location)
        self.my_location = (x, y)

        payload = serialize_location(location)
        await self.hub.publish(self.channel, LOCATION_UPDATE, payload)
        logger.info(
            "Location updated: user=%s room=%s section=%s",
            self.user["id"], self.room_id, section_name or "-",
        )
        return payload

    async def leave(self) -> None:
        """Tell the room, drop the stored location, stop following the channel."""
        await self.hub.publish(self.channel, USER_LEFT, {"userId": self.user["id"]})
        await self.store.delete("user_locations", location_id(self.user["id"], self.room_id))
        self.close()
        self.locations.remove(self.user["id"])
        self.my_location = None
        logger.info("User %s left room %s", self.user["id"], self.room_id)
