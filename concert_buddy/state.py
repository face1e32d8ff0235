"""
Shared Mutable State
====================
Module-level singletons shared across request handlers and websocket feeds.
All modules importing from here get references to the same objects.
"""

from concert_buddy.booths.board import BoardRegistry
from concert_buddy.realtime import RealtimeHub
from concert_buddy.store import store

BOOTH_STATUS_EVENT = "booth-status"

realtime_hub = RealtimeHub()


def booth_channel(venue_id: str) -> str:
    return f"venue-{venue_id}-booths"


def _publish_statuses(venue_id: str):
    async def publish(statuses):
        await realtime_hub.publish(
            booth_channel(venue_id), BOOTH_STATUS_EVENT, [s.to_dict() for s in statuses]
        )
    return publish


# Boards for venues someone is watching; polling stops when the last watcher leaves
booth_boards = BoardRegistry(store, on_update_factory=_publish_statuses)
