"""
Demo Data
=========
Venues with seating chart layouts and their merch booths, inserted on startup
when SEED_DEMO_DATA=true. Existing rows are left alone.
"""

import json
import logging

from concert_buddy.store import Store

logger = logging.getLogger(__name__)


def _section(section_id, name, color, x1, y1, x2, y2):
    return {
        "id": section_id,
        "name": name,
        "color": color,
        "path": f"M{x1} {y1} L{x2} {y1} L{x2} {y2} L{x1} {y2} Z",
    }


DEMO_VENUES = [
    {
        "id": "riverside-arena",
        "name": "Riverside Arena",
        "description": "Indoor arena with floor standing area and two tiers",
        "seating_chart_data": json.dumps({"sections": [
            _section("floor", "Floor GA", "#8b5cf6", 150, 90, 350, 250),
            _section("lower-left", "Lower Bowl Left", "#3b82f6", 40, 90, 140, 400),
            _section("lower-right", "Lower Bowl Right", "#3b82f6", 360, 90, 460, 400),
            _section("lower-back", "Lower Bowl Back", "#10b981", 150, 260, 350, 400),
            _section("upper", "Upper Tier", "#f59e0b", 40, 410, 460, 480),
        ]}),
    },
    {
        "id": "grand-theater",
        "name": "The Grand Theater",
        "description": "Seated theater with orchestra, mezzanine and balcony",
        "seating_chart_data": json.dumps({"sections": [
            _section("orchestra", "Orchestra", "#ef4444", 100, 100, 400, 250),
            _section("mezzanine", "Mezzanine", "#3b82f6", 80, 270, 420, 360),
            _section("balcony", "Balcony", "#10b981", 60, 380, 440, 470),
        ]}),
    },
]

DEMO_BOOTHS = [
    {"id": "ra-main", "venue_id": "riverside-arena", "name": "Main Concourse Merch",
     "location_x": 250, "location_y": 420, "description": "Tour shirts, posters and vinyl"},
    {"id": "ra-north", "venue_id": "riverside-arena", "name": "North Gate Stand",
     "location_x": 60, "location_y": 60, "description": "Hoodies and hats"},
    {"id": "gt-lobby", "venue_id": "grand-theater", "name": "Lobby Merch Table",
     "location_x": 250, "location_y": 490, "description": "Programs and souvenirs"},
]


async def seed_demo_data(store: Store) -> int:
    """Insert any missing demo venues/booths. Returns the number of rows added."""
    added = 0
    for collection, records in (("venues", DEMO_VENUES), ("merch_booths", DEMO_BOOTHS)):
        for record in records:
            if await store.get(collection, record["id"]) is None:
                await store.create(collection, record)
                added += 1
    if added:
        logger.info("Seeded %d demo records", added)
    return added
