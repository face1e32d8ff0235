"""
Location Markers
================
Render data for user markers on the seating chart and the friends list.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple

from concert_buddy.helpers import round_half_up

MARKER_RADIUS = 12
PENDING_RING_RADIUS = 20


def initials(name: str) -> str:
    """First letter of each space-separated word, uppercased, max 2 chars."""
    return "".join(word[0] for word in name.split(" ") if word).upper()[:2]


def first_name(name: str) -> str:
    return name.split(" ")[0]


def caption(location: Dict[str, Any], current_user_id: Optional[str]) -> str:
    if location["user_id"] == current_user_id:
        return "You"
    return first_name(location["user_name"])


def location_text(location: Dict[str, Any]) -> str:
    """Section name if known, otherwise the rounded chart coordinates."""
    if location.get("section_name"):
        return location["section_name"]
    return f"({round_half_up(location['x_position'])}, {round_half_up(location['y_position'])})"


@dataclass(frozen=True)
class Marker:
    user_id: str
    x: float
    y: float
    initials: str
    caption: str
    is_current_user: bool
    location_text: str
    radius: int = MARKER_RADIUS


@dataclass(frozen=True)
class PendingRing:
    x: float
    y: float
    radius: int = PENDING_RING_RADIUS


@dataclass
class ChartRender:
    markers: List[Marker] = field(default_factory=list)
    pending: Optional[PendingRing] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "markers": [asdict(m) for m in self.markers],
            "pending": asdict(self.pending) if self.pending else None,
        }


def render_markers(
    locations: Iterable[Dict[str, Any]],
    current_user_id: Optional[str],
    my_location: Optional[Tuple[float, float]] = None,
) -> ChartRender:
    """
    One marker per known location plus the local user's pending ring.

    The ring follows `my_location` (the last selection) and is drawn even when
    the committed marker list does not have the local user yet.
    """
    markers = [
        Marker(
            user_id=loc["user_id"],
            x=loc["x_position"],
            y=loc["y_position"],
            initials=initials(loc["user_name"]),
            caption=caption(loc, current_user_id),
            is_current_user=loc["user_id"] == current_user_id,
            location_text=location_text(loc),
        )
        for loc in locations
    ]
    pending = PendingRing(x=my_location[0], y=my_location[1]) if my_location else None
    return ChartRender(markers=markers, pending=pending)
