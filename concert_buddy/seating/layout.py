"""
Venue Layout
============
Parse the stored seating chart JSON and hit-test clicks against sections.

Sections are matched by the bounding box of the first four corner points in
their path data. This is an approximation that assumes rectangular or convex
quad layouts; true polygon containment is not used.
"""

import json
import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from shapely.geometry import MultiPoint, Point

logger = logging.getLogger(__name__)

_INTEGER = re.compile(r"\d+")
_PATH_COMMANDS = ("M", "L", "Z")


@dataclass(frozen=True)
class VenueSection:
    id: str
    name: str
    color: str
    path: str


@dataclass(frozen=True)
class VenueLayout:
    sections: List[VenueSection] = field(default_factory=list)

    def section_names(self) -> List[str]:
        return [s.name for s in self.sections]


def parse_layout(raw: Optional[str]) -> VenueLayout:
    """Decode `{"sections": [{id, name, color, path}]}`.

    Anything unparsable degrades to an empty layout: the chart then shows no
    sections but clicks still record raw coordinates.
    """
    try:
        data = json.loads(raw)
        sections = [
            VenueSection(
                id=str(s["id"]),
                name=str(s["name"]),
                color=str(s.get("color", "#3b82f6")),
                path=str(s["path"]),
            )
            for s in data["sections"]
        ]
    except (TypeError, ValueError, KeyError, AttributeError) as e:
        logger.warning("Failed to parse venue data: %s", e)
        return VenueLayout()
    return VenueLayout(sections=sections)


def section_corners(path: str) -> Optional[List[Tuple[int, int]]]:
    """First four (x, y) pairs of a move/line/close path, or None."""
    if not all(cmd in path for cmd in _PATH_COMMANDS):
        return None
    numbers = [int(n) for n in _INTEGER.findall(path)]
    if len(numbers) < 8:
        return None
    return [(numbers[i], numbers[i + 1]) for i in range(0, 8, 2)]


def _bounds(section: VenueSection):
    corners = section_corners(section.path)
    if corners is None:
        return None
    return MultiPoint(corners).envelope


def section_contains(section: VenueSection, x: float, y: float) -> bool:
    """Inclusive bounding-box test against the section's corners."""
    box = _bounds(section)
    if box is None:
        return False
    return box.covers(Point(x, y))


def hit_test(layout: VenueLayout, x: float, y: float) -> Optional[VenueSection]:
    """First section in list order containing the point, or None."""
    for section in layout.sections:
        if section_contains(section, x, y):
            return section
    return None


def section_label_anchor(section: VenueSection) -> Optional[Tuple[float, float]]:
    """Centre of the section's bounding box, for placing its label."""
    box = _bounds(section)
    if box is None:
        return None
    minx, miny, maxx, maxy = box.bounds
    return ((minx + maxx) / 2, (miny + maxy) / 2)
