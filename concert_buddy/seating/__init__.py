"""
Seating Chart Interaction
=========================
Layout parsing, section hit-testing, viewport transforms and marker rendering.
"""

from concert_buddy.seating.layout import (
    VenueSection, VenueLayout, parse_layout, hit_test, section_label_anchor,
)
from concert_buddy.seating.viewport import ChartInteraction, Selection, ViewportState
from concert_buddy.seating.markers import render_markers, initials, location_text

__all__ = [
    "VenueSection", "VenueLayout", "parse_layout", "hit_test", "section_label_anchor",
    "ChartInteraction", "Selection", "ViewportState",
    "render_markers", "initials", "location_text",
]
