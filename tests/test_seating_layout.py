"""Tests for seating/layout.py"""

import json

import pytest

from concert_buddy.seating.layout import (
    VenueLayout, VenueSection, hit_test, parse_layout, section_contains, section_corners,
    section_label_anchor,
)


def square(section_id, name, x1, y1, x2, y2):
    return VenueSection(
        id=section_id, name=name, color="#fff",
        path=f"M{x1} {y1} L{x2} {y1} L{x2} {y2} L{x1} {y2} Z",
    )


@pytest.fixture
def layout():
    return VenueLayout(sections=[
        square("a", "Floor", 0, 0, 100, 100),
        square("b", "Balcony", 200, 200, 300, 300),
        # overlaps Floor; listed later so Floor wins in the overlap
        square("c", "Overlap", 50, 50, 150, 150),
    ])


class TestParseLayout:
    def test_parses_sections_in_order(self):
        raw = json.dumps({"sections": [
            {"id": "1", "name": "Pit", "color": "#f00", "path": "M0 0 L10 0 L10 10 L0 10 Z"},
            {"id": "2", "name": "Tier", "color": "#0f0", "path": "M20 20 L30 20 L30 30 L20 30 Z"},
        ]})
        layout = parse_layout(raw)
        assert layout.section_names() == ["Pit", "Tier"]
        assert layout.sections[0].path.startswith("M0 0")

    def test_invalid_json_degrades_to_empty(self, caplog):
        layout = parse_layout("{not json")
        assert layout.sections == []
        assert "Failed to parse venue data" in caplog.text

    def test_none_degrades_to_empty(self):
        assert parse_layout(None).sections == []

    def test_wrong_shape_degrades_to_empty(self):
        assert parse_layout(json.dumps([1, 2, 3])).sections == []
        assert parse_layout(json.dumps({"sections": [{"id": "x"}]})).sections == []

    def test_missing_color_gets_default(self):
        raw = json.dumps({"sections": [{"id": "1", "name": "Pit", "path": "M0 0 L1 0 L1 1 L0 1 Z"}]})
        assert parse_layout(raw).sections[0].color == "#3b82f6"


class TestSectionCorners:
    def test_first_four_pairs(self):
        corners = section_corners("M0 0 L100 0 L100 100 L0 100 L999 999 Z")
        assert corners == [(0, 0), (100, 0), (100, 100), (0, 100)]

    def test_fewer_than_eight_numbers(self):
        assert section_corners("M0 0 L100 0 L100 100 Z") is None

    def test_requires_move_line_close(self):
        assert section_corners("M0 0 C100 0 100 100 0 100") is None


class TestHitTest:
    def test_point_inside_quad(self, layout):
        assert hit_test(layout, 50, 50).name == "Floor"

    def test_point_outside_all(self, layout):
        assert hit_test(layout, 400, 400) is None

    def test_point_outside_square(self):
        only = VenueLayout(sections=[square("a", "Floor", 0, 0, 100, 100)])
        assert hit_test(only, 150, 150) is None

    def test_bounds_are_inclusive(self, layout):
        assert hit_test(layout, 0, 0).name == "Floor"
        assert hit_test(layout, 300, 300).name == "Balcony"
        assert hit_test(layout, 200, 250.0).name == "Balcony"

    def test_first_match_in_list_order_wins(self, layout):
        assert hit_test(layout, 75, 75).name == "Floor"
        assert hit_test(layout, 125, 125).name == "Overlap"

    def test_short_path_never_matches(self):
        broken = VenueSection(id="x", name="Broken", color="#000", path="M0 0 L100 100 Z")
        assert section_contains(broken, 50, 50) is False

    def test_bounding_box_not_true_polygon(self):
        # A triangle-ish quad: (0,0) (100,0) (100,100) (100,100).
        # (10, 90) is outside the triangle but inside its bounding box.
        tri = VenueSection(id="t", name="Wedge", color="#000",
                           path="M0 0 L100 0 L100 100 L100 100 Z")
        assert section_contains(tri, 10, 90) is True

    def test_empty_layout(self):
        assert hit_test(VenueLayout(), 10, 10) is None


class TestLabelAnchor:
    def test_center_of_bounds(self):
        assert section_label_anchor(square("a", "A", 100, 200, 300, 400)) == (200.0, 300.0)

    def test_unparsable_path(self):
        bad = VenueSection(id="x", name="X", color="#000", path="nothing")
        assert section_label_anchor(bad) is None
