"""Tests for seating/markers.py"""

from concert_buddy.seating.markers import (
    PENDING_RING_RADIUS, caption, initials, location_text, render_markers,
)


def loc(user_id, name, x=10.0, y=20.0, section=None):
    return {
        "id": f"{user_id}-ROOM01",
        "room_id": "ROOM01",
        "user_id": user_id,
        "user_name": name,
        "x_position": x,
        "y_position": y,
        "section_name": section,
    }


class TestInitials:
    def test_two_words(self):
        assert initials("alice cooper") == "AC"

    def test_capped_at_two(self):
        assert initials("Mary Jane Watson") == "MJ"

    def test_single_word(self):
        assert initials("cher") == "C"

    def test_extra_spaces_ignored(self):
        assert initials("bob  dylan") == "BD"

    def test_email_as_name(self):
        assert initials("fan@example.com") == "F"


class TestCaptions:
    def test_local_user_is_you(self):
        assert caption(loc("u1", "Alice Cooper"), "u1") == "You"

    def test_friend_first_name(self):
        assert caption(loc("u2", "Bob Dylan"), "u1") == "Bob"


class TestLocationText:
    def test_section_name_preferred(self):
        assert location_text(loc("u1", "A", section="Floor GA")) == "Floor GA"

    def test_rounded_coordinates(self):
        assert location_text(loc("u1", "A", x=12.5, y=99.49)) == "(13, 99)"


class TestRenderMarkers:
    def test_one_marker_per_location(self):
        render = render_markers([loc("u1", "Alice Cooper"), loc("u2", "Bob Dylan", 300, 310)], "u1")
        assert [m.caption for m in render.markers] == ["You", "Bob"]
        assert [m.initials for m in render.markers] == ["AC", "BD"]
        assert render.markers[0].is_current_user is True
        assert render.markers[1].is_current_user is False
        assert (render.markers[1].x, render.markers[1].y) == (300, 310)
        assert render.pending is None

    def test_pending_ring_independent_of_markers(self):
        render = render_markers([loc("u2", "Bob Dylan")], "u1", my_location=(44.0, 55.0))
        assert render.pending is not None
        assert (render.pending.x, render.pending.y) == (44.0, 55.0)
        assert render.pending.radius == PENDING_RING_RADIUS
        assert all(not m.is_current_user for m in render.markers)

    def test_to_dict_is_json_ready(self):
        data = render_markers([loc("u1", "Alice Cooper")], "u1", my_location=(1, 2)).to_dict()
        assert data["markers"][0]["caption"] == "You"
        assert data["pending"] == {"x": 1, "y": 2, "radius": PENDING_RING_RADIUS}
