"""Tests for the room inventory helpers."""

import pytest

from court_facilities.db.models import RoomStatus
from court_facilities.facilities.rooms import (
    available_status_transitions,
    filter_rooms_by_search,
    group_rooms_by_building,
    group_rooms_by_floor,
    is_room_at_capacity,
    is_room_available,
    is_room_in_maintenance,
    is_valid_capacity,
    is_valid_room_number,
    room_display_name,
    room_full_identifier,
    room_occupancy_percentage,
    room_status_label,
    room_type_label,
    sort_rooms_by_number,
)


class TestLabels:
    def test_display_name_prefers_name(self, make_room):
        assert room_display_name(make_room(name="Part 37")) == "Part 37"
        assert room_display_name(make_room(name=None, room_number="1180")) == "1180"

    def test_full_identifier(self, make_room):
        """Building, floor and room are joined with dashes."""
        room = make_room(room_number="1180")
        assert room_full_identifier(room) == "100 Centre Street - Floor 10 - 1180"

    def test_full_identifier_without_joins(self, make_room):
        room = make_room(building_name=None, floor_name=None, floor_number=None, room_number="B12")
        assert room_full_identifier(room) == "Unknown Building - Floor ? - B12"

    def test_status_and_type_labels(self):
        assert room_status_label("under_construction") == "Under Construction"
        assert room_type_label("jury_room") == "Jury Room"
        assert room_type_label("chamber") == "Chambers"

    def test_unknown_values_pass_through(self):
        """Values outside the enums are shown as stored."""
        assert room_status_label("flooded") == "flooded"
        assert room_type_label("atrium") == "atrium"

    def test_status_predicates(self, make_room):
        assert is_room_available(make_room(status="available"))
        assert not is_room_available(make_room(status="occupied"))
        assert is_room_in_maintenance(make_room(status="maintenance"))


class TestCapacity:
    def test_at_capacity(self, make_room):
        room = make_room(capacity=40)
        assert is_room_at_capacity(room, 40)
        assert not is_room_at_capacity(room, 39)

    def test_without_capacity(self, make_room):
        """Rooms without a capacity are never full."""
        room = make_room(capacity=None)
        assert not is_room_at_capacity(room, 500)
        assert room_occupancy_percentage(room, 500) == 0

    def test_occupancy_percentage_rounds(self, make_room):
        assert room_occupancy_percentage(make_room(capacity=3), 2) == 67


class TestSearchAndOrdering:
    @pytest.fixture
    def rooms(self, make_room):
        return [
            make_room(id="r1", room_number="1020", name="Part 37", floor_id="f10", building_id="b100"),
            make_room(id="r2", room_number="950", floor_id="f9", building_id="b100"),
            make_room(id="r3", room_number="B-12", building_name="111 Centre Street", floor_id=None, building_id=None),
        ]

    def test_search_matches_number_name_and_building(self, rooms):
        assert [room.id for room in filter_rooms_by_search(rooms, "part")] == ["r1"]
        assert [room.id for room in filter_rooms_by_search(rooms, "95")] == ["r2"]
        assert [room.id for room in filter_rooms_by_search(rooms, "111 centre")] == ["r3"]

    def test_blank_search_returns_everything(self, rooms):
        assert len(filter_rooms_by_search(rooms, "   ")) == 3

    def test_sort_by_numeric_part(self, rooms):
        """950 precedes 1020 and B-12 sorts by its digits."""
        assert [room.room_number for room in sort_rooms_by_number(rooms)] == ["B-12", "950", "1020"]

    def test_grouping(self, rooms):
        by_floor = group_rooms_by_floor(rooms)
        assert set(by_floor) == {"f10", "f9", "unknown"}
        by_building = group_rooms_by_building(rooms)
        assert [room.id for room in by_building["b100"]] == ["r1", "r2"]
        assert [room.id for room in by_building["unknown"]] == ["r3"]


class TestTransitionsAndValidators:
    def test_transitions_from_available(self):
        assert available_status_transitions("available") == [
            RoomStatus.OCCUPIED,
            RoomStatus.RESERVED,
            RoomStatus.MAINTENANCE,
            RoomStatus.CLOSED,
        ]

    def test_construction_only_after_closing(self):
        """Only a closed room can go under construction."""
        assert RoomStatus.UNDER_CONSTRUCTION in available_status_transitions("closed")
        assert RoomStatus.UNDER_CONSTRUCTION not in available_status_transitions("available")

    def test_unknown_status_has_no_transitions(self):
        assert available_status_transitions("flooded") == []

    def test_room_number_and_capacity(self):
        assert is_valid_room_number("1060A")
        assert not is_valid_room_number("12/B")
        assert is_valid_capacity(1000)
        assert not is_valid_capacity(0)
        assert not is_valid_capacity(1001)
