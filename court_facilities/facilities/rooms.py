"""
Room inventory helpers: labels, filtering, grouping and status transitions.
"""

from __future__ import annotations

import re
from collections import defaultdict
from typing import Iterable

from court_facilities.db.models import RoomRecord, RoomStatus, RoomType

ROOM_STATUS_LABELS = {
    RoomStatus.AVAILABLE: "Available",
    RoomStatus.OCCUPIED: "Occupied",
    RoomStatus.MAINTENANCE: "Maintenance",
    RoomStatus.RESERVED: "Reserved",
    RoomStatus.CLOSED: "Closed",
    RoomStatus.UNDER_CONSTRUCTION: "Under Construction",
}

ROOM_TYPE_LABELS = {
    RoomType.OFFICE: "Office",
    RoomType.COURTROOM: "Courtroom",
    RoomType.CONFERENCE: "Conference Room",
    RoomType.STORAGE: "Storage",
    RoomType.RESTROOM: "Restroom",
    RoomType.COMMON: "Common Area",
    RoomType.MECHANICAL: "Mechanical",
    RoomType.CHAMBER: "Chambers",
    RoomType.JURY_ROOM: "Jury Room",
}

STATUS_TRANSITIONS = {
    RoomStatus.AVAILABLE: [RoomStatus.OCCUPIED, RoomStatus.RESERVED, RoomStatus.MAINTENANCE, RoomStatus.CLOSED],
    RoomStatus.OCCUPIED: [RoomStatus.AVAILABLE, RoomStatus.MAINTENANCE, RoomStatus.CLOSED],
    RoomStatus.MAINTENANCE: [RoomStatus.AVAILABLE, RoomStatus.CLOSED],
    RoomStatus.RESERVED: [RoomStatus.AVAILABLE, RoomStatus.OCCUPIED, RoomStatus.CLOSED],
    RoomStatus.CLOSED: [RoomStatus.AVAILABLE, RoomStatus.MAINTENANCE, RoomStatus.UNDER_CONSTRUCTION],
    RoomStatus.UNDER_CONSTRUCTION: [RoomStatus.AVAILABLE, RoomStatus.CLOSED],
}

ROOM_NUMBER_RE = re.compile(r"^[A-Za-z0-9\s\-]+$")
NON_DIGIT_RE = re.compile(r"\D")
MAX_CAPACITY = 1000


def room_display_name(room: RoomRecord) -> str:
    return room.name or room.room_number


def room_full_identifier(room: RoomRecord) -> str:
    """Building, floor and room joined for display, e.g. ``Main - Floor 2 - 201``."""
    building = room.building_name or "Unknown Building"
    floor = room.floor_name or f"Floor {room.floor_number if room.floor_number is not None else '?'}"
    return f"{building} - {floor} - {room_display_name(room)}"


def is_room_available(room: RoomRecord) -> bool:
    return room.status == RoomStatus.AVAILABLE.value


def is_room_in_maintenance(room: RoomRecord) -> bool:
    return room.status == RoomStatus.MAINTENANCE.value


def room_status_label(status: str) -> str:
    try:
        return ROOM_STATUS_LABELS[RoomStatus(status)]
    except ValueError:
        return status


def room_type_label(room_type: str) -> str:
    try:
        return ROOM_TYPE_LABELS[RoomType(room_type)]
    except ValueError:
        return room_type


def is_room_at_capacity(room: RoomRecord, current_occupants: int) -> bool:
    if not room.capacity:
        return False
    return current_occupants >= room.capacity


def room_occupancy_percentage(room: RoomRecord, current_occupants: int) -> int:
    if not room.capacity:
        return 0
    return round(current_occupants / room.capacity * 100)


def filter_rooms_by_search(rooms: Iterable[RoomRecord], query: str) -> list[RoomRecord]:
    """Case-insensitive match on room number, room name or building name."""
    rooms = list(rooms)
    needle = query.strip().lower()
    if not needle:
        return rooms
    return [
        room
        for room in rooms
        if needle in room.room_number.lower()
        or (room.name and needle in room.name.lower())
        or (room.building_name and needle in room.building_name.lower())
    ]


def _room_number_key(room: RoomRecord) -> int:
    digits = NON_DIGIT_RE.sub("", room.room_number)
    return int(digits) if digits else 0


def sort_rooms_by_number(rooms: Iterable[RoomRecord]) -> list[RoomRecord]:
    """Sort by the numeric part of the room number so ``950`` precedes ``1020``."""
    return sorted(rooms, key=_room_number_key)


def group_rooms_by_floor(rooms: Iterable[RoomRecord]) -> dict[str, list[RoomRecord]]:
    grouped: dict[str, list[RoomRecord]] = defaultdict(list)
    for room in rooms:
        grouped[room.floor_id or "unknown"].append(room)
    return dict(grouped)


def group_rooms_by_building(rooms: Iterable[RoomRecord]) -> dict[str, list[RoomRecord]]:
    grouped: dict[str, list[RoomRecord]] = defaultdict(list)
    for room in rooms:
        grouped[room.building_id or "unknown"].append(room)
    return dict(grouped)


def available_status_transitions(current: str) -> list[RoomStatus]:
    try:
        return list(STATUS_TRANSITIONS[RoomStatus(current)])
    except ValueError:
        return []


def is_valid_room_number(room_number: str) -> bool:
    return bool(ROOM_NUMBER_RE.match(room_number))


def is_valid_capacity(capacity: int) -> bool:
    return 0 < capacity <= MAX_CAPACITY
