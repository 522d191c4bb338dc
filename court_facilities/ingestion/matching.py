"""
Match room numbers read from term sheets to rooms in the inventory.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, Mapping, Optional

from court_facilities.schemas import TermImportData

logger = logging.getLogger(__name__)

NON_DIGIT_RE = re.compile(r"\D")


def _digits(value: str) -> str:
    return NON_DIGIT_RE.sub("", value)


def find_room_id(room_number: str, rooms: list[Mapping[str, str]]) -> Optional[str]:
    """Exact room number first, then digits only, then a shared digit prefix."""
    for room in rooms:
        if room["room_number"] == room_number:
            return room["id"]

    wanted = _digits(room_number)
    if not wanted:
        return None
    for room in rooms:
        if _digits(room["room_number"]) == wanted:
            return room["id"]
    for room in rooms:
        candidate = _digits(room["room_number"])
        if candidate and (candidate.startswith(wanted) or wanted.startswith(candidate)):
            logger.info("Fuzzy matched room %s to %s", room_number, room["room_number"])
            return room["id"]
    return None


def match_room_ids(import_data: TermImportData, rooms: Iterable[Mapping[str, str]]) -> int:
    """Fill ``room_id`` on assignments in place and return how many were matched.

    Assignments that already carry a room id are left alone; room numbers with
    no match add a warning to the bundle.
    """
    rooms = [room for room in rooms if room.get("room_number")]
    matched = 0
    for assignment in import_data.assignments:
        if not assignment.room_number or assignment.room_id:
            continue
        room_id = find_room_id(assignment.room_number.strip(), rooms)
        if room_id:
            assignment.room_id = room_id
            matched += 1
        else:
            logger.warning("No room match found for %s", assignment.room_number)
            import_data.warnings.append(
                f"Room {assignment.room_number} for part {assignment.part_code} was not found in the inventory"
            )
    return matched
