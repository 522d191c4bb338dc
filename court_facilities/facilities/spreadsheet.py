"""
Room inventory spreadsheet export and bulk-edit import (openpyxl).

The export workbook doubles as the import template: users edit the "Rooms"
sheet and upload it again. Rows are keyed by the Room ID column; read-only
columns are ignored on import.
"""

from __future__ import annotations

import io
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable

from openpyxl import Workbook, load_workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

from court_facilities.db.models import RoomRecord, RoomStatus, RoomType
from court_facilities.facilities.rooms import sort_rooms_by_number

logger = logging.getLogger(__name__)

ROOMS_SHEET = "Rooms"
INSTRUCTIONS_SHEET = "Instructions"
UUID_RE = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE)
MAX_STRING_LENGTH = 1000

EXPORT_COLUMNS: list[tuple[str, int, Callable[[RoomRecord], Any]]] = [
    ("Room ID", 38, lambda r: r.id),
    ("Name", 30, lambda r: r.name or ""),
    ("Room Number", 15, lambda r: r.room_number or ""),
    ("Building", 25, lambda r: r.building_name or ""),
    ("Floor", 20, lambda r: r.floor_name or ""),
    ("Floor Number", 12, lambda r: r.floor_number if r.floor_number is not None else ""),
    ("Status", 18, lambda r: r.status),
    ("Room Type", 18, lambda r: r.room_type),
    ("Description", 40, lambda r: r.description or ""),
    ("Capacity", 10, lambda r: r.capacity if r.capacity is not None else ""),
    ("Current Occupancy", 15, lambda r: r.current_occupancy or 0),
    ("Is Storage", 10, lambda r: "Yes" if r.is_storage else "No"),
    ("Storage Type", 15, lambda r: r.storage_type or ""),
    ("Storage Capacity", 15, lambda r: r.storage_capacity if r.storage_capacity is not None else ""),
    ("Storage Notes", 30, lambda r: r.storage_notes or ""),
    ("Phone Number", 15, lambda r: r.phone_number or ""),
    ("Created At", 25, lambda r: r.created_at.isoformat() if r.created_at else ""),
    ("Updated At", 25, lambda r: r.updated_at.isoformat() if r.updated_at else ""),
]

INSTRUCTIONS = [
    ("Room ID", "Unique identifier (DO NOT MODIFY)", "No"),
    ("Name", "Room name", "Yes"),
    ("Room Number", "Room number", "Yes"),
    ("Building / Floor / Floor Number", "Location (read-only)", "No"),
    ("Status", ", ".join(status.value for status in RoomStatus), "Yes"),
    ("Room Type", ", ".join(room_type.value for room_type in RoomType), "Yes"),
    ("Description", "Room description", "Yes"),
    ("Capacity / Current Occupancy", "Whole numbers", "Yes"),
    ("Is Storage", "Yes or No", "Yes"),
    ("Storage Type / Capacity / Notes", "Storage details", "Yes"),
    ("Phone Number", "Room phone", "Yes"),
    ("Created At / Updated At", "Timestamps (read-only)", "No"),
]


def export_rooms(rooms: Iterable[RoomRecord]) -> bytes:
    """Render rooms into an .xlsx workbook and return its bytes."""
    wb = Workbook()
    ws = wb.active
    ws.title = ROOMS_SHEET
    ws.append([title for title, _, _ in EXPORT_COLUMNS])
    for cell in ws[1]:
        cell.font = Font(bold=True)
    for room in sort_rooms_by_number(rooms):
        ws.append([getter(room) for _, _, getter in EXPORT_COLUMNS])
    for idx, (_, width, _) in enumerate(EXPORT_COLUMNS, start=1):
        ws.column_dimensions[get_column_letter(idx)].width = width
    ws.freeze_panes = "A2"

    help_ws = wb.create_sheet(INSTRUCTIONS_SHEET)
    help_ws.append(["Column", "Description", "Editable"])
    for cell in help_ws[1]:
        cell.font = Font(bold=True)
    for row in INSTRUCTIONS:
        help_ws.append(list(row))
    help_ws.column_dimensions["A"].width = 35
    help_ws.column_dimensions["B"].width = 80
    help_ws.column_dimensions["C"].width = 10

    buffer = io.BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


def read_room_rows(content: bytes) -> list[dict[str, Any]]:
    """Read the rooms sheet of an uploaded workbook into header-keyed dicts."""
    wb = load_workbook(io.BytesIO(content), data_only=True)
    sheet_name = next((name for name in wb.sheetnames if name != INSTRUCTIONS_SHEET), wb.sheetnames[0])
    ws = wb[sheet_name]
    rows = ws.iter_rows(values_only=True)
    header = next(rows, None)
    if not header:
        return []
    titles = [str(value).strip() if value is not None else "" for value in header]
    records = []
    for values in rows:
        if all(value is None for value in values):
            continue
        records.append({title: value for title, value in zip(titles, values) if title})
    return records


@dataclass(slots=True)
class RoomRowUpdate:
    room_id: str
    name: str
    fields: dict[str, Any] = field(default_factory=dict)
    changes: list[str] = field(default_factory=list)


def _text(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


def _yes(value: Any) -> bool:
    return _text(value).lower() in {"yes", "y", "true", "1"}


def _provided(row: dict[str, Any], column: str) -> bool:
    value = row.get(column)
    return value is not None and _text(value) != ""


def parse_room_row(row: dict[str, Any], errors: list[str]) -> RoomRowUpdate | None:
    """Translate one sheet row into column updates. Problems are appended to ``errors``."""
    room_id = _text(row["Room ID"]) if _provided(row, "Room ID") else ""
    if not room_id:
        errors.append("Skipping row: No Room ID found")
        return None
    if not UUID_RE.match(room_id):
        errors.append(f'Skipping row: Invalid Room ID format "{room_id}"')
        return None

    update = RoomRowUpdate(room_id=room_id, name=_text(row["Name"]) if _provided(row, "Name") else "Unknown")
    fields = update.fields

    for column, key in (
        ("Name", "name"),
        ("Room Number", "room_number"),
        ("Description", "description"),
        ("Storage Type", "storage_type"),
        ("Storage Notes", "storage_notes"),
        ("Phone Number", "phone_number"),
    ):
        if _provided(row, column):
            fields[key] = _text(row[column])
            update.changes.append(f"{key}: {fields[key]}")

    if _provided(row, "Status"):
        status = _text(row["Status"]).lower()
        if status in {s.value for s in RoomStatus}:
            fields["status"] = status
            update.changes.append(f"status: {status}")
        else:
            errors.append(f'Room {room_id}: Invalid status "{status}"')

    if _provided(row, "Room Type"):
        room_type = _text(row["Room Type"]).lower()
        if room_type in {t.value for t in RoomType}:
            fields["room_type"] = room_type
            update.changes.append(f"room_type: {room_type}")
        else:
            errors.append(f'Room {room_id}: Invalid room type "{room_type}"')

    for column, key, cast in (
        ("Capacity", "capacity", lambda v: int(float(v))),
        ("Current Occupancy", "current_occupancy", lambda v: int(float(v))),
        ("Storage Capacity", "storage_capacity", float),
    ):
        if _provided(row, column):
            try:
                fields[key] = cast(_text(row[column]))
            except ValueError:
                errors.append(f'Room {room_id}: Invalid number for "{column}"')
                continue
            update.changes.append(f"{key}: {fields[key]}")

    if _provided(row, "Is Storage"):
        fields["is_storage"] = _yes(row["Is Storage"])
        update.changes.append(f"is_storage: {fields['is_storage']}")

    for key, value in list(fields.items()):
        if isinstance(value, str) and len(value) > MAX_STRING_LENGTH:
            errors.append(f'Room {room_id}: Field "{key}" exceeds max length, truncated')
            fields[key] = value[:MAX_STRING_LENGTH]

    return update


def parse_room_rows(rows: Iterable[dict[str, Any]]) -> tuple[list[RoomRowUpdate], list[str]]:
    errors: list[str] = []
    updates = []
    for row in rows:
        update = parse_room_row(row, errors)
        if update is not None:
            updates.append(update)
    logger.info("Parsed %d room updates (%d messages)", len(updates), len(errors))
    return updates, errors
