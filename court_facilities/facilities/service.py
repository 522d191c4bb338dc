"""
Room inventory service: CRUD, status changes, courtroom photos and spreadsheets.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Optional

from psycopg_pool import ConnectionPool

from court_facilities.config import Settings
from court_facilities.db import queries
from court_facilities.db.models import BuildingRecord, FloorRecord, RoomRecord, RoomStatus
from court_facilities.errors import InvalidStatusTransition, NotFoundError
from court_facilities.facilities import spreadsheet
from court_facilities.facilities.rooms import available_status_transitions
from court_facilities.schemas import RoomCreate, RoomFilters, RoomUpdate

logger = logging.getLogger(__name__)

PHOTO_VIEWS = ("judge_view", "audience_view")
SAFE_NAME_RE = re.compile(r"[^A-Za-z0-9._-]+")


class FacilitiesService:
    def __init__(self, db_pool: ConnectionPool, settings: Settings) -> None:
        self.db_pool = db_pool
        self.settings = settings

    # --- Reads -----------------------------------------------------------

    def list_rooms(self, filters: Optional[RoomFilters] = None) -> list[RoomRecord]:
        filters = filters or RoomFilters()
        with self.db_pool.connection() as conn:
            return queries.list_rooms(
                conn,
                building_id=filters.building_id,
                floor_id=filters.floor_id,
                room_type=filters.room_type.value if filters.room_type else None,
                status=filters.status.value if filters.status else None,
                search=filters.search,
            )

    def get_room(self, room_id: str) -> RoomRecord:
        with self.db_pool.connection() as conn:
            room = queries.get_room(conn, room_id)
        if room is None:
            raise NotFoundError(f"Room {room_id} not found")
        return room

    def list_buildings(self) -> list[BuildingRecord]:
        with self.db_pool.connection() as conn:
            return queries.list_buildings(conn)

    def list_floors(self, building_id: Optional[str] = None) -> list[FloorRecord]:
        with self.db_pool.connection() as conn:
            return queries.list_floors(conn, building_id)

    # --- Writes ----------------------------------------------------------

    def create_room(self, payload: RoomCreate) -> str:
        fields = payload.model_dump(mode="json", exclude_none=True)
        with self.db_pool.connection() as conn:
            room_id = queries.insert_room(conn, fields)
        logger.info("Created room %s (%s)", payload.room_number, room_id)
        return room_id

    def update_room(self, room_id: str, payload: RoomUpdate) -> RoomRecord:
        fields = payload.model_dump(mode="json", exclude_unset=True)
        if fields:
            with self.db_pool.connection() as conn:
                if not queries.update_room(conn, room_id, fields):
                    raise NotFoundError(f"Room {room_id} not found")
        return self.get_room(room_id)

    def delete_room(self, room_id: str) -> None:
        with self.db_pool.connection() as conn:
            if not queries.soft_delete_room(conn, room_id):
                raise NotFoundError(f"Room {room_id} not found")
        logger.info("Soft deleted room %s", room_id)

    def change_room_status(self, room_id: str, status: RoomStatus) -> RoomRecord:
        room = self.get_room(room_id)
        if status.value != room.status and status not in available_status_transitions(room.status):
            raise InvalidStatusTransition(f"Cannot change room status from {room.status} to {status.value}")
        with self.db_pool.connection() as conn:
            queries.update_room(conn, room_id, {"status": status.value})
        logger.info("Room %s status %s -> %s", room_id, room.status, status.value)
        return self.get_room(room_id)

    def save_courtroom_photo(self, room_id: str, view: str, filename: str, content: bytes) -> dict:
        """Store a courtroom photo on disk and record its path on the room."""
        if view not in PHOTO_VIEWS:
            raise ValueError(f"Unknown photo view: {view}")
        room = self.get_room(room_id)

        folder = Path(self.settings.upload_dir) / "courtroom-photos" / room_id
        folder.mkdir(parents=True, exist_ok=True)
        safe_name = SAFE_NAME_RE.sub("_", Path(filename).name) or "photo"
        target = folder / f"{view}-{safe_name}"
        target.write_bytes(content)

        photos = dict(room.courtroom_photos or {})
        photos[view] = str(target)
        with self.db_pool.connection() as conn:
            queries.update_room(conn, room_id, {"courtroom_photos": photos})
        logger.info("Saved %s photo for room %s at %s", view, room_id, target)
        return photos

    # --- Spreadsheets ----------------------------------------------------

    def export_rooms_workbook(self) -> bytes:
        rooms = self.list_rooms()
        logger.info("Exporting %d rooms", len(rooms))
        return spreadsheet.export_rooms(rooms)

    def import_rooms_workbook(self, content: bytes, dry_run: bool = False) -> dict:
        """Apply edits from an exported workbook. Dry runs report without writing."""
        rows = spreadsheet.read_room_rows(content)
        updates, error_messages = spreadsheet.parse_room_rows(rows)

        results = []
        successful = 0
        with self.db_pool.connection() as conn:
            for update in updates:
                if not update.fields:
                    results.append({"room_id": update.room_id, "name": update.name, "status": "unchanged", "changes": []})
                    continue
                if dry_run:
                    successful += 1
                    results.append(
                        {"room_id": update.room_id, "name": update.name, "status": "preview", "changes": update.changes}
                    )
                    continue
                try:
                    with conn.transaction():
                        found = queries.update_room(conn, update.room_id, update.fields)
                except Exception as exc:
                    logger.error("Failed to update room %s: %s", update.room_id, exc)
                    error_messages.append(f"Room {update.room_id}: {exc}")
                    results.append({"room_id": update.room_id, "name": update.name, "status": "error", "changes": []})
                    continue
                if not found:
                    error_messages.append(f"Room {update.room_id}: Room not found")
                    results.append({"room_id": update.room_id, "name": update.name, "status": "error", "changes": []})
                    continue
                successful += 1
                results.append(
                    {"room_id": update.room_id, "name": update.name, "status": "updated", "changes": update.changes}
                )

        summary = {
            "dry_run": dry_run,
            "total_rows": len(rows),
            "processed": len(updates),
            "successful": successful,
            "errors": len(error_messages),
            "results": results,
            "error_messages": error_messages,
        }
        logger.info(
            "Room import (dry_run=%s): %d rows, %d successful, %d errors",
            dry_run,
            len(rows),
            successful,
            len(error_messages),
        )
        return summary
