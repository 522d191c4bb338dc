"""
Database query helpers for terms, assignments, personnel and rooms.
"""

from __future__ import annotations

from datetime import date
from typing import Iterable, Mapping, Optional

from psycopg import Connection, sql
from psycopg.types.json import Jsonb

from court_facilities.db.models import (
    BuildingRecord,
    CourtTermRecord,
    FloorRecord,
    RoomRecord,
    TermPersonnelRecord,
)

TERM_COLUMNS = (
    "id, term_number, term_name, description, start_date, end_date, location, "
    "metadata, created_at, updated_at"
)
TERM_UPDATABLE = {"term_number", "term_name", "description", "start_date", "end_date", "location", "metadata"}

ASSIGNMENT_UPDATABLE = {
    "part_id",
    "room_id",
    "justice_name",
    "phone",
    "fax",
    "tel_extension",
    "sergeant_name",
    "clerk_names",
}

PERSONNEL_COLUMNS = "id, term_id, role, name, phone, extension, room, floor"

ROOM_SELECT = """
    SELECT r.id, r.floor_id, r.room_number, r.name, r.room_type, r.status, r.description,
           r.capacity, r.current_occupancy, r.phone_number, r.is_storage, r.storage_type,
           r.storage_capacity, r.storage_notes, r.courtroom_photos, r.created_at,
           r.updated_at, r.deleted_at,
           f.building_id, b.name AS building_name, f.name AS floor_name, f.floor_number
    FROM rooms r
    JOIN floors f ON f.id = r.floor_id
    JOIN buildings b ON b.id = f.building_id
"""
ROOM_WRITABLE = {
    "floor_id",
    "room_number",
    "name",
    "room_type",
    "status",
    "description",
    "capacity",
    "current_occupancy",
    "phone_number",
    "is_storage",
    "storage_type",
    "storage_capacity",
    "storage_notes",
    "courtroom_photos",
}
JSON_COLUMNS = {"metadata", "courtroom_photos"}


def _adapt(column: str, value):
    if column in JSON_COLUMNS and value is not None:
        return Jsonb(value)
    return value


def _update_statement(
    table: str, fields: Mapping[str, object], allowed: set[str], *, live_only: bool = False
) -> tuple[sql.Composed, list]:
    """Build ``UPDATE <table> SET ... WHERE id = %s`` for whitelisted columns.

    ``live_only`` adds ``AND deleted_at IS NULL`` for soft-deleted tables.
    """
    columns = [column for column in fields if column in allowed]
    if not columns:
        raise ValueError(f"No updatable columns supplied for {table}")
    assignments = sql.SQL(", ").join(
        sql.SQL("{} = {}").format(sql.Identifier(column), sql.Placeholder()) for column in columns
    )
    statement = sql.SQL("UPDATE {} SET {}, updated_at = now() WHERE id = %s").format(
        sql.Identifier(table), assignments
    )
    if live_only:
        statement += sql.SQL(" AND deleted_at IS NULL")
    return statement, [_adapt(column, fields[column]) for column in columns]


# --- Terms ---------------------------------------------------------------


def list_terms(conn: Connection) -> list[CourtTermRecord]:
    """Return all terms, newest first."""
    rows = conn.execute(f"SELECT {TERM_COLUMNS} FROM court_terms ORDER BY start_date DESC").fetchall()
    return [CourtTermRecord(**row) for row in rows]


def get_term(conn: Connection, term_id: str) -> Optional[CourtTermRecord]:
    row = conn.execute(f"SELECT {TERM_COLUMNS} FROM court_terms WHERE id = %s", (term_id,)).fetchone()
    return CourtTermRecord(**row) if row else None


def get_current_term(conn: Connection, today: date) -> Optional[CourtTermRecord]:
    """Return the most recently started term whose range contains ``today``."""
    row = conn.execute(
        f"""
        SELECT {TERM_COLUMNS}
        FROM court_terms
        WHERE start_date <= %s AND end_date >= %s
        ORDER BY start_date DESC
        LIMIT 1
        """,
        (today, today),
    ).fetchone()
    return CourtTermRecord(**row) if row else None


def insert_term(
    conn: Connection,
    *,
    term_number: str,
    term_name: str,
    description: str,
    start_date: date,
    end_date: date,
    location: str,
    metadata: Optional[dict] = None,
) -> str:
    """Insert a single term row and return its ID."""
    row = conn.execute(
        """
        INSERT INTO court_terms (term_number, term_name, description, start_date, end_date, location, metadata)
        VALUES (%s, %s, %s, %s, %s, %s, %s)
        RETURNING id
        """,
        (term_number, term_name, description, start_date, end_date, location, Jsonb(metadata or {})),
    ).fetchone()
    return str(row["id"])


def update_term(conn: Connection, term_id: str, fields: Mapping[str, object]) -> bool:
    statement, params = _update_statement("court_terms", fields, TERM_UPDATABLE)
    cur = conn.execute(statement, (*params, term_id))
    return cur.rowcount > 0


def delete_term(conn: Connection, term_id: str) -> bool:
    """Delete a term; assignments and personnel go with it (ON DELETE CASCADE)."""
    cur = conn.execute("DELETE FROM court_terms WHERE id = %s", (term_id,))
    return cur.rowcount > 0


# --- Court parts ---------------------------------------------------------


def find_or_create_part(conn: Connection, part_code: str) -> str:
    """Return the id of the court part with ``part_code``, creating it if missing."""
    row = conn.execute(
        """
        INSERT INTO court_parts (part_code, description)
        VALUES (%s, '')
        ON CONFLICT (part_code) DO UPDATE SET part_code = EXCLUDED.part_code
        RETURNING id
        """,
        (part_code,),
    ).fetchone()
    return str(row["id"])


# --- Assignments ---------------------------------------------------------


def list_term_assignments(conn: Connection, term_id: str) -> list[dict]:
    """Return assignments for a term with their room and part nested."""
    rows = conn.execute(
        """
        SELECT a.id, a.term_id, a.part_id, a.room_id, a.justice_name, a.phone, a.fax,
               a.tel_extension, a.sergeant_name, a.clerk_names,
               p.part_code, p.description AS part_description,
               r.room_number, r.name AS room_name, r.room_type, r.status AS room_status,
               f.name AS floor_name, b.name AS building_name
        FROM term_assignments a
        LEFT JOIN court_parts p ON p.id = a.part_id
        LEFT JOIN rooms r ON r.id = a.room_id
        LEFT JOIN floors f ON f.id = r.floor_id
        LEFT JOIN buildings b ON b.id = f.building_id
        WHERE a.term_id = %s
        ORDER BY p.part_code NULLS LAST, a.created_at
        """,
        (term_id,),
    ).fetchall()
    return [_nest_assignment(row) for row in rows]


def _nest_assignment(row: Mapping) -> dict:
    assignment = {
        key: row[key]
        for key in (
            "id",
            "term_id",
            "part_id",
            "room_id",
            "justice_name",
            "phone",
            "fax",
            "tel_extension",
            "sergeant_name",
            "clerk_names",
        )
    }
    assignment["clerk_names"] = list(assignment["clerk_names"] or [])
    assignment["part"] = (
        {"id": row["part_id"], "part_code": row["part_code"], "description": row["part_description"]}
        if row["part_id"]
        else None
    )
    assignment["room"] = (
        {
            "id": row["room_id"],
            "room_number": row["room_number"],
            "name": row["room_name"],
            "room_type": row["room_type"],
            "status": row["room_status"],
            "floor_name": row["floor_name"],
            "building_name": row["building_name"],
        }
        if row["room_id"]
        else None
    )
    return assignment


def insert_assignment(
    conn: Connection,
    *,
    term_id: str,
    part_id: Optional[str],
    room_id: Optional[str],
    justice_name: str,
    phone: Optional[str] = None,
    fax: Optional[str] = None,
    tel_extension: Optional[str] = None,
    sergeant_name: Optional[str] = None,
    clerk_names: Iterable[str] = (),
) -> str:
    row = conn.execute(
        """
        INSERT INTO term_assignments
            (term_id, part_id, room_id, justice_name, phone, fax, tel_extension, sergeant_name, clerk_names)
        VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s)
        RETURNING id
        """,
        (
            term_id,
            part_id,
            room_id,
            justice_name,
            phone,
            fax,
            tel_extension,
            sergeant_name,
            list(clerk_names),
        ),
    ).fetchone()
    return str(row["id"])


def update_assignment(conn: Connection, assignment_id: str, fields: Mapping[str, object]) -> bool:
    statement, params = _update_statement("term_assignments", fields, ASSIGNMENT_UPDATABLE)
    cur = conn.execute(statement, (*params, assignment_id))
    return cur.rowcount > 0


def delete_assignment(conn: Connection, assignment_id: str) -> bool:
    cur = conn.execute("DELETE FROM term_assignments WHERE id = %s", (assignment_id,))
    return cur.rowcount > 0


def delete_term_assignments(conn: Connection, term_id: str) -> int:
    cur = conn.execute("DELETE FROM term_assignments WHERE term_id = %s", (term_id,))
    return cur.rowcount


# --- Personnel -----------------------------------------------------------


def list_term_personnel(conn: Connection, term_id: str) -> list[TermPersonnelRecord]:
    rows = conn.execute(
        f"SELECT {PERSONNEL_COLUMNS} FROM term_personnel WHERE term_id = %s ORDER BY role ASC, name ASC",
        (term_id,),
    ).fetchall()
    return [TermPersonnelRecord(**row) for row in rows]


def insert_personnel(
    conn: Connection,
    *,
    term_id: str,
    role: str,
    name: str,
    phone: Optional[str] = None,
    extension: Optional[str] = None,
    room: Optional[str] = None,
    floor: Optional[str] = None,
) -> str:
    row = conn.execute(
        """
        INSERT INTO term_personnel (term_id, role, name, phone, extension, room, floor)
        VALUES (%s, %s, %s, %s, %s, %s, %s)
        RETURNING id
        """,
        (term_id, role, name, phone, extension, room, floor),
    ).fetchone()
    return str(row["id"])


def delete_personnel(conn: Connection, personnel_id: str) -> bool:
    cur = conn.execute("DELETE FROM term_personnel WHERE id = %s", (personnel_id,))
    return cur.rowcount > 0


def delete_term_personnel(conn: Connection, term_id: str) -> int:
    cur = conn.execute("DELETE FROM term_personnel WHERE term_id = %s", (term_id,))
    return cur.rowcount


# --- Buildings, floors and rooms -----------------------------------------


def list_buildings(conn: Connection) -> list[BuildingRecord]:
    rows = conn.execute(
        """
        SELECT id, name, address, total_floors, created_at
        FROM buildings
        WHERE deleted_at IS NULL
        ORDER BY name
        """
    ).fetchall()
    return [BuildingRecord(**row) for row in rows]


def list_floors(conn: Connection, building_id: Optional[str] = None) -> list[FloorRecord]:
    rows = conn.execute(
        """
        SELECT id, building_id, floor_number, name, created_at
        FROM floors
        WHERE deleted_at IS NULL
          AND (%s::UUID IS NULL OR building_id = %s::UUID)
        ORDER BY floor_number
        """,
        (building_id, building_id),
    ).fetchall()
    return [FloorRecord(**row) for row in rows]


def list_rooms(
    conn: Connection,
    *,
    building_id: Optional[str] = None,
    floor_id: Optional[str] = None,
    room_type: Optional[str] = None,
    status: Optional[str] = None,
    search: Optional[str] = None,
) -> list[RoomRecord]:
    """Return non-deleted rooms matching the optional filters."""
    pattern = f"%{search.strip()}%" if search and search.strip() else None
    rows = conn.execute(
        ROOM_SELECT
        + """
        WHERE r.deleted_at IS NULL
          AND (%s::UUID IS NULL OR f.building_id = %s::UUID)
          AND (%s::UUID IS NULL OR r.floor_id = %s::UUID)
          AND (%s::TEXT IS NULL OR r.room_type = %s)
          AND (%s::TEXT IS NULL OR r.status = %s)
          AND (%s::TEXT IS NULL OR r.room_number ILIKE %s OR r.name ILIKE %s OR b.name ILIKE %s)
        ORDER BY r.room_number
        """,
        (
            building_id,
            building_id,
            floor_id,
            floor_id,
            room_type,
            room_type,
            status,
            status,
            pattern,
            pattern,
            pattern,
            pattern,
        ),
    ).fetchall()
    return [RoomRecord(**row) for row in rows]


def get_room(conn: Connection, room_id: str) -> Optional[RoomRecord]:
    row = conn.execute(ROOM_SELECT + " WHERE r.id = %s AND r.deleted_at IS NULL", (room_id,)).fetchone()
    return RoomRecord(**row) if row else None


def insert_room(conn: Connection, fields: Mapping[str, object]) -> str:
    columns = [column for column in fields if column in ROOM_WRITABLE]
    statement = sql.SQL("INSERT INTO rooms ({}) VALUES ({}) RETURNING id").format(
        sql.SQL(", ").join(sql.Identifier(column) for column in columns),
        sql.SQL(", ").join(sql.Placeholder() for _ in columns),
    )
    row = conn.execute(statement, [_adapt(column, fields[column]) for column in columns]).fetchone()
    return str(row["id"])


def update_room(conn: Connection, room_id: str, fields: Mapping[str, object]) -> bool:
    statement, params = _update_statement("rooms", fields, ROOM_WRITABLE, live_only=True)
    cur = conn.execute(statement, (*params, room_id))
    return cur.rowcount > 0


def soft_delete_room(conn: Connection, room_id: str) -> bool:
    cur = conn.execute(
        "UPDATE rooms SET deleted_at = now(), updated_at = now() WHERE id = %s AND deleted_at IS NULL",
        (room_id,),
    )
    return cur.rowcount > 0


def list_room_numbers(conn: Connection) -> list[dict]:
    """Return ``{"id", "room_number"}`` pairs used for matching imported room numbers."""
    rows = conn.execute(
        "SELECT id, room_number FROM rooms WHERE deleted_at IS NULL AND room_number IS NOT NULL"
    ).fetchall()
    return [{"id": str(row["id"]), "room_number": row["room_number"]} for row in rows]
