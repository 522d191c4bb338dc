"""
Court term scheduling service: terms, part assignments and personnel.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from psycopg import Connection
from psycopg_pool import ConnectionPool

from court_facilities.db import queries
from court_facilities.db.models import CourtTermRecord, TermPersonnelRecord
from court_facilities.errors import ImportValidationError, NotFoundError
from court_facilities.schemas import (
    AssignmentCreate,
    AssignmentUpdate,
    PersonnelCreate,
    TermCreate,
    TermImportData,
    TermUpdate,
    check_date_range,
)

logger = logging.getLogger(__name__)

REQUIRED_TERM_FIELDS = {
    "term_number": "Term number",
    "term_name": "Term name",
    "start_date": "Start date",
    "end_date": "End date",
    "location": "Location",
}


def validate_import_term(import_data: TermImportData) -> None:
    """Raise ImportValidationError unless the term header is complete and consistent."""
    term = import_data.term
    missing = [label for field_name, label in REQUIRED_TERM_FIELDS.items() if not getattr(term, field_name)]
    if missing:
        raise ImportValidationError(f"Missing required term fields: {', '.join(missing)}")
    try:
        check_date_range(term.start_date, term.end_date)
    except ValueError as exc:
        raise ImportValidationError(str(exc)) from exc


class TermService:
    def __init__(self, db_pool: ConnectionPool) -> None:
        self.db_pool = db_pool

    # --- Reads -----------------------------------------------------------

    def fetch_terms(self) -> list[CourtTermRecord]:
        with self.db_pool.connection() as conn:
            return queries.list_terms(conn)

    def fetch_term_by_id(self, term_id: str) -> Optional[CourtTermRecord]:
        with self.db_pool.connection() as conn:
            return queries.get_term(conn, term_id)

    def fetch_current_term(self, today: Optional[date] = None) -> Optional[CourtTermRecord]:
        with self.db_pool.connection() as conn:
            return queries.get_current_term(conn, today or date.today())

    def fetch_term_assignments(self, term_id: str) -> list[dict]:
        with self.db_pool.connection() as conn:
            return queries.list_term_assignments(conn, term_id)

    def fetch_term_personnel(self, term_id: str) -> list[TermPersonnelRecord]:
        with self.db_pool.connection() as conn:
            return queries.list_term_personnel(conn, term_id)

    # --- Single writes ---------------------------------------------------

    def create_term(self, payload: TermCreate) -> str:
        with self.db_pool.connection() as conn:
            term_id = queries.insert_term(conn, **payload.model_dump())
        logger.info("Created term %s (%s)", payload.term_number, term_id)
        return term_id

    def create_term_assignment(self, payload: AssignmentCreate) -> str:
        with self.db_pool.connection() as conn:
            part_id = payload.part_id or queries.find_or_create_part(conn, payload.part_code.strip())
            return queries.insert_assignment(
                conn,
                term_id=payload.term_id,
                part_id=part_id,
                room_id=payload.room_id,
                justice_name=payload.justice_name,
                phone=payload.phone,
                fax=payload.fax,
                tel_extension=payload.tel_extension,
                sergeant_name=payload.sergeant_name,
                clerk_names=payload.clerk_names,
            )

    def create_term_personnel(self, payload: PersonnelCreate) -> str:
        with self.db_pool.connection() as conn:
            return queries.insert_personnel(
                conn,
                term_id=payload.term_id,
                role=payload.role.value,
                name=payload.name,
                phone=payload.phone,
                extension=payload.extension,
                room=payload.room,
                floor=payload.floor,
            )

    def update_term(self, term_id: str, payload: TermUpdate) -> CourtTermRecord:
        fields = payload.model_dump(exclude_unset=True)
        with self.db_pool.connection() as conn:
            current = queries.get_term(conn, term_id)
            if current is None:
                raise NotFoundError(f"Term {term_id} not found")
            check_date_range(
                fields.get("start_date", current.start_date),
                fields.get("end_date", current.end_date),
            )
            if fields:
                queries.update_term(conn, term_id, fields)
            return queries.get_term(conn, term_id)

    def delete_term(self, term_id: str) -> None:
        with self.db_pool.connection() as conn:
            if not queries.delete_term(conn, term_id):
                raise NotFoundError(f"Term {term_id} not found")
        logger.info("Deleted term %s", term_id)

    def update_term_assignment(self, assignment_id: str, payload: AssignmentUpdate) -> None:
        fields = payload.model_dump(exclude_unset=True)
        if not fields:
            return
        with self.db_pool.connection() as conn:
            if not queries.update_assignment(conn, assignment_id, fields):
                raise NotFoundError(f"Assignment {assignment_id} not found")

    def delete_term_assignment(self, assignment_id: str) -> None:
        with self.db_pool.connection() as conn:
            if not queries.delete_assignment(conn, assignment_id):
                raise NotFoundError(f"Assignment {assignment_id} not found")

    def delete_term_personnel(self, personnel_id: str) -> None:
        with self.db_pool.connection() as conn:
            if not queries.delete_personnel(conn, personnel_id):
                raise NotFoundError(f"Personnel {personnel_id} not found")

    # --- Bulk import -----------------------------------------------------

    def bulk_create_term_data(self, import_data: TermImportData) -> str:
        """Persist a reviewed import bundle as a new term in one transaction."""
        validate_import_term(import_data)
        term = import_data.term
        with self.db_pool.connection() as conn:
            with conn.transaction():
                term_id = queries.insert_term(
                    conn,
                    term_number=term.term_number,
                    term_name=term.term_name,
                    description=term.description or "",
                    start_date=term.start_date,
                    end_date=term.end_date,
                    location=term.location,
                    metadata={"source": import_data.source},
                )
                self._insert_schedule(conn, term_id, import_data)
        logger.info(
            "Imported term %s with %d assignments and %d personnel (%s)",
            term.term_number,
            len(import_data.assignments),
            len(import_data.personnel),
            term_id,
        )
        return term_id

    def replace_term_schedule(self, term_id: str, import_data: TermImportData) -> dict:
        """Overwrite a term's header, assignments and personnel with freshly parsed data."""
        validate_import_term(import_data)
        term = import_data.term
        with self.db_pool.connection() as conn:
            with conn.transaction():
                existing = queries.get_term(conn, term_id)
                if existing is None:
                    raise NotFoundError(f"Term {term_id} not found")
                queries.update_term(
                    conn,
                    term_id,
                    {
                        "term_number": term.term_number,
                        "term_name": term.term_name,
                        "description": term.description or existing.description,
                        "start_date": term.start_date,
                        "end_date": term.end_date,
                        "location": term.location,
                        "metadata": {**existing.metadata, "source": import_data.source},
                    },
                )
                removed_assignments = queries.delete_term_assignments(conn, term_id)
                removed_personnel = queries.delete_term_personnel(conn, term_id)
                self._insert_schedule(conn, term_id, import_data)
        logger.info(
            "Replaced schedule for term %s: -%d/+%d assignments, -%d/+%d personnel",
            term_id,
            removed_assignments,
            len(import_data.assignments),
            removed_personnel,
            len(import_data.personnel),
        )
        return {
            "term_id": term_id,
            "assignments": len(import_data.assignments),
            "personnel": len(import_data.personnel),
        }

    def _insert_schedule(self, conn: Connection, term_id: str, import_data: TermImportData) -> None:
        for person in import_data.personnel:
            queries.insert_personnel(
                conn,
                term_id=term_id,
                role=person.role.value,
                name=person.name,
                phone=person.phone or None,
                room=person.room or None,
            )
        part_ids: dict[str, str] = {}
        for assignment in import_data.assignments:
            part_code = assignment.part_code.strip()
            part_id = None
            if part_code:
                if part_code not in part_ids:
                    part_ids[part_code] = queries.find_or_create_part(conn, part_code)
                part_id = part_ids[part_code]
            queries.insert_assignment(
                conn,
                term_id=term_id,
                part_id=part_id,
                room_id=assignment.room_id,
                justice_name=assignment.justice_name,
                phone=assignment.phone or None,
                fax=assignment.fax or None,
                tel_extension=assignment.tel_extension or None,
                sergeant_name=assignment.sergeant_name or None,
                clerk_names=assignment.clerk_names,
            )
