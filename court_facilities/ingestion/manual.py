"""
Parser for term schedules typed or pasted in by hand.

Expected shape (every part optional)::

    SUPREME COURT - CRIMINAL TERM IV
    MARCH 31, 2025 - APRIL 25, 2025
    LOCATION: 100 CENTRE STREET
    ADMINISTRATIVE JUDGE: HON. ELLEN BIBEN 646-386-4303
    CHIEF CLERK: CHRISTOPHER DISANTO 646-386-3920
    PART ASSIGNMENTS
    TAP A - HON. M. LEWIS - ROOM 1180 - 646-386-4107
    CLERKS: A. WRIGHT, A. SARMIENTO
"""

from __future__ import annotations

import calendar
import logging
import re
from datetime import date
from typing import Optional

from court_facilities.errors import ImportValidationError
from court_facilities.ingestion.parsing import (
    DEFAULT_PHONE_PREFIX,
    FULL_PHONE_RE,
    HONORIFIC_RE,
    extract_date_range,
    extract_personnel,
    extract_term_label,
    extract_term_number,
    is_personnel_line,
    non_empty_lines,
)
from court_facilities.schemas import AssignmentDraft, TermDraft, TermImportData

logger = logging.getLogger(__name__)

DEFAULT_LOCATION = "100 CENTRE STREET & 111 CENTRE STREET"

SECTION_HEADERS = ("PART ASSIGNMENTS", "JUSTICE ASSIGNMENTS", "ASSIGNMENTS")
PART_LINE_RE = re.compile(
    r"^(?:PART|TAP|IAS|COMP)\b|^[A-Z]+\s+[A-Z](?:\s+[-–—]\s+|\s+)|^\d+(?:\s+[-–—]\s+|\s+)|^[A-Z]{1,3}\d?\s+[-–—]",
    re.IGNORECASE,
)
PART_CODE_RE = re.compile(
    r"^(?:(?P<keyword>(?:PART|TAP|IAS|COMP)\s+[A-Z0-9]+)(?=\s+[-–—]\s+|\s*,|\s+\S)"
    r"|(?P<code>\d+(?:\s+[A-Z]{1,2})?|[A-Z]{1,3}\s*\d*)(?=\s+[-–—]\s+|\s*,))",
    re.IGNORECASE,
)
FIELD_SPLIT_RE = re.compile(r"\s+[-–—]\s+|\s*,\s*")
LEADING_SEPARATORS_RE = re.compile(r"^[\s\-–—,]+")
ROOM_RE = re.compile(r"ROOM\s+([A-Z0-9-]+)", re.IGNORECASE)
BARE_ROOM_RE = re.compile(r"^\d{3,4}[A-Z]?$", re.IGNORECASE)
FAX_FIELD_RE = re.compile(r"FAX:?\s*([\d-]+)", re.IGNORECASE)
CLERK_LINE_RE = re.compile(r"^CLERKS?\b:?\s*", re.IGNORECASE)
LOCATION_RE = re.compile(r"^LOCATION:\s*", re.IGNORECASE)


def _month_range(today: date) -> tuple[date, date]:
    last_day = calendar.monthrange(today.year, today.month)[1]
    return today.replace(day=1), today.replace(day=last_day)


def _find_location(lines: list[str]) -> Optional[str]:
    for line in lines[:5]:
        if LOCATION_RE.match(line):
            return LOCATION_RE.sub("", line).strip()
        if "CENTRE STREET" in line.upper() or "CENTER STREET" in line.upper():
            return line
    return None


def _assignment_start(lines: list[str]) -> int:
    for idx, line in enumerate(lines):
        if any(header in line.upper() for header in SECTION_HEADERS):
            return idx + 1
    for idx, line in enumerate(lines):
        if idx == 0 or is_personnel_line(line):
            continue
        if PART_LINE_RE.match(line):
            return idx
    return -1


def _inline_fields(text: str) -> list[str]:
    """Split ``HON. J. SMITH ROOM 1234 646-386-4001`` into justice, room, phone and fax fields."""
    fields = []
    for pattern in (FAX_FIELD_RE, ROOM_RE, FULL_PHONE_RE):
        if match := pattern.search(text):
            fields.append(match.group(0))
            text = text[: match.start()] + " " + text[match.end() :]
    return [" ".join(text.split())] + fields


def parse_assignment_line(line: str) -> Optional[AssignmentDraft]:
    """Parse ``PART - HON. JUSTICE - ROOM 123 - 646-386-4107`` style lines.

    Keyword part codes may also be followed by plain spaces, as in
    ``PART 1 HON. J. SMITH ROOM 1234 646-386-4001``.
    """
    match = PART_CODE_RE.match(line)
    if not match:
        return None
    remainder = LEADING_SEPARATORS_RE.sub("", line[match.end() :])
    fields = [field.strip() for field in FIELD_SPLIT_RE.split(remainder) if field.strip()]
    if len(fields) == 1:
        fields = _inline_fields(fields[0])
    if not fields or not fields[0]:
        return None

    assignment = AssignmentDraft(
        part_code=(match.group("keyword") or match.group("code")).strip().upper(),
        justice_name=HONORIFIC_RE.sub("", fields[0]).strip(),
    )
    for field in fields[1:]:
        if not assignment.room_number:
            if room_match := ROOM_RE.search(field):
                assignment.room_number = room_match.group(1).upper()
                continue
            if BARE_ROOM_RE.match(field):
                assignment.room_number = field.upper()
                continue
        if not assignment.fax and (fax_match := FAX_FIELD_RE.search(field)):
            assignment.fax = fax_match.group(1)
            continue
        if not assignment.phone and (phone_match := FULL_PHONE_RE.search(field)):
            assignment.phone = phone_match.group(0)
    return assignment


def parse_manual_input(
    text: str,
    today: Optional[date] = None,
    default_location: str = DEFAULT_LOCATION,
    phone_prefix: str = DEFAULT_PHONE_PREFIX,
) -> TermImportData:
    """Build a review bundle from hand-entered term text, filling sensible defaults."""
    today = today or date.today()
    lines = non_empty_lines(text or "")
    if not lines:
        raise ImportValidationError("No valid content found in input text")

    warnings: list[str] = []
    term = TermDraft(description=lines[0])
    term_number = extract_term_number(lines[:1])

    start_date, end_date = None, None
    for line in lines[:3]:
        start_date, end_date = extract_date_range(line)
        if start_date and end_date:
            if end_date < start_date:
                raise ImportValidationError("Term end date must be after start date")
            term_number = term_number or extract_term_number([line])
            break

    if term_number:
        term.term_number = term_number
        term.term_name = f"Term {term_number}"
    else:
        term.term_number = "I"
        term.term_name = extract_term_label(lines[:1]) or f"{calendar.month_abbr[today.month].upper()} TERM"
        warnings.append("Term number not found; defaulted to I")

    if start_date and end_date:
        term.start_date, term.end_date = start_date, end_date
    else:
        term.start_date, term.end_date = _month_range(today)
        warnings.append("Term dates not found; defaulted to the current month")

    location = _find_location(lines)
    term.location = location or default_location

    personnel = extract_personnel(lines, phone_prefix)

    assignments: list[AssignmentDraft] = []
    start = _assignment_start(lines)
    if start >= 0:
        idx = start
        while idx < len(lines):
            line = lines[idx]
            idx += 1
            if line.upper().rstrip(":") in SECTION_HEADERS or is_personnel_line(line):
                continue
            assignment = parse_assignment_line(line)
            if assignment is None:
                logger.debug("Ignoring unrecognised line %r", line)
                continue
            if idx < len(lines) and CLERK_LINE_RE.match(lines[idx]):
                clerks = CLERK_LINE_RE.sub("", lines[idx])
                assignment.clerk_names = [name.strip() for name in re.split(r"\s*[,;]\s*", clerks) if name.strip()]
                idx += 1
            assignments.append(assignment)

    if not assignments:
        warnings.append("No part assignments recognised")
    logger.info("Manual import parsed %d assignments and %d personnel", len(assignments), len(personnel))
    return TermImportData(term=term, assignments=assignments, personnel=personnel, warnings=warnings, source="manual")
