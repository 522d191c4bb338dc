"""
Utilities for pulling term details out of term sheet text.

These are regular-expression heuristics tuned to the layout of the Supreme
Court criminal term sheets: a header block (court, term number, date range,
location), a personnel block (administrative judge, clerks, court officers)
and an assignment table with PART / JUSTICE / ROOM / FAX / TEL / SGT / CLERKS
columns.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, Optional, Sequence

from court_facilities.db.models import PersonnelRole
from court_facilities.schemas import AssignmentDraft, PersonnelDraft, TermDraft, TermImportData

logger = logging.getLogger(__name__)

DEFAULT_PHONE_PREFIX = "646-386-"

TERM_NUMBER_RE = re.compile(r"\bTERM\s+([IVXLCDM]+|\d+)\b", re.IGNORECASE)
TERM_LABEL_RE = re.compile(r"\b([A-Z]+)\s+TERM\b", re.IGNORECASE)
PAGE_MARKER_RE = re.compile(r"^\s*(\[Page \d+\]|Page \d+( of \d+)?)\s*$", re.IGNORECASE)

_DATE_TOKEN = r"[A-Za-z]+\.?\s+\d{1,2}\s*,?\s*\d{4}|\d{1,2}/\d{1,2}/\d{2,4}|\d{4}-\d{2}-\d{2}"
_RANGE_SEPARATOR = r"\s*(?:[-–—]|\bto\b|\bthrough\b|\bthru\b)\s*"
DATE_RANGE_RE = re.compile(rf"({_DATE_TOKEN}){_RANGE_SEPARATOR}({_DATE_TOKEN})", re.IGNORECASE)
YEARLESS_RANGE_RE = re.compile(
    rf"([A-Za-z]+\.?\s+\d{{1,2}}){_RANGE_SEPARATOR}([A-Za-z]+\.?\s+\d{{1,2}}\s*,?\s*(\d{{4}}))",
    re.IGNORECASE,
)
DATE_FORMATS = ("%B %d, %Y", "%B %d %Y", "%b %d, %Y", "%b %d %Y", "%m/%d/%Y", "%m/%d/%y", "%Y-%m-%d")

FULL_PHONE_RE = re.compile(r"\(?\d{3}\)?[\s-]?\d{3}-\d{4}")
SHORT_PHONE_RE = re.compile(r"\(\d\)\s*\d{4}|\b\d{3}-\d{4}\b")
FAX_RE = re.compile(r"\b\d{3}-\d{4}\b")
ROOM_TOKEN_RE = re.compile(r"\bROOM\s+([A-Z0-9-]+)|\b(\d{3,4}[A-Z]?|\d{1,2}(?:ST|ND|RD|TH)\s+FL)\b", re.IGNORECASE)
HONORIFIC_RE = re.compile(r"^\s*HON(?:ORABLE)?\.?\s*", re.IGNORECASE)
NON_DIGIT_RE = re.compile(r"\D")

# Most specific labels first: "DEPUTY CHIEF CLERK" must not be read as a chief clerk.
ROLE_PATTERNS: list[tuple[PersonnelRole, str]] = [
    (PersonnelRole.ADMINISTRATIVE_JUDGE, r"ADMIN(?:ISTRATIVE|\.)?\s+JUDGE"),
    (PersonnelRole.FIRST_DEPUTY_CLERK, r"FIRST\s+DEPUTY\s+(?:CHIEF\s+)?CLERK"),
    (PersonnelRole.DEPUTY_CLERK, r"DEPUTY\s+(?:CHIEF\s+)?CLERK"),
    (PersonnelRole.CHIEF_CLERK, r"CHIEF\s+CLERK"),
    (PersonnelRole.COURT_CLERK_SPECIALIST, r"COURT\s+CLERK\s+SPECIALISTS?"),
    (PersonnelRole.SENIOR_LAW_LIBRARIAN, r"(?:SENIOR|SR\.?)\s+LAW\s+LIBRARIAN"),
    (PersonnelRole.MAJOR, r"MAJOR"),
    (PersonnelRole.CAPTAIN, r"CAPT(?:AIN|\.)"),
]
ROLE_LINE_RES = [
    (role, re.compile(rf"^\s*(?:{label})(?![A-Za-z])\s*[:\-–—]?\s*(?P<rest>.*)$", re.IGNORECASE))
    for role, label in ROLE_PATTERNS
]

TABLE_COLUMNS = [
    ("part_code", "PART"),
    ("justice_name", "JUSTICE"),
    ("room_number", "ROOM"),
    ("fax", "FAX"),
    ("phone", "TEL"),
    ("sergeant_name", "SGT"),
    ("clerk_names", "CLERK"),
]
CELL_RE = re.compile(r"\S+(?: \S+)*")


def clean_text(text: str) -> str:
    """Normalize line endings, drop page markers and collapse blank runs.

    Leading indentation is kept because table rows are aligned by column offset.
    """
    lines = []
    for raw_line in text.replace("\r\n", "\n").replace("\r", "\n").split("\n"):
        line = raw_line.rstrip().replace("\f", "")
        if not line.strip():
            lines.append("")
            continue
        if PAGE_MARKER_RE.match(line) or line.strip().isdigit():
            continue
        lines.append(line)
    normalized = "\n".join(lines)
    normalized = re.sub(r"\n{3,}", "\n\n", normalized)
    return normalized.strip("\n")


def non_empty_lines(text: str) -> list[str]:
    return [line.strip() for line in text.splitlines() if line.strip()]


def parse_date(value: str) -> Optional[date]:
    """Parse dates such as ``March 31, 2025``, ``Mar 31 2025``, ``3/31/2025`` or ``2025-03-31``."""
    cleaned = re.sub(r"\s+", " ", value.strip().replace(".", " "))
    cleaned = re.sub(r"\s*,\s*", ", ", cleaned)
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(cleaned, fmt).date()
        except ValueError:
            continue
    return None


def extract_date_range(text: str) -> tuple[Optional[date], Optional[date]]:
    """Return the first ``start - end`` date range found in ``text``.

    A start date without a year (``March 31 - April 25, 2025``) borrows the
    year of the end date.
    """
    for line in text.splitlines():
        match = DATE_RANGE_RE.search(line)
        if match:
            start, end = parse_date(match.group(1)), parse_date(match.group(2))
            if start and end:
                return start, end
            logger.info("Unparseable date range %r", match.group(0))
        match = YEARLESS_RANGE_RE.search(line)
        if match:
            start = parse_date(f"{match.group(1)}, {match.group(3)}")
            end = parse_date(match.group(2))
            if start and end:
                return start, end
    return None, None


def extract_term_number(lines: Iterable[str]) -> Optional[str]:
    for line in lines:
        if match := TERM_NUMBER_RE.search(line):
            return match.group(1).upper()
    return None


def extract_term_label(lines: Iterable[str]) -> Optional[str]:
    """Return a ``<WORD> TERM`` label such as ``APRIL TERM`` from the first line that has one."""
    for line in lines:
        if match := TERM_LABEL_RE.search(line):
            return f"{match.group(1).upper()} TERM"
    return None


def expand_phone(value: str, prefix: str = DEFAULT_PHONE_PREFIX) -> tuple[str, str]:
    """Return ``(phone, extension)`` for a cell such as ``646-386-4107`` or ``(6)4107``."""
    value = value.strip()
    if match := FULL_PHONE_RE.search(value):
        return match.group(0), ""
    digits = NON_DIGIT_RE.sub("", value)
    if len(digits) < 4:
        return "", ""
    extension = digits[-4:]
    return f"{prefix}{extension}", extension


def _match_role(line: str) -> Optional[tuple[PersonnelRole, str]]:
    for role, pattern in ROLE_LINE_RES:
        if match := pattern.match(line):
            return role, match.group("rest")
    return None


def is_personnel_line(line: str) -> bool:
    return _match_role(line) is not None


def extract_personnel(lines: Iterable[str], phone_prefix: str = DEFAULT_PHONE_PREFIX) -> list[PersonnelDraft]:
    """Read ``ROLE: NAME  ROOM  PHONE`` lines for every known personnel role."""
    personnel = []
    for line in lines:
        matched = _match_role(line)
        if not matched:
            continue
        role, rest = matched
        phone = ""
        if phone_match := FULL_PHONE_RE.search(rest) or SHORT_PHONE_RE.search(rest):
            phone, _ = expand_phone(phone_match.group(0), phone_prefix)
            rest = rest.replace(phone_match.group(0), " ")
        room = ""
        if room_match := ROOM_TOKEN_RE.search(rest):
            room = (room_match.group(1) or room_match.group(2)).upper()
            rest = rest.replace(room_match.group(0), " ")
        name = HONORIFIC_RE.sub("", rest)
        name = re.sub(r"\s+", " ", name).strip(" ,;:-–—()")
        if not name:
            continue
        personnel.append(PersonnelDraft(role=role, name=name, phone=phone, room=room))
    return personnel


def looks_tabular(text: str) -> bool:
    """True when the text carries an assignment table header row."""
    return _find_header(text.splitlines()) is not None


def _find_header(lines: Sequence[str]) -> Optional[int]:
    for idx, line in enumerate(lines):
        upper = line.upper()
        if "PART" in upper and "JUSTICE" in upper and "ROOM" in upper:
            return idx
    return None


@dataclass(slots=True)
class _Column:
    key: str
    offset: int


def _header_columns(header: str) -> list[_Column]:
    upper = header.upper()
    columns = [
        _Column(key, upper.find(label)) for key, label in TABLE_COLUMNS if upper.find(label) >= 0
    ]
    return sorted(columns, key=lambda column: column.offset)


def _split_cells(line: str) -> list[tuple[int, str]]:
    """Split a row on tabs or runs of two or more spaces, keeping each cell's offset."""
    if "\t" in line:
        cells = []
        offset = 0
        for part in line.split("\t"):
            if part.strip():
                cells.append((offset + len(part) - len(part.lstrip()), part.strip()))
            offset += len(part) + 1
        return cells
    return [(match.start(), match.group(0)) for match in CELL_RE.finditer(line)]


def _assign_cells(cells: list[tuple[int, str]], columns: list[_Column]) -> dict[str, list[str]]:
    values: dict[str, list[str]] = {}
    if len(cells) == len(columns):
        for column, (_, text) in zip(columns, cells):
            values.setdefault(column.key, []).append(text)
        return values
    for start, text in cells:
        column = min(columns, key=lambda c: abs(c.offset - start))
        values.setdefault(column.key, []).append(text)
    return values


def _split_clerks(values: Iterable[str]) -> list[str]:
    names = []
    for value in values:
        names.extend(name.strip() for name in re.split(r"\s*[,;/]\s*", value) if name.strip())
    return names


def _row_to_assignment(values: dict[str, list[str]], phone_prefix: str) -> AssignmentDraft:
    def joined(key: str) -> str:
        return " ".join(values.get(key, [])).strip()

    phone, extension = expand_phone(joined("phone"), phone_prefix) if joined("phone") else ("", "")
    fax = joined("fax")
    return AssignmentDraft(
        part_code=joined("part_code"),
        justice_name=HONORIFIC_RE.sub("", joined("justice_name")).strip(),
        room_number=joined("room_number"),
        fax=fax if FAX_RE.search(fax) else "",
        phone=phone,
        tel_extension=extension,
        sergeant_name=joined("sergeant_name"),
        clerk_names=_split_clerks(values.get("clerk_names", [])),
    )


def parse_table_rows(lines: Sequence[str], header_index: int, phone_prefix: str) -> list[AssignmentDraft]:
    columns = _header_columns(lines[header_index])
    assignments: list[AssignmentDraft] = []
    current: Optional[AssignmentDraft] = None
    for line in lines[header_index + 1 :]:
        if not line.strip() or is_personnel_line(line):
            continue
        cells = _split_cells(line)
        if len(cells) == 1:
            text = cells[0][1]
            # A lone name under a row is a second clerk for that part.
            if current is not None and not any(ch.isdigit() for ch in text) and "PART" not in text.upper():
                current.clerk_names.extend(_split_clerks([text]))
            continue
        values = _assign_cells(cells, columns)
        assignment = _row_to_assignment(values, phone_prefix)
        if not assignment.part_code or not assignment.justice_name:
            logger.debug("Skipping table line without part or justice: %r", line)
            continue
        assignments.append(assignment)
        current = assignment
    return assignments


def parse_table_document(
    text: str,
    phone_prefix: str = DEFAULT_PHONE_PREFIX,
    default_location: str = "",
) -> Optional[TermImportData]:
    """Parse a tabular term sheet. Returns None when no term number is present."""
    raw_lines = [line for line in clean_text(text).splitlines() if line.strip()]
    lines = [line.strip() for line in raw_lines]

    term_number = extract_term_number(lines)
    if not term_number:
        logger.info("No term number found; table parser skipped")
        return None

    warnings: list[str] = []
    description = next((line for line in lines if "COURT" in line.upper() and "TERM" in line.upper()), "")
    start_date, end_date = extract_date_range("\n".join(lines))
    if not start_date:
        warnings.append("Term date range not found; enter start and end dates before saving")
    location = next(
        (line for line in lines if any(word in line.upper() for word in ("STREET", "AVENUE", "CENTRE"))),
        default_location,
    )

    header_index = _find_header(raw_lines)
    if header_index is None:
        warnings.append("No assignment table found in document")
        personnel = extract_personnel(lines, phone_prefix)
        assignments: list[AssignmentDraft] = []
    else:
        personnel = extract_personnel(lines[:header_index], phone_prefix)
        assignments = parse_table_rows(raw_lines, header_index, phone_prefix)

    logger.info(
        "Table parser found term %s with %d assignments and %d personnel",
        term_number,
        len(assignments),
        len(personnel),
    )
    return TermImportData(
        term=TermDraft(
            term_number=term_number,
            term_name=f"Term {term_number}",
            description=description,
            start_date=start_date,
            end_date=end_date,
            location=location,
        ),
        assignments=assignments,
        personnel=personnel,
        warnings=warnings,
        source="table",
    )
