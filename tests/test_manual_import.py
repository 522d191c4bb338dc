"""Tests for the hand-entered term schedule parser."""

from datetime import date

import pytest

from court_facilities.db.models import PersonnelRole
from court_facilities.errors import ImportValidationError
from court_facilities.ingestion.manual import DEFAULT_LOCATION, parse_assignment_line, parse_manual_input

SCHEDULE = """
SUPREME COURT - CRIMINAL TERM IV
MARCH 31, 2025 - APRIL 25, 2025
LOCATION: 100 CENTRE STREET
ADMINISTRATIVE JUDGE: HON. ELLEN BIBEN 646-386-4303
CHIEF CLERK: CHRISTOPHER DISANTO 646-386-3920
PART ASSIGNMENTS
TAP A - HON. M. LEWIS - ROOM 1180 - 646-386-4107
CLERKS: A. WRIGHT, A. SARMIENTO
31 - S. LITMAN - 1130, FAX: 401-9072
"""


class TestAssignmentLine:
    def test_dash_separated(self):
        assignment = parse_assignment_line("TAP A - HON. M. LEWIS - ROOM 1180 - 646-386-4107")
        assert assignment.part_code == "TAP A"
        assert assignment.justice_name == "M. LEWIS"
        assert assignment.room_number == "1180"
        assert assignment.phone == "646-386-4107"

    def test_bare_room_and_fax(self):
        assignment = parse_assignment_line("31 - S. LITMAN - 1130, FAX: 401-9072")
        assert assignment.part_code == "31"
        assert assignment.room_number == "1130"
        assert assignment.fax == "401-9072"

    def test_space_separated_keyword_part(self):
        """Keyword part codes need no dash before the justice."""
        assignment = parse_assignment_line("PART 1 HON. J. SMITH ROOM 1234 646-386-4001")
        assert assignment.part_code == "PART 1"
        assert assignment.justice_name == "J. SMITH"
        assert assignment.room_number == "1234"
        assert assignment.phone == "646-386-4001"

    def test_space_separated_fax(self):
        assignment = parse_assignment_line("IAS 5 T. GREENE FAX: 401-9072")
        assert (assignment.part_code, assignment.justice_name, assignment.fax) == ("IAS 5", "T. GREENE", "401-9072")
        assert assignment.room_number == ""

    def test_unrecognised_line(self):
        assert parse_assignment_line("Please see the attached schedule") is None


class TestManualInput:
    def test_full_schedule(self):
        data = parse_manual_input(SCHEDULE, today=date(2025, 5, 14))
        assert data.source == "manual"
        assert data.warnings == []
        assert data.term.term_number == "IV"
        assert data.term.term_name == "Term IV"
        assert data.term.description == "SUPREME COURT - CRIMINAL TERM IV"
        assert (data.term.start_date, data.term.end_date) == (date(2025, 3, 31), date(2025, 4, 25))
        assert data.term.location == "100 CENTRE STREET"

    def test_personnel(self):
        data = parse_manual_input(SCHEDULE)
        assert [(p.role, p.name, p.phone) for p in data.personnel] == [
            (PersonnelRole.ADMINISTRATIVE_JUDGE, "ELLEN BIBEN", "646-386-4303"),
            (PersonnelRole.CHIEF_CLERK, "CHRISTOPHER DISANTO", "646-386-3920"),
        ]

    def test_assignments_with_clerk_line(self):
        """A CLERKS line belongs to the assignment above it."""
        data = parse_manual_input(SCHEDULE)
        assert [a.part_code for a in data.assignments] == ["TAP A", "31"]
        assert data.assignments[0].clerk_names == ["A. WRIGHT", "A. SARMIENTO"]
        assert data.assignments[1].clerk_names == []

    def test_defaults_when_header_missing(self):
        """Missing term number and dates fall back to the current month."""
        data = parse_manual_input("Criminal schedule\nTAP A - M. LEWIS - ROOM 1180", today=date(2025, 5, 14))
        assert data.term.term_number == "I"
        assert data.term.term_name == "MAY TERM"
        assert (data.term.start_date, data.term.end_date) == (date(2025, 5, 1), date(2025, 5, 31))
        assert data.term.location == DEFAULT_LOCATION
        assert data.warnings == [
            "Term number not found; defaulted to I",
            "Term dates not found; defaulted to the current month",
        ]
        assert data.assignments[0].room_number == "1180"

    def test_space_separated_schedule(self):
        data = parse_manual_input("SUPREME COURT TERM IV\nPART ASSIGNMENTS\nPART 1 HON. J. SMITH ROOM 1234 646-386-4001")
        assert [(a.part_code, a.justice_name, a.room_number) for a in data.assignments] == [
            ("PART 1", "J. SMITH", "1234")
        ]
        assert "No part assignments recognised" not in data.warnings

    def test_word_term_label_kept(self):
        """An unnumbered "APRIL TERM" header names the term."""
        data = parse_manual_input("SUPREME COURT APRIL TERM\nTAP A - M. LEWIS", today=date(2025, 5, 14))
        assert data.term.term_name == "APRIL TERM"
        assert data.term.term_number == "I"
        assert "Term number not found; defaulted to I" in data.warnings

    def test_custom_default_location(self):
        data = parse_manual_input("TERM II\nnothing else", default_location="60 CENTRE ST")
        assert data.term.location == "60 CENTRE ST"
        assert "No part assignments recognised" in data.warnings

    def test_inverted_dates_rejected(self):
        with pytest.raises(ImportValidationError, match="Term end date must be after start date"):
            parse_manual_input("TERM II\nAPRIL 25, 2025 - MARCH 31, 2025")

    def test_empty_input_rejected(self):
        with pytest.raises(ImportValidationError, match="No valid content found in input text"):
            parse_manual_input("   \n\t\n")
