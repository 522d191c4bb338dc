"""Tests for term sheet text parsing."""

from datetime import date

import pytest

from court_facilities.db.models import PersonnelRole
from court_facilities.ingestion.parsing import (
    clean_text,
    expand_phone,
    extract_date_range,
    extract_personnel,
    extract_term_label,
    extract_term_number,
    looks_tabular,
    parse_date,
    parse_table_document,
)

WIDTHS = [9, 15, 7, 11, 10, 12]


def table_row(*cells: str) -> str:
    """Lay cells out at fixed column widths the way a PDF text layer does."""
    padded = [cell.ljust(width) for cell, width in zip(cells, WIDTHS)]
    return "".join(padded) + cells[-1] if len(cells) > len(WIDTHS) else "".join(padded)


TERM_SHEET = "\n".join(
    [
        "SUPREME COURT OF THE STATE OF NEW YORK - CRIMINAL TERM",
        "TERM IV",
        "MARCH 31, 2025 - APRIL 25, 2025",
        "100 CENTRE STREET",
        "ADMINISTRATIVE JUDGE: HON. ELLEN BIBEN",
        "CHIEF CLERK: CHRISTOPHER DISANTO  ROOM 1000  (6)4107",
        "[Page 1]",
        table_row("PART", "JUSTICE", "ROOM", "FAX", "TEL", "SGT", "CLERKS"),
        table_row("TAP A", "M. LEWIS", "1180", "374-4107", "(6)4107", "BROWN", "A. WRIGHT"),
        " " * sum(WIDTHS) + "A. SARMIENTO",
        table_row("31", "S. LITMAN", "1130", "", "(6)4231", "JONES", "T. GREENDGE"),
    ]
)


# ─── Text helpers ─────────────────────────────────────────────────────────────

class TestCleanText:
    def test_drops_page_markers_and_page_numbers(self):
        cleaned = clean_text("Line one\r\n[Page 1]\n12\n\n\n\nLine two\f")
        assert cleaned == "Line one\n\nLine two"

    def test_keeps_indentation(self):
        """Column offsets depend on leading whitespace."""
        assert clean_text("    A. SARMIENTO   ") == "    A. SARMIENTO"


class TestDates:
    @pytest.mark.parametrize(
        "value",
        ["March 31, 2025", "MARCH 31 2025", "Mar. 31, 2025", "3/31/2025", "2025-03-31"],
    )
    def test_parse_date_formats(self, value):
        assert parse_date(value) == date(2025, 3, 31)

    def test_parse_date_rejects_garbage(self):
        assert parse_date("sometime in spring") is None

    def test_full_range(self):
        assert extract_date_range("MARCH 31, 2025 - APRIL 25, 2025") == (date(2025, 3, 31), date(2025, 4, 25))

    def test_range_with_words(self):
        assert extract_date_range("Term runs 3/31/2025 through 4/25/2025") == (
            date(2025, 3, 31),
            date(2025, 4, 25),
        )

    def test_start_without_year_borrows_end_year(self):
        assert extract_date_range("March 31 - April 25, 2025") == (date(2025, 3, 31), date(2025, 4, 25))

    def test_no_range(self):
        assert extract_date_range("TERM IV\nno dates here") == (None, None)

    def test_term_number(self):
        assert extract_term_number(["SUPREME COURT", "criminal term iv"]) == "IV"
        assert extract_term_number(["TERM 3 SCHEDULE"]) == "3"
        assert extract_term_number(["CRIMINAL TERM"]) is None

    def test_term_label(self):
        assert extract_term_label(["SUPREME COURT APRIL TERM"]) == "APRIL TERM"
        assert extract_term_label(["spring term schedule"]) == "SPRING TERM"
        assert extract_term_label(["TERM IV"]) is None


# ─── Phones and personnel ─────────────────────────────────────────────────────

class TestPhones:
    def test_full_number_kept(self):
        assert expand_phone("646-386-4107") == ("646-386-4107", "")
        assert expand_phone("(212) 374-4107") == ("(212) 374-4107", "")

    def test_short_form_expanded_with_exchange(self):
        """``(6)4107`` is the 646-386 exchange with extension 4107."""
        assert expand_phone("(6)4107") == ("646-386-4107", "4107")
        assert expand_phone("4107", prefix="212-374-") == ("212-374-4107", "4107")

    def test_too_short(self):
        assert expand_phone("12") == ("", "")


class TestPersonnel:
    def test_roles_names_rooms_and_phones(self):
        personnel = extract_personnel(
            [
                "ADMINISTRATIVE JUDGE: HON. ELLEN BIBEN",
                "CHIEF CLERK: CHRISTOPHER DISANTO  ROOM 1000  (6)4107",
                "DEPUTY CHIEF CLERK - JOHN SMITH 646-386-4110",
                "FIRST DEPUTY CHIEF CLERK: JULIA KUAN",
                "CAPT. R. TORRES 1124",
                "TAP A  M. LEWIS  1180",
            ]
        )
        assert [(p.role, p.name) for p in personnel] == [
            (PersonnelRole.ADMINISTRATIVE_JUDGE, "ELLEN BIBEN"),
            (PersonnelRole.CHIEF_CLERK, "CHRISTOPHER DISANTO"),
            (PersonnelRole.DEPUTY_CLERK, "JOHN SMITH"),
            (PersonnelRole.FIRST_DEPUTY_CLERK, "JULIA KUAN"),
            (PersonnelRole.CAPTAIN, "R. TORRES"),
        ]
        assert personnel[1].room == "1000"
        assert personnel[1].phone == "646-386-4107"
        assert personnel[2].phone == "646-386-4110"
        assert personnel[4].room == "1124"

    def test_label_must_end_at_word_boundary(self):
        """``MAJORITY`` is not the major's line."""
        assert extract_personnel(["MAJORITY OPINION FILED"]) == []


# ─── Tables ───────────────────────────────────────────────────────────────────

class TestTableDocument:
    def test_looks_tabular(self):
        assert looks_tabular(TERM_SHEET)
        assert not looks_tabular("TERM IV\nTAP A - M. LEWIS - ROOM 1180")

    def test_header(self):
        data = parse_table_document(TERM_SHEET)
        assert data.source == "table"
        assert data.term.term_number == "IV"
        assert data.term.term_name == "Term IV"
        assert data.term.start_date == date(2025, 3, 31)
        assert data.term.end_date == date(2025, 4, 25)
        assert data.term.location == "100 CENTRE STREET"
        assert data.term.description.startswith("SUPREME COURT")
        assert data.warnings == []

    def test_personnel_above_table(self):
        data = parse_table_document(TERM_SHEET)
        assert [p.role for p in data.personnel] == [PersonnelRole.ADMINISTRATIVE_JUDGE, PersonnelRole.CHIEF_CLERK]

    def test_rows(self):
        data = parse_table_document(TERM_SHEET)
        assert [a.part_code for a in data.assignments] == ["TAP A", "31"]
        first = data.assignments[0]
        assert first.justice_name == "M. LEWIS"
        assert first.room_number == "1180"
        assert first.fax == "374-4107"
        assert first.phone == "646-386-4107"
        assert first.tel_extension == "4107"
        assert first.sergeant_name == "BROWN"

    def test_continuation_line_adds_clerk(self):
        """A lone name under a row is another clerk for that part."""
        data = parse_table_document(TERM_SHEET)
        assert data.assignments[0].clerk_names == ["A. WRIGHT", "A. SARMIENTO"]

    def test_row_with_empty_fax_column(self):
        """Cells are placed by header offset when a column is blank."""
        row = parse_table_document(TERM_SHEET).assignments[1]
        assert row.fax == ""
        assert row.phone == "646-386-4231"
        assert row.sergeant_name == "JONES"
        assert row.clerk_names == ["T. GREENDGE"]

    def test_tab_separated_rows(self):
        text = "\n".join(
            [
                "CRIMINAL TERM V",
                "PART\tJUSTICE\tROOM\tFAX\tTEL\tSGT\tCLERKS",
                "TAP B\tHON. A. JOHNSON\t1060A\t374-4110\t(6)4110\tGREEN\tL. KIM; P. RAO",
            ]
        )
        data = parse_table_document(text, default_location="60 CENTRE ST")
        assert data.term.term_number == "V"
        assert data.term.location == "60 CENTRE ST"
        assert "Term date range not found; enter start and end dates before saving" in data.warnings
        (row,) = data.assignments
        assert row.justice_name == "A. JOHNSON"
        assert row.room_number == "1060A"
        assert row.clerk_names == ["L. KIM", "P. RAO"]

    def test_without_table(self):
        data = parse_table_document("TERM II\nJANUARY 6, 2025 - JANUARY 31, 2025")
        assert data.assignments == []
        assert "No assignment table found in document" in data.warnings

    def test_without_term_number(self):
        assert parse_table_document("PART  JUSTICE  ROOM\n31  S. LITMAN  1130") is None
