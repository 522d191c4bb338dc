"""
Sample Term IV schedule offered for review when a document yields no text.

Only used when ``IMPORT_DEMO_FALLBACK`` is enabled.
"""

from __future__ import annotations

from datetime import date

from court_facilities.db.models import PersonnelRole
from court_facilities.ingestion.parsing import extract_date_range, extract_term_number, non_empty_lines
from court_facilities.schemas import AssignmentDraft, PersonnelDraft, TermDraft, TermImportData

SAMPLE_PERSONNEL = [
    (PersonnelRole.ADMINISTRATIVE_JUDGE, "ELLEN BIBEN", "646-386-4303", "1060"),
    (PersonnelRole.CHIEF_CLERK, "CHRISTOPHER DISANTO ESQ", "646-386-3920", "1000"),
    (PersonnelRole.FIRST_DEPUTY_CLERK, "JULIA KUAN", "646-386-3921", "1096"),
    (PersonnelRole.DEPUTY_CLERK, "STEVEN ORTIZ", "646-386-4302", "1060A"),
    (PersonnelRole.COURT_CLERK_SPECIALIST, "LISA WHITE-TINGLING", "646-386-4162", "1070B"),
    (PersonnelRole.COURT_CLERK_SPECIALIST, "LISABETTA GARCIA", "646-386-4144", "1020A"),
    (PersonnelRole.COURT_CLERK_SPECIALIST, "ANDREY BARYE-MCNULTY", "646-386-4141", "11TH FL"),
    (PersonnelRole.SENIOR_LAW_LIBRARIAN, "RICHARD TUSKE", "646-386-3715", "1121"),
    (PersonnelRole.MAJOR, "MICHAEL MCGEE", "646-386-4106", "1019"),
    (PersonnelRole.CAPTAIN, "BRENDAN MULLANEY", "646-386-4111", "939"),
]

# part, justice, room, fax, phone, sergeant, clerks
SAMPLE_ASSIGNMENTS = [
    ("TAP A", "M. LEWIS", "1180", "720-9302", "646-386-4107", "MADIGAN", ["A. WRIGHT", "A. SARMIENTO"]),
    ("TAP G", "S. LITMAN", "1130", "401-9072", "646-386-4044", "SANTORE", ["T. GREENDGE", "C. WELDON"]),
    ("AT1 21", "E. BIBEN", "1123", "", "646-386-4199", "DE TOMMASO", ["R. STEAKER", "T. CEDENO-BARRETT"]),
    ("1", "J. SVETKEY", "1600", "416-1323", "646-386-4001", "GONZALEZ", ["J. ANDERSON"]),
    ("22 W", "S. STATSINGER", "733", "295-4890", "646-386-4022", "MCBRIEN", ["L. THOMAS"]),
    ("23 W", "A. THOMPSON", "948", "", "646-386-4023", "BONNY", ["J. TAYLOR"]),
    ("32 W", "G. CARRO", "1300", "401-9261", "646-386-4032", "CASAZZA", ["R. WHITE"]),
    ("37", "M. MARTINEZ ALONSO", "1023", "", "646-386-4037", "HERNANDEZ", ["M. MURPHY"]),
    ("41 Th", "M. ROONEY", "1116", "401-9262", "646-386-4041", "KESOGLIDES", ["Z. LANCASTER"]),
    ("42 Th", "C. WESTON", "1307", "401-9263", "646-386-4042", "FINAN", ["C. GRUPISER"]),
    ("51 Th", "A. NEWBAUER", "1324", "401-9264", "646-386-4051", "", ["Y. JIMENEZ-MOLINA"]),
    ("53", "A. BADAMO", "1247", "", "646-386-4053", "CAPUTO", ["P. GELORMINO"]),
    ("54", "J. HANSHAFT", "621", "416-0474", "646-386-4054", "PERSON", ["D. RIVERA"]),
]


def sample_term_data(hint_text: str = "", location: str = "100 CENTRE STREET & 111 CENTRE STREET") -> TermImportData:
    """Return the Term IV sample, overriding term number and dates found in ``hint_text``."""
    term_number = extract_term_number(non_empty_lines(hint_text)) or "IV"
    start_date, end_date = extract_date_range(hint_text)
    if not (start_date and end_date) or end_date < start_date:
        start_date, end_date = date(2025, 3, 31), date(2025, 4, 25)

    return TermImportData(
        term=TermDraft(
            term_number=term_number,
            term_name=f"Term {term_number}",
            description="SUPREME COURT - CRIMINAL TERM",
            start_date=start_date,
            end_date=end_date,
            location=location,
        ),
        personnel=[
            PersonnelDraft(role=role, name=name, phone=phone, room=room) for role, name, phone, room in SAMPLE_PERSONNEL
        ],
        assignments=[
            AssignmentDraft(
                part_code=part,
                justice_name=justice,
                room_number=room,
                fax=fax,
                phone=phone,
                sergeant_name=sergeant,
                clerk_names=list(clerks),
            )
            for part, justice, room, fax, phone, sergeant, clerks in SAMPLE_ASSIGNMENTS
        ],
        warnings=["No text could be read from the document; showing the sample Term IV schedule for review"],
        source="sample",
    )
