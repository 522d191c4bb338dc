"""
Dataclasses and enumerations mirroring database tables.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Optional


class RoomStatus(str, Enum):
    AVAILABLE = "available"
    OCCUPIED = "occupied"
    MAINTENANCE = "maintenance"
    RESERVED = "reserved"
    CLOSED = "closed"
    UNDER_CONSTRUCTION = "under_construction"


class RoomType(str, Enum):
    OFFICE = "office"
    COURTROOM = "courtroom"
    CONFERENCE = "conference"
    STORAGE = "storage"
    RESTROOM = "restroom"
    COMMON = "common"
    MECHANICAL = "mechanical"
    CHAMBER = "chamber"
    JURY_ROOM = "jury_room"


class PersonnelRole(str, Enum):
    ADMINISTRATIVE_JUDGE = "administrative_judge"
    CHIEF_CLERK = "chief_clerk"
    FIRST_DEPUTY_CLERK = "first_deputy_clerk"
    DEPUTY_CLERK = "deputy_clerk"
    COURT_CLERK_SPECIALIST = "court_clerk_specialist"
    SENIOR_LAW_LIBRARIAN = "senior_law_librarian"
    MAJOR = "major"
    CAPTAIN = "captain"
    CLERK = "clerk"
    SERGEANT = "sergeant"
    OTHER = "other"


@dataclass(slots=True)
class BuildingRecord:
    id: str
    name: str
    address: Optional[str]
    total_floors: Optional[int]
    created_at: datetime


@dataclass(slots=True)
class FloorRecord:
    id: str
    building_id: str
    floor_number: int
    name: Optional[str]
    created_at: datetime


@dataclass(slots=True)
class RoomRecord:
    id: str
    floor_id: str
    room_number: str
    name: Optional[str]
    room_type: str
    status: str
    description: Optional[str]
    capacity: Optional[int]
    current_occupancy: int
    phone_number: Optional[str]
    is_storage: bool
    storage_type: Optional[str]
    storage_capacity: Optional[float]
    storage_notes: Optional[str]
    courtroom_photos: Optional[dict]
    created_at: datetime
    updated_at: Optional[datetime] = None
    deleted_at: Optional[datetime] = None
    building_id: Optional[str] = None
    building_name: Optional[str] = None
    floor_name: Optional[str] = None
    floor_number: Optional[int] = None


@dataclass(slots=True)
class CourtTermRecord:
    id: str
    term_number: str
    term_name: str
    description: str
    start_date: date
    end_date: date
    location: str
    metadata: dict = field(default_factory=dict)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(slots=True)
class TermPersonnelRecord:
    id: str
    term_id: str
    role: str
    name: str
    phone: Optional[str]
    extension: Optional[str]
    room: Optional[str]
    floor: Optional[str]
