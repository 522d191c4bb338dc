"""
Pydantic models for form validation and the term import review bundle.
"""

from __future__ import annotations

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from court_facilities.db.models import PersonnelRole, RoomStatus, RoomType

ROOM_NUMBER_PATTERN = r"^[A-Za-z0-9\s\-]+$"


def check_date_range(start: Optional[date], end: Optional[date]) -> None:
    if start and end and end < start:
        raise ValueError("End date must be after start date")


def _reject_null(value, info):
    # Partial updates may omit a column but never clear a NOT NULL one.
    if value is None:
        raise ValueError(f"{info.field_name} cannot be null")
    return value


def _split_names(value):
    # The assignment dialog submits clerks as one comma separated field.
    if isinstance(value, str):
        return [name.strip() for name in value.split(",") if name.strip()]
    return value


# --- Terms ---------------------------------------------------------------


class TermCreate(BaseModel):
    term_number: str = Field(..., min_length=1)
    term_name: str = Field(..., min_length=2)
    description: str = ""
    start_date: date
    end_date: date
    location: str = Field(..., min_length=1)
    metadata: dict = Field(default_factory=dict)

    @model_validator(mode="after")
    def end_not_before_start(self) -> "TermCreate":
        check_date_range(self.start_date, self.end_date)
        return self


class TermUpdate(BaseModel):
    term_number: Optional[str] = Field(None, min_length=1)
    term_name: Optional[str] = Field(None, min_length=2)
    description: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    location: Optional[str] = Field(None, min_length=1)
    metadata: Optional[dict] = None

    @field_validator(
        "term_number", "term_name", "description", "start_date", "end_date", "location", "metadata", mode="before"
    )
    @classmethod
    def not_null(cls, value, info):
        return _reject_null(value, info)

    @model_validator(mode="after")
    def end_not_before_start(self) -> "TermUpdate":
        check_date_range(self.start_date, self.end_date)
        return self


class AssignmentCreate(BaseModel):
    term_id: Optional[str] = None
    justice_name: str = Field(..., min_length=1)
    part_id: Optional[str] = None
    part_code: Optional[str] = None
    room_id: Optional[str] = None
    phone: Optional[str] = None
    fax: Optional[str] = None
    tel_extension: Optional[str] = None
    sergeant_name: Optional[str] = None
    clerk_names: list[str] = Field(default_factory=list)

    @field_validator("clerk_names", mode="before")
    @classmethod
    def split_clerk_names(cls, value):
        return _split_names(value)

    @model_validator(mode="after")
    def part_required(self) -> "AssignmentCreate":
        if not self.part_id and not self.part_code:
            raise ValueError("Court part is required")
        return self


class AssignmentUpdate(BaseModel):
    justice_name: Optional[str] = Field(None, min_length=1)
    part_id: Optional[str] = None
    room_id: Optional[str] = None
    phone: Optional[str] = None
    fax: Optional[str] = None
    tel_extension: Optional[str] = None
    sergeant_name: Optional[str] = None
    clerk_names: Optional[list[str]] = None

    @field_validator("justice_name", "clerk_names", mode="before")
    @classmethod
    def not_null(cls, value, info):
        return _reject_null(value, info)

    @field_validator("clerk_names", mode="before")
    @classmethod
    def split_clerk_names(cls, value):
        return _split_names(value)


class PersonnelCreate(BaseModel):
    term_id: Optional[str] = None
    role: PersonnelRole
    name: str = Field(..., min_length=1)
    phone: Optional[str] = None
    extension: Optional[str] = None
    room: Optional[str] = None
    floor: Optional[str] = None


# --- Rooms ---------------------------------------------------------------


class CourtroomPhotos(BaseModel):
    judge_view: Optional[str] = None
    audience_view: Optional[str] = None


class RoomCreate(BaseModel):
    floor_id: str
    room_number: str = Field(..., min_length=1, pattern=ROOM_NUMBER_PATTERN)
    name: Optional[str] = None
    room_type: RoomType = RoomType.OFFICE
    status: RoomStatus = RoomStatus.AVAILABLE
    description: Optional[str] = None
    capacity: Optional[int] = Field(None, gt=0, le=1000)
    current_occupancy: int = Field(0, ge=0)
    phone_number: Optional[str] = None
    is_storage: bool = False
    storage_type: Optional[str] = None
    storage_capacity: Optional[float] = Field(None, ge=0)
    storage_notes: Optional[str] = None
    courtroom_photos: Optional[CourtroomPhotos] = None

    @model_validator(mode="after")
    def storage_fields_need_storage_flag(self) -> "RoomCreate":
        if not self.is_storage and (self.storage_type or self.storage_capacity):
            raise ValueError("Storage details require the room to be marked as storage")
        return self


class RoomUpdate(BaseModel):
    floor_id: Optional[str] = None
    room_number: Optional[str] = Field(None, min_length=1, pattern=ROOM_NUMBER_PATTERN)
    name: Optional[str] = None
    room_type: Optional[RoomType] = None
    description: Optional[str] = None
    capacity: Optional[int] = Field(None, gt=0, le=1000)
    current_occupancy: Optional[int] = Field(None, ge=0)
    phone_number: Optional[str] = None
    is_storage: Optional[bool] = None
    storage_type: Optional[str] = None
    storage_capacity: Optional[float] = Field(None, ge=0)
    storage_notes: Optional[str] = None

    @field_validator("floor_id", "room_number", "room_type", "current_occupancy", "is_storage", mode="before")
    @classmethod
    def not_null(cls, value, info):
        return _reject_null(value, info)


class RoomStatusChange(BaseModel):
    status: RoomStatus


class RoomFilters(BaseModel):
    building_id: Optional[str] = None
    floor_id: Optional[str] = None
    room_type: Optional[RoomType] = None
    status: Optional[RoomStatus] = None
    search: Optional[str] = None


# --- Term import review bundle ---------------------------------------------


class TermDraft(BaseModel):
    term_number: str = ""
    term_name: str = ""
    description: str = ""
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    location: str = ""


class AssignmentDraft(BaseModel):
    part_code: str = ""
    justice_name: str = ""
    room_number: str = ""
    room_id: Optional[str] = None
    phone: str = ""
    fax: str = ""
    tel_extension: str = ""
    sergeant_name: str = ""
    clerk_names: list[str] = Field(default_factory=list)


class PersonnelDraft(BaseModel):
    role: PersonnelRole
    name: str
    phone: str = ""
    room: str = ""


class TermImportData(BaseModel):
    """Parsed term document awaiting human review before it is committed."""

    term: TermDraft
    assignments: list[AssignmentDraft] = Field(default_factory=list)
    personnel: list[PersonnelDraft] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    source: str = "manual"


class ManualImportRequest(BaseModel):
    text: str


class ReimportRequest(BaseModel):
    url: str = Field(..., description="URL of the term sheet PDF.")
