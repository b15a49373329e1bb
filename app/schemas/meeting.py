# app/schemas/meeting.py
from __future__ import annotations

from pydantic import Field, field_validator

from app.schemas.attendance import AttendanceStatus
from app.schemas.common import CamelModel


# --------------------------------------------------------------------------
# Bulk import payload (POST /internal/import)
# --------------------------------------------------------------------------

class ZoneImport(CamelModel):
    zone_id: str = Field(..., min_length=1, examples=["Z001"])
    name: str = Field(..., min_length=1, examples=["Kozhikode North"])
    district_id: str = Field("D001", examples=["D001"])


class UnitImport(CamelModel):
    unit_id: str = Field(..., min_length=1, examples=["U001"])
    name: str = Field(..., min_length=1, examples=["Nadakkavu"])
    zone_id: str = Field(..., min_length=1, examples=["Z001"])


class AttendanceImport(CamelModel):
    """
    One attendance line. `name` is the only identity a person has.
    """

    name: str = Field(..., min_length=1, examples=["Asha"])
    role: str = Field("", examples=["Secretary"])
    status: AttendanceStatus = Field(AttendanceStatus.PRESENT, examples=["leave"])
    reason: str = Field("", description="Only meaningful when status is 'leave'.")


class QhlsImport(CamelModel):
    unit: str = ""
    day: str = ""
    faculty: str = ""
    male: int = Field(0, ge=0)
    female: int = Field(0, ge=0)
    has_qhls: bool = True

    @field_validator("male", "female", mode="before")
    @classmethod
    def _blank_count_is_zero(cls, value):
        # Counts arrive as free text from older exports
        if value in (None, ""):
            return 0
        return value


class MeetingImport(CamelModel):
    """
    A meeting document as exported from the previous store.

    `date` is stored verbatim; reports skip meetings whose date cannot be parsed.
    """

    meeting_id: str = Field(..., min_length=1, examples=["Z001-2024-01-10"])
    zone_id: str = Field(..., min_length=1, examples=["Z001"])
    zone_name: str = Field(..., min_length=1, examples=["Kozhikode North"])
    date: str = Field(..., min_length=1, examples=["2024-01-10"])
    start_time: str = Field("", examples=["20:00"])
    end_time: str = Field("", examples=["21:30"])
    agendas: list[str] = Field(default_factory=list)
    minutes: list[str] = Field(default_factory=list)
    attendance: list[AttendanceImport] = Field(default_factory=list)
    qhls: list[QhlsImport] = Field(default_factory=list)


class ImportRequest(CamelModel):
    zones: list[ZoneImport] = Field(default_factory=list)
    units: list[UnitImport] = Field(default_factory=list)
    meetings: list[MeetingImport] = Field(default_factory=list)


class EntityImportCount(CamelModel):
    created: int = 0
    updated: int = 0


class ImportSummary(CamelModel):
    """
    Counts of upserted entities returned by /internal/import.
    """

    zones: EntityImportCount = Field(default_factory=EntityImportCount)
    units: EntityImportCount = Field(default_factory=EntityImportCount)
    meetings: EntityImportCount = Field(default_factory=EntityImportCount)


# --------------------------------------------------------------------------
# Meeting report (GET /meetings/{meeting_id}/report)
# --------------------------------------------------------------------------

class MeetingReport(CamelModel):
    """
    Text blocks of a meeting report, ready to paste into a message.
    """

    meeting_id: str
    zone_name: str
    date: str
    attendees: str = Field(..., description="Present attendees, one per line.")
    leave_attendees: str = Field(
        ...,
        description="Attendees on leave, one per line, with '(reason)' when given.",
    )
    agenda: str = Field(..., description="Numbered agenda items.")
    minutes: str = Field(..., description="Numbered decisions/minutes.")
    qhls_status: str = Field(
        ...,
        description="Study-class table: heading row plus one row per unit; empty when none.",
    )
