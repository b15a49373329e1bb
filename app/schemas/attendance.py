# app/schemas/attendance.py
from datetime import date
from enum import Enum

from pydantic import BaseModel, Field

from app.schemas.common import FrozenCamelModel


class AttendanceStatus(str, Enum):
    """
    Status recorded for one person in one meeting.
    """

    PRESENT = "present"
    LEAVE = "leave"
    ABSENT = "absent"


class WeekStatusCode(str, Enum):
    """
    Single-letter code shown in the weekly attendance grid.
    """

    PRESENT = "P"
    LEAVE = "L"
    ABSENT = "A"
    NO_RECORD = "-"


# --------------------------------------------------------------------------
# Aggregator input
# --------------------------------------------------------------------------

class AttendanceEntry(BaseModel):
    """
    One attendance line as read from storage.

    `status` is kept as a plain string so that unexpected values coming from
    older imports reach the aggregator, which decides how to count them.
    """

    name: str | None = None
    role: str = ""
    status: str = AttendanceStatus.PRESENT.value
    reason: str = ""


class MeetingAttendance(BaseModel):
    """
    Minimal view of a meeting needed to aggregate attendance.
    """

    meeting_id: str
    zone_name: str
    date: str = Field(..., description="Meeting date as stored (normally YYYY-MM-DD).")
    records: list[AttendanceEntry] = Field(default_factory=list)


# --------------------------------------------------------------------------
# Aggregator output
# --------------------------------------------------------------------------

class PersonStat(FrozenCamelModel):
    """
    Attendance totals and leave streaks for one person over the reporting window.
    """

    name: str = Field(..., examples=["Asha"])
    zone: str = Field(
        ...,
        description="Zone of the first meeting in which the person was listed.",
        examples=["Kozhikode North"],
    )
    role: str = Field("", description="Role from the person's first attendance line.")
    total: int = Field(..., description="Meetings in which the person was listed.", examples=[4])
    present: int = Field(..., examples=[1])
    leave: int = Field(..., examples=[3])
    absent: int = Field(..., examples=[0])
    current_consecutive_leaves: int = Field(
        ...,
        description="Leave streak still running at the end of the window.",
        examples=[3],
    )
    max_consecutive_leaves: int = Field(
        ...,
        description="Longest leave streak seen in the window.",
        examples=[3],
    )
    last_attended_date: date | None = Field(
        None,
        description="Date of the latest meeting the person attended.",
        examples=["2024-01-03"],
    )
    percentage: float = Field(
        ...,
        description="present / total * 100, rounded to one decimal; 0 when total is 0.",
        examples=[25.0],
    )


class AtRiskPerson(FrozenCamelModel):
    """
    Person whose running leave streak reached the at-risk threshold.
    """

    name: str
    zone: str
    consecutive_leaves: int


class LeaveNotice(FrozenCamelModel):
    """
    A single leave record, used for the "latest leaves" panel.
    """

    name: str
    zone: str
    date: date
    reason: str = ""


class WeeklyAttendee(FrozenCamelModel):
    """
    One row of the weekly attendance grid.
    """

    name: str
    role: str = ""
    weekly_status: dict[str, WeekStatusCode] = Field(
        ...,
        description="Week start (YYYY-MM-DD) -> P / L / A / '-'.",
    )
    present_count: int
    total_weeks: int = Field(
        ...,
        description="Weeks in which the person has a recorded status.",
    )
    percentage: float


class WeekGrid(FrozenCamelModel):
    """
    Week-bucketed attendance grid (one meeting per zone per week).
    """

    weeks: list[str] = Field(
        default_factory=list,
        description="Week start dates (Wednesdays, YYYY-MM-DD), ascending.",
    )
    week_labels: dict[str, str] = Field(
        default_factory=dict,
        description="Week start -> short label such as 'Jan10'.",
    )
    attendees: list[WeeklyAttendee] = Field(default_factory=list)


class AttendanceAggregate(FrozenCamelModel):
    """
    Result of folding a set of meetings into per-person attendance statistics.
    """

    total_meetings: int = Field(..., description="Meetings included in the aggregation.")
    zone_meeting_counts: dict[str, int] = Field(
        default_factory=dict,
        description="Zone name -> number of meetings included.",
    )
    person_stats: list[PersonStat] = Field(default_factory=list)
    at_risk_list: list[AtRiskPerson] = Field(default_factory=list)
    week_grid: WeekGrid = Field(default_factory=WeekGrid)
    latest_leaves: list[LeaveNotice] = Field(default_factory=list)
    skipped_meetings: int = Field(
        0,
        description="Meetings ignored because their date could not be parsed.",
    )
    duplicate_week_meetings: int = Field(
        0,
        description=(
            "Meetings left out of the week grid because an earlier meeting of the "
            "same zone already occupies that week."
        ),
    )


class AttendanceDashboard(AttendanceAggregate):
    """
    Dashboard payload: the attendance aggregate plus the request scope and
    zone coverage.
    """

    start_date: date | None = None
    end_date: date | None = None
    zone_id: str | None = Field(
        None,
        description="Zone the report was restricted to, or null for all accessible zones.",
    )
    zones_without_meetings: list[str] = Field(
        default_factory=list,
        description="Names of zones in scope that held no meeting in the window.",
    )
