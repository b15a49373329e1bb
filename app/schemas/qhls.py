# app/schemas/qhls.py
from datetime import date

from pydantic import Field

from app.schemas.common import CamelModel


class QhlsResponse(CamelModel):
    """
    One unit's weekly study-class submission as reported in its zone meeting.
    """

    zone: str = Field(..., examples=["Kozhikode North"])
    unit: str = Field(..., examples=["Nadakkavu"])
    has_qhls: bool = Field(True, description="False when the unit reported no class this week.")
    day: str = ""
    faculty: str = ""
    male: int = 0
    female: int = 0
    date: str = Field(..., description="Date of the meeting that carried the submission.")


class QhlsStats(CamelModel):
    """
    Totals over the submissions where a class actually took place.
    """

    total_responses: int = 0
    total_males: int = 0
    total_females: int = 0
    total_participants: int = 0


class QhlsMissingUnits(CamelModel):
    by_zone: dict[str, list[str]] = Field(
        default_factory=dict,
        description="Zone name -> units that sent no submission this week.",
    )
    total_missing: int = 0
    total_units: int = 0


class QhlsWeeklyReport(CamelModel):
    week_start: date
    week_end: date
    responses: list[QhlsResponse] = Field(default_factory=list)
    stats: QhlsStats = Field(default_factory=QhlsStats)
    missing: QhlsMissingUnits = Field(default_factory=QhlsMissingUnits)
    skipped_meetings: int = Field(
        0,
        description="Meetings ignored because their date could not be parsed.",
    )
