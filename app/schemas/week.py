# app/schemas/week.py
import datetime as dt

from pydantic import Field

from app.schemas.common import FrozenCamelModel


class WeekWindow(FrozenCamelModel):
    """
    Organizational week containing a given date: Wednesday through Tuesday.
    """

    date: dt.date = Field(..., description="Date the window was computed for.", examples=["2024-01-08"])
    week_start: dt.date = Field(..., description="Wednesday starting the week.", examples=["2024-01-03"])
    week_end: dt.date = Field(..., description="Tuesday ending the week.", examples=["2024-01-09"])
    label: str = Field(..., description="Short week label (MonDD of the Wednesday).", examples=["Jan03"])
