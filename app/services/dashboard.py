# app/services/dashboard.py
from __future__ import annotations

from datetime import date as date_type
from typing import Collection, List

from sqlalchemy import and_, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.config import get_settings
from app.models.meeting import Meeting
from app.models.zone import Zone
from app.schemas.attendance import AttendanceDashboard, AttendanceEntry, MeetingAttendance
from app.services.attendance_aggregator import aggregate_attendance


def to_meeting_attendance(meeting: Meeting) -> MeetingAttendance:
    """
    Convert a stored Meeting (with its attendance loaded) into aggregator input.
    """
    return MeetingAttendance(
        meeting_id=meeting.meeting_id,
        zone_name=meeting.zone_name,
        date=meeting.date,
        records=[
            AttendanceEntry(
                name=record.name,
                role=record.role or "",
                status=record.status,
                reason=record.reason or "",
            )
            for record in meeting.attendance
        ],
    )


async def fetch_meetings(
    db: AsyncSession,
    start_date: date_type | None,
    end_date: date_type | None,
    zone_ids: Collection[str] | None = None,
) -> List[Meeting]:
    """
    Load meetings (with attendance) whose parsed date falls in the window.

    Meetings whose date text could not be parsed are always returned so the
    aggregator can skip and count them. `zone_ids=None` means every zone.
    """
    stmt = select(Meeting).options(selectinload(Meeting.attendance))

    if zone_ids is not None:
        stmt = stmt.where(Meeting.zone_id.in_(list(zone_ids)))
    window = meeting_date_window(start_date, end_date)
    if window is not None:
        stmt = stmt.where(window)

    result = await db.execute(stmt.order_by(Meeting.meeting_date, Meeting.id))
    return list(result.scalars().all())


def meeting_date_window(start_date: date_type | None, end_date: date_type | None):
    """
    WHERE clause for meetings dated in [start_date, end_date] or undated.

    Returns None when neither bound is given.
    """
    bounds = []
    if start_date is not None:
        bounds.append(Meeting.meeting_date >= start_date)
    if end_date is not None:
        bounds.append(Meeting.meeting_date <= end_date)
    if not bounds:
        return None
    return or_(and_(*bounds), Meeting.meeting_date.is_(None))


async def compute_attendance_dashboard(
    db: AsyncSession,
    start_date: date_type | None,
    end_date: date_type | None,
    zone_id: str | None = None,
    allowed_zone_ids: Collection[str] | None = None,
) -> AttendanceDashboard:
    """
    Compute the attendance dashboard for a date window and zone scope.

    Steps
    -----
    1) Resolve the zone scope: a single `zone_id`, or every zone the caller
       may see (`allowed_zone_ids`, None = all zones).
    2) Fetch meetings of those zones in [start_date, end_date].
    3) Run the attendance aggregator (totals, leave streaks, at-risk list,
       weekly grid).
    4) List zones in scope that held no meeting in the window.

    Raises
    ------
    ValueError
        If both dates are given and end_date < start_date.
    """
    if start_date is not None and end_date is not None and end_date < start_date:
        raise ValueError("end_date must be greater than or equal to start_date")

    settings = get_settings()

    if zone_id is not None:
        zone_scope: Collection[str] | None = [zone_id]
    else:
        zone_scope = allowed_zone_ids

    meetings = await fetch_meetings(db, start_date, end_date, zone_scope)

    aggregate = aggregate_attendance(
        (to_meeting_attendance(m) for m in meetings),
        start_date=start_date,
        end_date=end_date,
        at_risk_threshold=settings.AT_RISK_CONSECUTIVE_LEAVES,
        latest_leaves_limit=settings.LATEST_LEAVES_LIMIT,
    )

    zone_stmt = select(Zone).order_by(Zone.name)
    if zone_scope is not None:
        zone_stmt = zone_stmt.where(Zone.zone_id.in_(list(zone_scope)))
    zone_result = await db.execute(zone_stmt)
    zones_without_meetings = [
        zone.name
        for zone in zone_result.scalars().all()
        if zone.name not in aggregate.zone_meeting_counts
    ]

    return AttendanceDashboard(
        **aggregate.model_dump(),
        start_date=start_date,
        end_date=end_date,
        zone_id=zone_id,
        zones_without_meetings=zones_without_meetings,
    )
