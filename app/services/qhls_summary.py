# app/services/qhls_summary.py
from __future__ import annotations

from datetime import date as date_type
from typing import Collection, Dict, List

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.meeting import Meeting
from app.models.zone import Unit, Zone
from app.schemas.qhls import QhlsMissingUnits, QhlsResponse, QhlsStats, QhlsWeeklyReport
from app.services.dashboard import meeting_date_window
from app.services.week_boundaries import week_for_offset

logger = structlog.get_logger()


def summarize_qhls(responses: List[QhlsResponse]) -> QhlsStats:
    """
    Totals over the submissions that actually held a class.
    """
    held = [r for r in responses if r.has_qhls]
    total_males = sum(r.male for r in held)
    total_females = sum(r.female for r in held)
    return QhlsStats(
        total_responses=len(held),
        total_males=total_males,
        total_females=total_females,
        total_participants=total_males + total_females,
    )


def find_missing_units(
    responses: List[QhlsResponse],
    units_by_zone: Dict[str, List[str]],
) -> QhlsMissingUnits:
    """
    Units (grouped by zone name) without any submission in `responses`.

    A unit that reported "no class" still counts as having submitted.
    """
    submitted = {(r.zone, r.unit) for r in responses}

    by_zone: Dict[str, List[str]] = {}
    total_units = 0
    for zone_name, units in units_by_zone.items():
        total_units += len(units)
        missing = [unit for unit in units if (zone_name, unit) not in submitted]
        if missing:
            by_zone[zone_name] = missing

    return QhlsMissingUnits(
        by_zone=by_zone,
        total_missing=sum(len(units) for units in by_zone.values()),
        total_units=total_units,
    )


async def compute_qhls_report(
    db: AsyncSession,
    week_offset: int = 0,
    today: date_type | None = None,
    allowed_zone_ids: Collection[str] | None = None,
) -> QhlsWeeklyReport:
    """
    Weekly study-class report for the Wednesday-to-Tuesday week `week_offset`
    weeks away from `today` (0 = current week, -1 = previous week).

    Returns every unit submission carried by meetings of that week, totals
    over the units that held a class, and the units that sent nothing.
    Meetings whose date cannot be parsed are skipped (logged, counted in
    `skipped_meetings`). `allowed_zone_ids=None` covers every zone.
    """
    if today is None:
        today = date_type.today()
    week_start, week_end = week_for_offset(today, week_offset)

    stmt = (
        select(Meeting)
        .options(selectinload(Meeting.qhls))
        .where(meeting_date_window(week_start, week_end))
        .order_by(Meeting.zone_name, Meeting.meeting_date)
    )
    if allowed_zone_ids is not None:
        stmt = stmt.where(Meeting.zone_id.in_(list(allowed_zone_ids)))

    result = await db.execute(stmt)
    meetings = list(result.scalars().all())

    responses: List[QhlsResponse] = []
    skipped_meetings = 0
    for meeting in meetings:
        if meeting.meeting_date is None:
            skipped_meetings += 1
            logger.warning(
                "skipping meeting with malformed date",
                meeting_id=meeting.meeting_id,
                zone=meeting.zone_name,
                date=meeting.date,
            )
            continue
        for entry in meeting.qhls:
            if not entry.unit:
                continue
            responses.append(
                QhlsResponse(
                    zone=meeting.zone_name,
                    unit=entry.unit,
                    has_qhls=entry.has_qhls,
                    day=entry.day or "",
                    faculty=entry.faculty or "",
                    male=entry.male or 0,
                    female=entry.female or 0,
                    date=meeting.meeting_date.isoformat(),
                )
            )

    zone_stmt = select(Zone).order_by(Zone.name)
    if allowed_zone_ids is not None:
        zone_stmt = zone_stmt.where(Zone.zone_id.in_(list(allowed_zone_ids)))
    zones = list((await db.execute(zone_stmt)).scalars().all())

    units_by_zone: Dict[str, List[str]] = {}
    if zones:
        unit_stmt = (
            select(Unit)
            .where(Unit.zone_id.in_([z.zone_id for z in zones]))
            .order_by(Unit.name)
        )
        units = list((await db.execute(unit_stmt)).scalars().all())
        for zone in zones:
            units_by_zone[zone.name] = [u.name for u in units if u.zone_id == zone.zone_id]

    return QhlsWeeklyReport(
        week_start=week_start,
        week_end=week_end,
        responses=responses,
        stats=summarize_qhls(responses),
        missing=find_missing_units(responses, units_by_zone),
        skipped_meetings=skipped_meetings,
    )
