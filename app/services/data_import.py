# app/services/data_import.py
from __future__ import annotations

from typing import Dict

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.meeting import AttendanceRecord, Meeting, QhlsEntry
from app.models.zone import Unit, Zone
from app.schemas.meeting import (
    EntityImportCount,
    ImportRequest,
    ImportSummary,
    MeetingImport,
    UnitImport,
    ZoneImport,
)

logger = structlog.get_logger()


async def _upsert_zones(db: AsyncSession, zones: list[ZoneImport]) -> EntityImportCount:
    count = EntityImportCount()
    if not zones:
        return count

    result = await db.execute(select(Zone).where(Zone.zone_id.in_([z.zone_id for z in zones])))
    existing: Dict[str, Zone] = {zone.zone_id: zone for zone in result.scalars().all()}

    for payload in zones:
        zone = existing.get(payload.zone_id)
        if zone is None:
            zone = Zone(zone_id=payload.zone_id)
            db.add(zone)
            existing[payload.zone_id] = zone
            count.created += 1
        else:
            count.updated += 1
        zone.name = payload.name
        zone.district_id = payload.district_id
    return count


async def _upsert_units(db: AsyncSession, units: list[UnitImport]) -> EntityImportCount:
    count = EntityImportCount()
    if not units:
        return count

    result = await db.execute(select(Unit).where(Unit.unit_id.in_([u.unit_id for u in units])))
    existing: Dict[str, Unit] = {unit.unit_id: unit for unit in result.scalars().all()}

    for payload in units:
        unit = existing.get(payload.unit_id)
        if unit is None:
            unit = Unit(unit_id=payload.unit_id)
            db.add(unit)
            existing[payload.unit_id] = unit
            count.created += 1
        else:
            count.updated += 1
        unit.name = payload.name
        unit.zone_id = payload.zone_id
    return count


async def _upsert_meetings(db: AsyncSession, meetings: list[MeetingImport]) -> EntityImportCount:
    count = EntityImportCount()
    if not meetings:
        return count

    stmt = (
        select(Meeting)
        .options(selectinload(Meeting.attendance), selectinload(Meeting.qhls))
        .where(Meeting.meeting_id.in_([m.meeting_id for m in meetings]))
    )
    result = await db.execute(stmt)
    existing: Dict[str, Meeting] = {m.meeting_id: m for m in result.scalars().all()}

    for payload in meetings:
        meeting = existing.get(payload.meeting_id)
        if meeting is None:
            meeting = Meeting(meeting_id=payload.meeting_id, attendance=[], qhls=[])
            db.add(meeting)
            existing[payload.meeting_id] = meeting
            count.created += 1
        else:
            count.updated += 1

        meeting.zone_id = payload.zone_id
        meeting.zone_name = payload.zone_name
        meeting.date = payload.date
        meeting.start_time = payload.start_time
        meeting.end_time = payload.end_time
        meeting.agendas = list(payload.agendas)
        meeting.minutes = list(payload.minutes)

        # Registers are replaced wholesale; positions keep the submitted order
        meeting.attendance = [
            AttendanceRecord(
                position=position,
                name=record.name,
                role=record.role,
                status=record.status.value,
                reason=record.reason,
            )
            for position, record in enumerate(payload.attendance)
        ]
        meeting.qhls = [
            QhlsEntry(
                position=position,
                unit=entry.unit,
                day=entry.day,
                faculty=entry.faculty,
                male=entry.male,
                female=entry.female,
                has_qhls=entry.has_qhls,
            )
            for position, entry in enumerate(payload.qhls)
        ]
    return count


async def import_data(db: AsyncSession, payload: ImportRequest) -> ImportSummary:
    """
    Upsert zones, units and meetings exported from the previous store.

    Zones, units and meetings are matched by their natural keys (`zone_id`,
    `unit_id`, `meeting_id`), so importing the same export twice leaves the
    database unchanged. A re-imported meeting has its attendance register and
    study-class entries replaced by the payload's.

    Everything is committed in a single transaction.
    """
    summary = ImportSummary(
        zones=await _upsert_zones(db, payload.zones),
        units=await _upsert_units(db, payload.units),
        meetings=await _upsert_meetings(db, payload.meetings),
    )
    await db.commit()

    logger.info(
        "import finished",
        zones_created=summary.zones.created,
        zones_updated=summary.zones.updated,
        units_created=summary.units.created,
        units_updated=summary.units.updated,
        meetings_created=summary.meetings.created,
        meetings_updated=summary.meetings.updated,
    )
    return summary
