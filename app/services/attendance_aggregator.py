# app/services/attendance_aggregator.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import date as date_type
from typing import Iterable

import structlog

from app.schemas.attendance import (
    AtRiskPerson,
    AttendanceAggregate,
    AttendanceStatus,
    LeaveNotice,
    MeetingAttendance,
    PersonStat,
    WeekGrid,
    WeekStatusCode,
    WeeklyAttendee,
)
from app.services.week_boundaries import (
    InvalidDateError,
    parse_calendar_date,
    week_label,
    week_start,
)

logger = structlog.get_logger()

DEFAULT_AT_RISK_THRESHOLD = 3
DEFAULT_LATEST_LEAVES_LIMIT = 10

_STATUS_CODES = {
    AttendanceStatus.PRESENT: WeekStatusCode.PRESENT,
    AttendanceStatus.LEAVE: WeekStatusCode.LEAVE,
    AttendanceStatus.ABSENT: WeekStatusCode.ABSENT,
}


@dataclass
class _PersonTally:
    """
    Running per-person state while folding meetings in date order.
    """

    name: str
    zone: str
    role: str
    total: int = 0
    present: int = 0
    leave: int = 0
    absent: int = 0
    current_consecutive_leaves: int = 0
    max_consecutive_leaves: int = 0
    last_attended_date: date_type | None = None

    def record(self, status: AttendanceStatus, meeting_date: date_type) -> None:
        self.total += 1
        if status is AttendanceStatus.PRESENT:
            self.present += 1
            self.current_consecutive_leaves = 0
            self.last_attended_date = meeting_date
        elif status is AttendanceStatus.LEAVE:
            self.leave += 1
            self.current_consecutive_leaves += 1
            if self.current_consecutive_leaves > self.max_consecutive_leaves:
                self.max_consecutive_leaves = self.current_consecutive_leaves
        else:
            # Absences count toward the total but do not touch the leave streak
            self.absent += 1

    def to_stat(self) -> PersonStat:
        return PersonStat(
            name=self.name,
            zone=self.zone,
            role=self.role,
            total=self.total,
            present=self.present,
            leave=self.leave,
            absent=self.absent,
            current_consecutive_leaves=self.current_consecutive_leaves,
            max_consecutive_leaves=self.max_consecutive_leaves,
            last_attended_date=self.last_attended_date,
            percentage=attendance_percentage(self.present, self.total),
        )


def attendance_percentage(present: int, total: int) -> float:
    """
    present / total * 100 rounded to one decimal place, 0.0 when total is 0.
    """
    if total <= 0:
        return 0.0
    return round((present / float(total)) * 100.0, 1)


def _normalize_status(raw: str | AttendanceStatus | None, meeting_id: str, name: str) -> AttendanceStatus:
    if isinstance(raw, AttendanceStatus):
        return raw
    try:
        return AttendanceStatus((raw or "").strip().lower())
    except ValueError:
        # Unknown status; count it as absent so the meeting still shows up in the total.
        logger.warning(
            "unknown attendance status counted as absent",
            meeting_id=meeting_id,
            name=name,
            status=raw,
        )
        return AttendanceStatus.ABSENT


_Entry = tuple[str, str, AttendanceStatus, str]


@dataclass
class _GridColumn:
    meeting_id: str
    meeting_date: date_type
    entries: list[_Entry]


def _named_entries(meeting: MeetingAttendance) -> list[_Entry]:
    """
    (name, role, status, reason) for every record that carries a name.
    """
    entries: list[_Entry] = []
    for record in meeting.records:
        name = record.name
        if not name or not name.strip():
            continue
        status = _normalize_status(record.status, meeting.meeting_id, name)
        entries.append((name, record.role or "", status, record.reason or ""))
    return entries


def _in_range(
    day: date_type,
    start_date: date_type | None,
    end_date: date_type | None,
) -> bool:
    if start_date is not None and day < start_date:
        return False
    if end_date is not None and day > end_date:
        return False
    return True


def aggregate_attendance(
    meetings: Iterable[MeetingAttendance],
    *,
    start_date: date_type | None = None,
    end_date: date_type | None = None,
    zone_name: str | None = None,
    at_risk_threshold: int = DEFAULT_AT_RISK_THRESHOLD,
    latest_leaves_limit: int = DEFAULT_LATEST_LEAVES_LIMIT,
) -> AttendanceAggregate:
    """
    Fold a set of meetings into per-person attendance statistics.

    Steps
    -----
    1) Parse every meeting date; meetings with a malformed date are skipped
       (logged, counted in `skipped_meetings`). Meetings outside
       [start_date, end_date] or outside `zone_name` are dropped. A missing
       bound means no limit on that side.
    2) Sort the remaining meetings by date (stable, so same-day meetings keep
       their input order).
    3) Single left-to-right pass over the attendance records:
        - present => reset the leave streak, remember the date
        - leave   => extend the leave streak, track the longest one
        - absent  => counted in the total only
       Records without a name are ignored.
    4) Build the week grid from the first meeting of every (zone, week);
       later meetings of the same zone and week are left out of the grid
       (but still counted in the per-person statistics).

    People are matched across meetings by exact name.

    Returns
    -------
    AttendanceAggregate
        Immutable result; nothing is shared between calls.
    """
    dated: list[tuple[date_type, MeetingAttendance]] = []
    skipped_meetings = 0

    for meeting in meetings:
        if zone_name is not None and meeting.zone_name != zone_name:
            continue
        try:
            meeting_date = parse_calendar_date(meeting.date)
        except InvalidDateError:
            skipped_meetings += 1
            logger.warning(
                "skipping meeting with malformed date",
                meeting_id=meeting.meeting_id,
                zone=meeting.zone_name,
                date=meeting.date,
            )
            continue
        if _in_range(meeting_date, start_date, end_date):
            dated.append((meeting_date, meeting))

    dated.sort(key=lambda item: item[0])

    tallies: dict[str, _PersonTally] = {}
    zone_meeting_counts: dict[str, int] = {}
    leaves: list[LeaveNotice] = []

    # (zone, week start) -> the meeting that fills that grid column
    grid_meetings: dict[tuple[str, date_type], _GridColumn] = {}
    duplicate_week_meetings = 0

    for meeting_date, meeting in dated:
        zone_meeting_counts[meeting.zone_name] = zone_meeting_counts.get(meeting.zone_name, 0) + 1

        entries = _named_entries(meeting)

        slot = (meeting.zone_name, week_start(meeting_date))
        if slot in grid_meetings:
            duplicate_week_meetings += 1
            kept = grid_meetings[slot]
            logger.warning(
                "meeting left out of week grid",
                meeting_id=meeting.meeting_id,
                zone=meeting.zone_name,
                date=meeting_date.isoformat(),
                kept_meeting_id=kept.meeting_id,
                kept_date=kept.meeting_date.isoformat(),
            )
        else:
            grid_meetings[slot] = _GridColumn(
                meeting_id=meeting.meeting_id,
                meeting_date=meeting_date,
                entries=entries,
            )

        for name, role, status, reason in entries:
            tally = tallies.get(name)
            if tally is None:
                tally = _PersonTally(name=name, zone=meeting.zone_name, role=role)
                tallies[name] = tally
            tally.record(status, meeting_date)

            if status is AttendanceStatus.LEAVE:
                leaves.append(
                    LeaveNotice(
                        name=name,
                        zone=meeting.zone_name,
                        date=meeting_date,
                        reason=reason,
                    )
                )

    person_stats = [tally.to_stat() for tally in tallies.values()]

    at_risk_list = sorted(
        (
            AtRiskPerson(
                name=stat.name,
                zone=stat.zone,
                consecutive_leaves=stat.current_consecutive_leaves,
            )
            for stat in person_stats
            if stat.current_consecutive_leaves >= at_risk_threshold
        ),
        key=lambda person: (-person.consecutive_leaves, person.name),
    )

    latest_leaves = sorted(leaves, key=lambda notice: notice.date, reverse=True)
    latest_leaves = latest_leaves[: max(latest_leaves_limit, 0)]

    return AttendanceAggregate(
        total_meetings=len(dated),
        zone_meeting_counts=zone_meeting_counts,
        person_stats=person_stats,
        at_risk_list=at_risk_list,
        week_grid=build_week_grid(list(grid_meetings.values())),
        latest_leaves=latest_leaves,
        skipped_meetings=skipped_meetings,
        duplicate_week_meetings=duplicate_week_meetings,
    )


def build_week_grid(columns: list[_GridColumn]) -> WeekGrid:
    """
    Build the weekly P / L / A grid from one meeting per zone per week.

    `columns` must already be deduplicated and in date order. Attendees
    appear in order of their first record. A person without a record in a
    given week gets '-' for that week.
    """
    week_starts = sorted({week_start(column.meeting_date) for column in columns})
    weeks = [day.isoformat() for day in week_starts]
    week_labels = {day.isoformat(): week_label(day) for day in week_starts}

    rows: dict[str, dict[str, WeekStatusCode]] = {}
    roles: dict[str, str] = {}

    for column in columns:
        week_key = week_start(column.meeting_date).isoformat()
        for name, role, status, _reason in column.entries:
            row = rows.setdefault(name, {})
            roles.setdefault(name, role)
            if week_key in row:
                # Listed by two zones in the same week: keep the earlier meeting
                continue
            row[week_key] = _STATUS_CODES[status]

    attendees: list[WeeklyAttendee] = []
    for name, row in rows.items():
        weekly_status = {week: row.get(week, WeekStatusCode.NO_RECORD) for week in weeks}
        present_count = sum(1 for code in weekly_status.values() if code is WeekStatusCode.PRESENT)
        total_weeks = sum(1 for code in weekly_status.values() if code is not WeekStatusCode.NO_RECORD)
        attendees.append(
            WeeklyAttendee(
                name=name,
                role=roles.get(name, ""),
                weekly_status=weekly_status,
                present_count=present_count,
                total_weeks=total_weeks,
                percentage=attendance_percentage(present_count, total_weeks),
            )
        )

    return WeekGrid(weeks=weeks, week_labels=week_labels, attendees=attendees)
