# app/services/meeting_report.py
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.meeting import Meeting
from app.schemas.attendance import AttendanceStatus
from app.schemas.meeting import MeetingReport

NO_AGENDA_TEXT = "അജണ്ടകളില്ല"
NO_MINUTES_TEXT = "തീരുമാനങ്ങളില്ല"
QHLS_HEADING = "യൂണിറ്റ്, ദിവസം, ഫാക്കൽറ്റി, പുരുഷൻ, സ്ത്രീ"


def _numbered(items, empty_text: str) -> str:
    items = list(items or [])
    if not items:
        return empty_text
    return "\n".join(f"{index}. {item}" for index, item in enumerate(items, start=1))


def _qhls_table(entries) -> str:
    if not entries:
        return ""
    rows = [
        f"{e.unit or ''}, {e.day or ''}, {e.faculty or ''}, {e.male or 0}, {e.female or 0}"
        for e in entries
        # Blank rows left over from the entry form
        if e.unit or e.day or e.faculty or e.male or e.female
    ]
    return "\n".join([QHLS_HEADING, *rows])


def build_meeting_report(meeting: Meeting) -> MeetingReport:
    """
    Render the text blocks of a meeting report.

    - Present attendees, one name per line.
    - Attendees on leave, one per line, with " (reason)" when a reason is given.
      Absent attendees appear in neither block.
    - Agenda and minutes numbered from 1, or a placeholder line when empty.
    - Study-class table with a heading row, or "" when the meeting has no entries.
    """
    present = []
    on_leave = []
    for record in meeting.attendance:
        if not record.name:
            continue
        if record.status == AttendanceStatus.PRESENT.value:
            present.append(record.name)
        elif record.status == AttendanceStatus.LEAVE.value:
            suffix = f" ({record.reason})" if record.reason else ""
            on_leave.append(f"{record.name}{suffix}")

    return MeetingReport(
        meeting_id=meeting.meeting_id,
        zone_name=meeting.zone_name,
        date=meeting.date,
        attendees="\n".join(present),
        leave_attendees="\n".join(on_leave),
        agenda=_numbered(meeting.agendas, NO_AGENDA_TEXT),
        minutes=_numbered(meeting.minutes, NO_MINUTES_TEXT),
        qhls_status=_qhls_table(meeting.qhls),
    )


async def get_meeting(db: AsyncSession, meeting_id: str) -> Meeting:
    """
    Load a meeting with its attendance and study-class entries.

    Raises
    ------
    LookupError
        If no meeting has this `meeting_id`.
    """
    stmt = (
        select(Meeting)
        .options(selectinload(Meeting.attendance), selectinload(Meeting.qhls))
        .where(Meeting.meeting_id == meeting_id)
    )
    result = await db.execute(stmt)
    meeting = result.scalar_one_or_none()
    if meeting is None:
        raise LookupError(f"Meeting '{meeting_id}' not found.")
    return meeting
