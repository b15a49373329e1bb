# app/api/routes/meetings.py
from fastapi import APIRouter, Depends, HTTPException, Path
from http import HTTPStatus
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies.principal import ensure_zone_access, require_any_role
from app.db.session import get_db
from app.schemas.meeting import MeetingReport
from app.services.access_control import Principal, Role
from app.services.meeting_report import build_meeting_report, get_meeting

router = APIRouter(
    prefix="/meetings",
    tags=["Meetings"],
)


@router.get(
    "/{meeting_id}/report",
    response_model=MeetingReport,
    status_code=HTTPStatus.OK,
    summary="Get the text report of a meeting",
    description=(
        "Render a stored meeting as the text blocks zone secretaries share after "
        "each meeting:\n"
        "- Present attendees, one per line\n"
        "- Attendees on leave with their reason\n"
        "- Numbered agenda and numbered minutes (a placeholder line when empty)\n"
        "- Study-class table, one row per unit\n\n"
        "Absent attendees are not listed."
    ),
    responses={
        200: {"description": "Meeting report rendered."},
        401: {"description": "Missing or invalid bearer token."},
        403: {"description": "Caller may not read the meeting's zone."},
        404: {"description": "Meeting not found."},
    },
)
async def get_meeting_report(
    meeting_id: str = Path(
        ...,
        description="Natural key of the meeting.",
        examples=["Z001-2024-01-10"],
    ),
    principal: Principal = Depends(
        require_any_role(Role.ADMIN, Role.DISTRICT_ADMIN, Role.ZONE_ADMIN)
    ),
    db: AsyncSession = Depends(get_db),
) -> MeetingReport:
    """
    Fetch a meeting and render its report, if the caller may read its zone.
    """
    try:
        meeting = await get_meeting(db, meeting_id)
    except LookupError as exc:
        raise HTTPException(status_code=HTTPStatus.NOT_FOUND, detail=str(exc))

    ensure_zone_access(principal, meeting.zone_id)
    return build_meeting_report(meeting)
