# app/api/routes/dashboard.py
from datetime import date as date_type

from fastapi import APIRouter, Depends, HTTPException, Query
from http import HTTPStatus
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies.principal import ensure_zone_access, require_any_role
from app.db.session import get_db
from app.schemas.attendance import AttendanceDashboard
from app.schemas.qhls import QhlsWeeklyReport
from app.schemas.week import WeekWindow
from app.services.access_control import Principal, Role, accessible_zone_ids
from app.services.dashboard import compute_attendance_dashboard
from app.services.qhls_summary import compute_qhls_report
from app.services.week_boundaries import week_window

router = APIRouter(
    prefix="/dashboard",
    tags=["Dashboard"],
)

# Every dashboard role; zone admins are further limited to their own zones
dashboard_user = require_any_role(Role.ADMIN, Role.DISTRICT_ADMIN, Role.ZONE_ADMIN)

ALL_ZONES = "All"


@router.get(
    "/attendance",
    response_model=AttendanceDashboard,
    status_code=HTTPStatus.OK,
    summary="Get attendance dashboard for a date range",
    description=(
        "Aggregate the attendance registers of every meeting in the given window.\n\n"
        "The range is **inclusive** of both `start_date` and `end_date`; either bound "
        "may be omitted.\n\n"
        "The report includes:\n"
        "- Per-person totals (present / leave / absent), leave streaks and attendance %\n"
        "- At-risk list: members whose current leave streak reached the threshold\n"
        "- Week grid: one column per Wednesday-to-Tuesday week, with P / L / A / `-`\n"
        "- Latest leave records and zones that held no meeting in the window\n\n"
        "`zone_id` narrows the report to one zone. When omitted (or `All`), the report "
        "covers every zone the caller may access."
    ),
    responses={
        200: {
            "description": "Attendance dashboard successfully computed.",
            "content": {
                "application/json": {
                    "example": {
                        "startDate": "2024-01-01",
                        "endDate": "2024-01-31",
                        "zoneId": None,
                        "totalMeetings": 4,
                        "zoneMeetingCounts": {"Kozhikode North": 4},
                        "personStats": [
                            {
                                "name": "Asha",
                                "zone": "Kozhikode North",
                                "role": "Secretary",
                                "total": 4,
                                "present": 1,
                                "leave": 3,
                                "absent": 0,
                                "currentConsecutiveLeaves": 3,
                                "maxConsecutiveLeaves": 3,
                                "lastAttendedDate": "2024-01-03",
                                "percentage": 25.0,
                            }
                        ],
                        "atRiskList": [
                            {"name": "Asha", "zone": "Kozhikode North", "consecutiveLeaves": 3}
                        ],
                        "weekGrid": {
                            "weeks": ["2024-01-03", "2024-01-10"],
                            "weekLabels": {"2024-01-03": "Jan03", "2024-01-10": "Jan10"},
                            "attendees": [
                                {
                                    "name": "Asha",
                                    "role": "Secretary",
                                    "weeklyStatus": {"2024-01-03": "P", "2024-01-10": "L"},
                                    "presentCount": 1,
                                    "totalWeeks": 2,
                                    "percentage": 50.0,
                                }
                            ],
                        },
                        "latestLeaves": [
                            {
                                "name": "Asha",
                                "zone": "Kozhikode North",
                                "date": "2024-01-24",
                                "reason": "Travel",
                            }
                        ],
                        "skippedMeetings": 0,
                        "duplicateWeekMeetings": 0,
                        "zonesWithoutMeetings": [],
                    }
                }
            },
        },
        400: {"description": "end_date is before start_date."},
        401: {"description": "Missing or invalid bearer token."},
        403: {"description": "Caller may not read the requested zone."},
        422: {"description": "Validation error (e.g. invalid dates)."},
    },
)
async def get_attendance_dashboard(
    start_date: date_type | None = Query(
        default=None,
        description="Start date (inclusive) in ISO format (YYYY-MM-DD). Omit for no lower bound.",
        examples=["2024-01-01"],
    ),
    end_date: date_type | None = Query(
        default=None,
        description=(
            "End date (inclusive) in ISO format (YYYY-MM-DD). Must be greater than "
            "or equal to start_date. Omit for no upper bound."
        ),
        examples=["2024-01-31"],
    ),
    zone_id: str | None = Query(
        default=None,
        description="Zone to report on. Omit or pass `All` for every accessible zone.",
        examples=["Z001"],
    ),
    principal: Principal = Depends(dashboard_user),
    db: AsyncSession = Depends(get_db),
) -> AttendanceDashboard:
    """
    Compute the attendance dashboard for the caller's zone scope.
    """
    if zone_id == ALL_ZONES or zone_id == "":
        zone_id = None

    if zone_id is not None:
        ensure_zone_access(principal, zone_id)

    try:
        return await compute_attendance_dashboard(
            db,
            start_date=start_date,
            end_date=end_date,
            zone_id=zone_id,
            allowed_zone_ids=accessible_zone_ids(principal),
        )
    except ValueError as exc:
        raise HTTPException(status_code=HTTPStatus.BAD_REQUEST, detail=str(exc))


@router.get(
    "/week",
    response_model=WeekWindow,
    status_code=HTTPStatus.OK,
    summary="Get the organizational week containing a date",
    description=(
        "Return the Wednesday-to-Tuesday week containing `date`, together with the "
        "short `MonDD` label used for weekly sheets and grid columns.\n\n"
        "If `date` is omitted the server's current date is used."
    ),
    responses={
        200: {
            "description": "Week window computed.",
            "content": {
                "application/json": {
                    "example": {
                        "date": "2024-01-08",
                        "weekStart": "2024-01-03",
                        "weekEnd": "2024-01-09",
                        "label": "Jan03",
                    }
                }
            },
        },
        422: {"description": "Invalid date."},
    },
)
async def get_week(
    date: date_type | None = Query(
        default=None,
        description="Any calendar date (YYYY-MM-DD). Defaults to today.",
        examples=["2024-01-08"],
    ),
) -> WeekWindow:
    return week_window(date or date_type.today())


@router.get(
    "/qhls",
    response_model=QhlsWeeklyReport,
    status_code=HTTPStatus.OK,
    summary="Get the weekly study-class (QHLS) report",
    description=(
        "Collect the study-class submissions that zone meetings recorded for one "
        "Wednesday-to-Tuesday week.\n\n"
        "`week_offset` selects the week relative to the current one "
        "(0 = current, -1 = previous, ...).\n\n"
        "The report includes every unit submission, totals over the units that held "
        "a class, and the units of each accessible zone that sent nothing."
    ),
    responses={
        200: {
            "description": "Weekly study-class report computed.",
            "content": {
                "application/json": {
                    "example": {
                        "weekStart": "2024-01-10",
                        "weekEnd": "2024-01-16",
                        "responses": [
                            {
                                "zone": "Kozhikode North",
                                "unit": "Nadakkavu",
                                "hasQhls": True,
                                "day": "Friday",
                                "faculty": "Rahim",
                                "male": 8,
                                "female": 11,
                                "date": "2024-01-10",
                            }
                        ],
                        "stats": {
                            "totalResponses": 1,
                            "totalMales": 8,
                            "totalFemales": 11,
                            "totalParticipants": 19,
                        },
                        "missing": {
                            "byZone": {"Kozhikode North": ["Eranhipalam"]},
                            "totalMissing": 1,
                            "totalUnits": 2,
                        },
                        "skippedMeetings": 0,
                    }
                }
            },
        },
        401: {"description": "Missing or invalid bearer token."},
    },
)
async def get_qhls_report(
    week_offset: int = Query(
        default=0,
        le=0,
        ge=-52,
        description="Weeks relative to the current week (0 = current, -1 = previous).",
        examples=[-1],
    ),
    principal: Principal = Depends(dashboard_user),
    db: AsyncSession = Depends(get_db),
) -> QhlsWeeklyReport:
    return await compute_qhls_report(
        db,
        week_offset=week_offset,
        allowed_zone_ids=accessible_zone_ids(principal),
    )
