# app/api/routes/internal.py
from datetime import date as date_type

from fastapi import APIRouter, Depends
from http import HTTPStatus
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies.internal_auth import verify_internal_api_key
from app.db.session import get_db
from app.schemas.attendance import AttendanceDashboard
from app.schemas.meeting import ImportRequest, ImportSummary
from app.services.dashboard import compute_attendance_dashboard
from app.services.data_import import import_data
from app.services.week_boundaries import week_boundaries

router = APIRouter(
    prefix="/internal",
    tags=["Internal"],
    dependencies=[Depends(verify_internal_api_key)],
)


@router.post(
    "/import",
    response_model=ImportSummary,
    status_code=HTTPStatus.OK,
    summary="Bulk import zones, units and meetings",
    description=(
        "Upsert zones, units and meetings exported from the previous data store.\n\n"
        "Entities are matched by their natural keys (`zoneId`, `unitId`, "
        "`meetingId`), so the same export can be imported repeatedly. A "
        "re-imported meeting has its attendance register and study-class entries "
        "replaced.\n\n"
        "Attendance statuses must be `present`, `leave` or `absent` (default "
        "`present`). Meeting dates are stored as given; reports skip meetings "
        "whose date cannot be parsed.\n\n"
        "Protected via the `X-Internal-Api-Key` header when configured."
    ),
    responses={
        200: {
            "description": "Import committed. Counts per entity are returned.",
            "content": {
                "application/json": {
                    "example": {
                        "zones": {"created": 2, "updated": 0},
                        "units": {"created": 5, "updated": 0},
                        "meetings": {"created": 12, "updated": 3},
                    }
                }
            },
        },
        401: {
            "description": "Missing or invalid internal API key (if configured).",
        },
        422: {
            "description": "Validation error (e.g. unknown attendance status).",
        },
    },
)
async def run_import(
    payload: ImportRequest,
    db: AsyncSession = Depends(get_db),
) -> ImportSummary:
    """
    Import an export of the previous data store.
    """
    return await import_data(db, payload)


@router.post(
    "/run-weekly-attendance",
    response_model=AttendanceDashboard,
    status_code=HTTPStatus.OK,
    summary="Compute the attendance dashboard for the current week",
    description=(
        "Internal-only endpoint intended for scheduled/cron usage.\n\n"
        "**Logic:**\n"
        "- The window is the organizational week (Wednesday to Tuesday) "
        "containing today's date (server time)\n"
        "- Every zone is included\n\n"
        "Returns the same structure as `/dashboard/attendance`, but computes the "
        "date range automatically."
    ),
    responses={
        200: {
            "description": "Attendance dashboard computed for the current week.",
        },
        401: {
            "description": "Missing or invalid internal API key (if configured).",
        },
    },
)
async def run_weekly_attendance(
    db: AsyncSession = Depends(get_db),
) -> AttendanceDashboard:
    """
    Compute this week's attendance dashboard across all zones.

    Designed to be called by a scheduler without passing dates explicitly.
    """
    start_date, end_date = week_boundaries(date_type.today())

    return await compute_attendance_dashboard(
        db,
        start_date=start_date,
        end_date=end_date,
    )
