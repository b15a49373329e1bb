# app/api/routes/health.py
from datetime import datetime, timezone

from fastapi import APIRouter
from pydantic import BaseModel, Field

from app.core.config import get_settings


router = APIRouter(tags=["Health"])


class HealthResponse(BaseModel):
    """
    Response schema for the health check endpoint.
    """

    status: str = Field(
        ...,
        description="Overall health status of the attendance service.",
        examples=["ok"],
    )
    app_name: str = Field(
        ...,
        description="Configured application name.",
        examples=["Zone Attendance Monitor"],
    )
    environment: str = Field(
        ...,
        description="Current deployment environment (local/test/dev/stage/prod).",
        examples=["local"],
    )
    timestamp_utc: datetime = Field(
        ...,
        description="Server time (UTC) when the check ran.",
        examples=["2024-01-10T18:30:00Z"],
    )


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description=(
        "Liveness probe for the attendance service. Does not touch the database, "
        "so it keeps answering while storage is degraded."
    ),
    responses={
        200: {
            "description": "Service is up.",
            "content": {
                "application/json": {
                    "example": {
                        "status": "ok",
                        "app_name": "Zone Attendance Monitor",
                        "environment": "local",
                        "timestamp_utc": "2024-01-10T18:30:00Z",
                    }
                }
            },
        }
    },
)
async def health_check() -> HealthResponse:
    settings = get_settings()
    return HealthResponse(
        status="ok",
        app_name=settings.APP_NAME,
        environment=settings.APP_ENV,
        timestamp_utc=datetime.now(tz=timezone.utc),
    )
