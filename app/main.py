# app/main.py
import logging

from fastapi import FastAPI

from app.api.routes import dashboard, health, internal, meetings
from app.core.config import get_settings
from app.db.session import init_db_for_startup


def create_app() -> FastAPI:
    """
    Application factory for the Zone Attendance Monitor service.
    """
    settings = get_settings()

    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    app = FastAPI(
        title=settings.APP_NAME,
        description=(
            "Backend service that stores zone meetings with their attendance registers,\n"
            "and reports attendance streaks, weekly attendance grids and weekly\n"
            "study-class submissions per zone."
        ),
        version="0.1.0",
    )

    # Routers
    app.include_router(health.router)
    app.include_router(dashboard.router)
    app.include_router(meetings.router)
    app.include_router(internal.router)

    @app.on_event("startup")
    async def on_startup() -> None:  # pragma: no cover
        await init_db_for_startup()

    return app


app = create_app()
