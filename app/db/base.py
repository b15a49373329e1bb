# app/db/base.py
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models in the Zone Attendance Monitor service.
    """
    pass


# Import ORM models so that Base.metadata is aware of them
# This import should stay at the bottom to avoid circular dependencies.
from app.models.zone import Unit, Zone  # noqa: E402,F401
from app.models.meeting import AttendanceRecord, Meeting, QhlsEntry  # noqa: E402,F401
