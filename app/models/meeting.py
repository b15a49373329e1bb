# app/models/meeting.py
from sqlalchemy import JSON, Boolean, Column, Date, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import relationship, validates

from app.db.base import Base
from app.services.week_boundaries import InvalidDateError, parse_calendar_date


class Meeting(Base):
    """
    A single zone meeting with its attendance register and study-class entries.

    `date` is kept as the text received from the client or the import source
    (normally YYYY-MM-DD). `meeting_date` holds its parsed value, or NULL when
    the text is not a valid date; range queries filter on `meeting_date` and
    always include the NULL rows so reports can skip and count them.
    """

    __tablename__ = "meetings"

    id = Column(Integer, primary_key=True, index=True)
    meeting_id = Column(String(128), nullable=False, unique=True, index=True)

    zone_id = Column(String(64), nullable=False, index=True)
    zone_name = Column(String(255), nullable=False)

    date = Column(String(32), nullable=False)
    meeting_date = Column(Date, nullable=True, index=True)
    start_time = Column(String(16), nullable=False, default="")
    end_time = Column(String(16), nullable=False, default="")

    agendas = Column(JSON, nullable=False, default=list)
    minutes = Column(JSON, nullable=False, default=list)

    attendance = relationship(
        "AttendanceRecord",
        back_populates="meeting",
        cascade="all, delete-orphan",
        order_by="AttendanceRecord.position",
    )
    qhls = relationship(
        "QhlsEntry",
        back_populates="meeting",
        cascade="all, delete-orphan",
        order_by="QhlsEntry.position",
    )

    __table_args__ = (Index("ix_meetings_zone_name_date", "zone_name", "date"),)

    @validates("date")
    def _set_meeting_date(self, key: str, value: str) -> str:
        """
        Whenever the date text is set, also set the parsed `meeting_date`.
        """
        try:
            self.meeting_date = parse_calendar_date(value)
        except InvalidDateError:
            self.meeting_date = None
        return value

    def __repr__(self) -> str:
        return (
            f"<Meeting meeting_id={self.meeting_id} zone={self.zone_name} "
            f"date={self.date}>"
        )


class AttendanceRecord(Base):
    """
    One line of a meeting's attendance register.
    """

    __tablename__ = "attendance_records"

    id = Column(Integer, primary_key=True, index=True)
    meeting_pk = Column(
        Integer,
        ForeignKey("meetings.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    position = Column(Integer, nullable=False, default=0)

    name = Column(String(255), nullable=False)
    role = Column(String(255), nullable=False, default="")
    status = Column(String(16), nullable=False, default="present")
    reason = Column(Text, nullable=False, default="")

    meeting = relationship("Meeting", back_populates="attendance")

    def __repr__(self) -> str:
        return f"<AttendanceRecord name={self.name} status={self.status}>"


class QhlsEntry(Base):
    """
    Weekly study-class (QHLS) submission for one unit, reported in a zone meeting.
    """

    __tablename__ = "qhls_entries"

    id = Column(Integer, primary_key=True, index=True)
    meeting_pk = Column(
        Integer,
        ForeignKey("meetings.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    position = Column(Integer, nullable=False, default=0)

    unit = Column(String(255), nullable=False, default="")
    day = Column(String(64), nullable=False, default="")
    faculty = Column(String(255), nullable=False, default="")
    male = Column(Integer, nullable=False, default=0)
    female = Column(Integer, nullable=False, default=0)
    has_qhls = Column(Boolean, nullable=False, default=True)

    meeting = relationship("Meeting", back_populates="qhls")
