# app/models/zone.py
from sqlalchemy import Column, Integer, String

from app.db.base import Base


class Zone(Base):
    """
    A zone groups several units and holds one weekly meeting.
    """

    __tablename__ = "zones"

    id = Column(Integer, primary_key=True, index=True)
    zone_id = Column(String(64), nullable=False, unique=True, index=True)
    name = Column(String(255), nullable=False, index=True)
    district_id = Column(String(64), nullable=False, default="D001", index=True)

    def __repr__(self) -> str:
        return f"<Zone zone_id={self.zone_id} name={self.name}>"


class Unit(Base):
    """
    A unit belongs to exactly one zone (referenced by the zone's natural key).
    """

    __tablename__ = "units"

    id = Column(Integer, primary_key=True, index=True)
    unit_id = Column(String(64), nullable=False, unique=True, index=True)
    name = Column(String(255), nullable=False)
    zone_id = Column(String(64), nullable=False, index=True)

    def __repr__(self) -> str:
        return f"<Unit unit_id={self.unit_id} zone_id={self.zone_id} name={self.name}>"
