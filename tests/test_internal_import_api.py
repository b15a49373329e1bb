# tests/test_internal_import_api.py
from datetime import date
from http import HTTPStatus

import pytest
from sqlalchemy import select
from sqlalchemy.orm import selectinload

from app.db.session import AsyncSessionLocal, init_db
from app.models.meeting import Meeting
from app.models.zone import Unit, Zone


def _payload():
    return {
        "zones": [
            {"zoneId": "Z001", "name": "Kozhikode North"},
            {"zoneId": "Z002", "name": "Kozhikode South", "districtId": "D002"},
        ],
        "units": [
            {"unitId": "U001", "name": "Nadakkavu", "zoneId": "Z001"},
            {"unitId": "U002", "name": "Eranhipalam", "zoneId": "Z001"},
        ],
        "meetings": [
            {
                "meetingId": "Z001-2024-01-10",
                "zoneId": "Z001",
                "zoneName": "Kozhikode North",
                "date": "2024-01-10",
                "startTime": "20:00",
                "endTime": "21:30",
                "agendas": ["Membership drive"],
                "minutes": ["Drive starts on Friday"],
                "attendance": [
                    {"name": "Asha", "role": "Secretary", "status": "present"},
                    {"name": "Binu", "status": "leave", "reason": "Travel"},
                    {"name": "Chitra"},
                ],
                "qhls": [
                    {"unit": "Nadakkavu", "day": "Friday", "faculty": "Rahim", "male": "", "female": 11},
                ],
            }
        ],
    }


@pytest.mark.asyncio
async def test_import_creates_entities(client):
    await init_db()

    resp = client.post("/internal/import", json=_payload())
    assert resp.status_code == HTTPStatus.OK
    assert resp.json() == {
        "zones": {"created": 2, "updated": 0},
        "units": {"created": 2, "updated": 0},
        "meetings": {"created": 1, "updated": 0},
    }

    async with AsyncSessionLocal() as session:
        zones = (await session.execute(select(Zone).order_by(Zone.zone_id))).scalars().all()
        assert [(z.zone_id, z.district_id) for z in zones] == [("Z001", "D001"), ("Z002", "D002")]

        units = (await session.execute(select(Unit))).scalars().all()
        assert {u.unit_id for u in units} == {"U001", "U002"}

        meeting = (
            await session.execute(
                select(Meeting)
                .options(selectinload(Meeting.attendance), selectinload(Meeting.qhls))
                .where(Meeting.meeting_id == "Z001-2024-01-10")
            )
        ).scalar_one()

    assert meeting.agendas == ["Membership drive"]
    assert [(r.position, r.name, r.status) for r in meeting.attendance] == [
        (0, "Asha", "present"),
        (1, "Binu", "leave"),
        (2, "Chitra", "present"),
    ]
    assert meeting.attendance[1].reason == "Travel"
    assert len(meeting.qhls) == 1
    assert meeting.qhls[0].male == 0
    assert meeting.qhls[0].female == 11


@pytest.mark.asyncio
async def test_reimport_is_idempotent_and_replaces_registers(client):
    await init_db()

    first = client.post("/internal/import", json=_payload())
    assert first.status_code == HTTPStatus.OK

    payload = _payload()
    payload["meetings"][0]["attendance"] = [{"name": "Asha", "status": "leave", "reason": "Fever"}]
    second = client.post("/internal/import", json=payload)
    assert second.status_code == HTTPStatus.OK
    assert second.json() == {
        "zones": {"created": 0, "updated": 2},
        "units": {"created": 0, "updated": 2},
        "meetings": {"created": 0, "updated": 1},
    }

    async with AsyncSessionLocal() as session:
        meetings = (
            await session.execute(select(Meeting).options(selectinload(Meeting.attendance)))
        ).scalars().all()

    assert len(meetings) == 1
    assert [(r.name, r.status, r.reason) for r in meetings[0].attendance] == [("Asha", "leave", "Fever")]


def test_import_rejects_unknown_attendance_status(client):
    payload = _payload()
    payload["meetings"][0]["attendance"] = [{"name": "Asha", "status": "late"}]

    resp = client.post("/internal/import", json=payload)
    assert resp.status_code == HTTPStatus.UNPROCESSABLE_ENTITY


def test_import_rejects_nameless_attendance(client):
    payload = _payload()
    payload["meetings"][0]["attendance"] = [{"name": "", "status": "present"}]

    resp = client.post("/internal/import", json=payload)
    assert resp.status_code == HTTPStatus.UNPROCESSABLE_ENTITY


@pytest.mark.asyncio
async def test_import_keeps_malformed_dates_verbatim(client):
    await init_db()

    payload = _payload()
    payload["meetings"][0]["date"] = "10th Jan"
    resp = client.post("/internal/import", json=payload)
    assert resp.status_code == HTTPStatus.OK

    async with AsyncSessionLocal() as session:
        meeting = (await session.execute(select(Meeting))).scalar_one()
    assert meeting.date == "10th Jan"
    assert meeting.meeting_date is None


@pytest.mark.asyncio
async def test_import_stores_parsed_meeting_date(client):
    await init_db()

    payload = _payload()
    payload["meetings"][0]["date"] = " 2024-01-10 "
    resp = client.post("/internal/import", json=payload)
    assert resp.status_code == HTTPStatus.OK

    async with AsyncSessionLocal() as session:
        meeting = (await session.execute(select(Meeting))).scalar_one()
    assert meeting.date == " 2024-01-10 "
    assert meeting.meeting_date == date(2024, 1, 10)
