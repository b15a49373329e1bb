# tests/test_meeting_report.py
from http import HTTPStatus

import pytest

from app.db.session import init_db
from app.models.meeting import AttendanceRecord, Meeting, QhlsEntry
from app.services.meeting_report import (
    NO_AGENDA_TEXT,
    NO_MINUTES_TEXT,
    QHLS_HEADING,
    build_meeting_report,
)


def _meeting(**overrides):
    fields = dict(
        meeting_id="Z001-2024-01-10",
        zone_id="Z001",
        zone_name="Kozhikode North",
        date="2024-01-10",
        agendas=["Membership drive", "Study class schedule"],
        minutes=["Drive starts Friday"],
        attendance=[
            AttendanceRecord(position=0, name="Asha", status="present"),
            AttendanceRecord(position=1, name="Binu", status="leave", reason="Travel"),
            AttendanceRecord(position=2, name="Chitra", status="leave", reason=""),
            AttendanceRecord(position=3, name="Devi", status="absent"),
            AttendanceRecord(position=4, name="Eby", status="present"),
        ],
        qhls=[
            QhlsEntry(position=0, unit="Nadakkavu", day="Friday", faculty="Rahim", male=8, female=11),
            QhlsEntry(position=1, unit="", day="", faculty="", male=0, female=0),
            QhlsEntry(position=2, unit="Eranhipalam", day="Sunday", faculty="", male=0, female=5),
        ],
    )
    fields.update(overrides)
    return Meeting(**fields)


def test_report_lists_present_and_leave_attendees():
    report = build_meeting_report(_meeting())

    assert report.attendees == "Asha\nEby"
    assert report.leave_attendees == "Binu (Travel)\nChitra"
    assert "Devi" not in report.attendees
    assert "Devi" not in report.leave_attendees


def test_report_numbers_agenda_and_minutes():
    report = build_meeting_report(_meeting())

    assert report.agenda == "1. Membership drive\n2. Study class schedule"
    assert report.minutes == "1. Drive starts Friday"


def test_report_placeholders_when_agenda_and_minutes_empty():
    report = build_meeting_report(_meeting(agendas=[], minutes=[]))

    assert report.agenda == NO_AGENDA_TEXT
    assert report.minutes == NO_MINUTES_TEXT


def test_report_qhls_table_skips_blank_rows():
    report = build_meeting_report(_meeting())

    assert report.qhls_status.split("\n") == [
        QHLS_HEADING,
        "Nadakkavu, Friday, Rahim, 8, 11",
        "Eranhipalam, Sunday, , 0, 5",
    ]


def test_report_qhls_table_empty_without_entries():
    report = build_meeting_report(_meeting(qhls=[]))
    assert report.qhls_status == ""


@pytest.mark.asyncio
async def test_meeting_report_endpoint(client):
    await init_db()
    resp = client.post(
        "/internal/import",
        json={
            "meetings": [
                {
                    "meetingId": "Z001-2024-01-10",
                    "zoneId": "Z001",
                    "zoneName": "Kozhikode North",
                    "date": "2024-01-10",
                    "agendas": ["Membership drive"],
                    "attendance": [
                        {"name": "Asha", "status": "present"},
                        {"name": "Binu", "status": "leave", "reason": "Travel"},
                    ],
                }
            ]
        },
    )
    assert resp.status_code == HTTPStatus.OK

    resp = client.get("/meetings/Z001-2024-01-10/report")
    assert resp.status_code == HTTPStatus.OK
    data = resp.json()
    assert data["meetingId"] == "Z001-2024-01-10"
    assert data["zoneName"] == "Kozhikode North"
    assert data["attendees"] == "Asha"
    assert data["leaveAttendees"] == "Binu (Travel)"
    assert data["agenda"] == "1. Membership drive"
    assert data["minutes"] == NO_MINUTES_TEXT
    assert data["qhlsStatus"] == ""


def test_meeting_report_404_for_unknown_meeting(client):
    resp = client.get("/meetings/does-not-exist/report")
    assert resp.status_code == HTTPStatus.NOT_FOUND
    assert "does-not-exist" in resp.json()["detail"]


def test_report_numbers_items_as_given():
    report = build_meeting_report(_meeting(agendas=["Budget", "", "Camp"], minutes=[""]))

    assert report.agenda == "1. Budget\n2. \n3. Camp"
    assert report.minutes == "1. "
