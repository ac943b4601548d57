import io
import json

import pytest
from django.test import Client
from openpyxl import load_workbook

from teacher_app.models import Attendance, Session

from .conftest import DAY, post_json


def test_health(client):
    res = client.get("/health/")
    assert res.status_code == 200
    assert res.json()["data"] == {"status": "ok"}


def test_login_and_role(client, teacher):
    res = post_json(client, "/auth/login/", {"username": "teacher01", "password": "Pass@123"})
    assert res.status_code == 200
    assert res.json()["data"]["role"] == "teacher"

    res = post_json(client, "/auth/login/", {"username": "teacher01", "password": "wrong"})
    assert res.status_code == 401


def test_teacher_endpoints_require_login(client, db):
    res = client.get("/teacher/rooms/")
    assert res.status_code == 401
    assert res.json()["success"] is False


def test_teacher_endpoints_require_teacher_profile(admin_client_json):
    assert admin_client_json.get("/teacher/rooms/").status_code == 403


def test_create_session_endpoint(teacher_client, group, rooms):
    payload = {"groupId": group.id, "roomId": rooms[0].id, "date": "2026-01-10", "startTime": "14:00", "endTime": "15:30"}
    res = post_json(teacher_client, "/teacher/sessions/", payload)
    assert res.status_code == 201
    body = res.json()["data"]
    assert body["startTime"] == "14:00"
    assert body["group"]["name"] == "Maths-A"
    assert body["room"]["name"] == "101"

    res = post_json(teacher_client, "/teacher/sessions/", dict(payload, startTime="15:00", endTime="16:00"))
    assert res.status_code == 409
    assert res.json()["error"] == "Room is already booked for this time slot"

    res = post_json(teacher_client, "/teacher/sessions/", dict(payload, startTime="15:30", endTime="16:30"))
    assert res.status_code == 201
    assert Session.objects.count() == 2


@pytest.mark.parametrize(
    "override,status",
    [
        ({"startTime": "16:00", "endTime": "15:00"}, 400),
        ({"date": "10/01/2026"}, 400),
        ({"roomId": 9999}, 404),
        ({"groupId": "abc"}, 400),
    ],
)
def test_create_session_rejections(teacher_client, group, rooms, override, status):
    payload = {"groupId": group.id, "roomId": rooms[0].id, "date": "2026-01-10", "startTime": "14:00", "endTime": "15:30"}
    res = post_json(teacher_client, "/teacher/sessions/", dict(payload, **override))
    assert res.status_code == status
    assert Session.objects.count() == 0


def test_invalid_json_body(teacher_client, db):
    res = teacher_client.post("/teacher/sessions/", data="{not json", content_type="application/json")
    assert res.status_code == 400


def test_list_sessions(teacher_client, session, other_teacher, group, rooms):
    Session.objects.create(
        date=session.date, start_time="08:00", end_time="09:00", group=group, teacher=other_teacher, room=rooms[1]
    )
    res = teacher_client.get("/teacher/sessions/")
    data = res.json()["data"]
    assert [s["id"] for s in data] == [session.id]
    assert data[0]["attendanceCount"] == 0


def test_rooms_endpoint(teacher_client, session, rooms):
    res = teacher_client.get("/teacher/rooms/", {"date": "2026-01-10", "startTime": "15:00", "endTime": "16:00"})
    assert [r["name"] for r in res.json()["data"]] == ["102", "103"]

    res = teacher_client.get("/teacher/rooms/")
    assert len(res.json()["data"]) == 3

    res = teacher_client.get("/teacher/rooms/", {"date": "2026-01-10", "startTime": "16:00", "endTime": "15:00"})
    assert res.status_code == 400


def test_groups_endpoint(teacher_client, group):
    data = teacher_client.get("/teacher/groups/").json()["data"]
    assert data[0]["name"] == "Maths-A"
    assert len(data[0]["students"]) == 3


def test_qr_endpoint(teacher_client, session, students):
    enrolled, outsider = students[0], students[3]
    for _ in range(3):
        res = post_json(teacher_client, "/attendance/qr/", {"qrData": f"STUDENT:{enrolled.id}", "sessionId": session.id})
        assert res.status_code == 200
        body = res.json()["data"]
        assert body["status"] == "present"
        assert body["student"]["id"] == enrolled.id
        assert body["session"]["group"]["name"] == "Maths-A"
    assert Attendance.objects.filter(session=session, student=enrolled).count() == 1

    res = post_json(teacher_client, "/attendance/qr/", {"qrData": f"STUDENT:{outsider.id}", "sessionId": session.id})
    assert res.status_code == 403
    assert res.json()["code"] == "not_enrolled"

    res = post_json(teacher_client, "/attendance/qr/", {"qrData": "student:1", "sessionId": session.id})
    assert res.status_code == 400
    assert res.json()["error"] == "Invalid QR code format. Expected: STUDENT:{id}"

    res = post_json(teacher_client, "/attendance/qr/", {"qrData": f"STUDENT:{enrolled.id}", "sessionId": 9999})
    assert res.status_code == 404


def test_qr_endpoint_rejects_get(teacher_client, db):
    assert teacher_client.get("/attendance/qr/").status_code == 405


def test_bulk_attendance_endpoint(teacher_client, session, students):
    payload = {
        "sessionId": session.id,
        "attendances": [
            {"studentId": students[0].id, "status": "present"},
            {"studentId": students[1].id, "status": "absent"},
            {"studentId": students[2].id},
        ],
    }
    res = post_json(teacher_client, "/teacher/attendance/", payload)
    assert res.status_code == 200
    assert res.json()["data"] == {"count": 3}

    res = post_json(teacher_client, "/teacher/attendance/", payload)
    assert res.json()["data"] == {"count": 0}
    assert Attendance.objects.filter(session=session).count() == 3

    res = post_json(teacher_client, "/teacher/attendance/", dict(payload, sessionId=9999))
    assert res.status_code == 404


def test_stats_endpoints(teacher_client, session, students):
    post_json(
        teacher_client,
        "/teacher/attendance/",
        {
            "sessionId": session.id,
            "attendances": [
                {"studentId": students[0].id, "status": "present"},
                {"studentId": students[1].id, "status": "present"},
                {"studentId": students[2].id, "status": "absent"},
            ],
        },
    )
    overview = teacher_client.get("/teacher/attendance/stats/").json()["data"]
    assert overview == {
        "totalSessions": 1,
        "totalStudents": 3,
        "totalPresent": 2,
        "totalAbsent": 1,
        "averageAttendance": 67,
    }

    per_session = teacher_client.get("/teacher/attendance/sessions/").json()["data"]
    assert per_session[0]["presentCount"] == 2
    assert per_session[0]["absentCount"] == 1
    assert per_session[0]["totalStudents"] == 3
    assert per_session[0]["attendanceRate"] == 67

    per_student = {s["id"]: s for s in teacher_client.get("/teacher/attendance/students/").json()["data"]}
    assert per_student[students[0].id]["attendanceRate"] == 100
    assert per_student[students[2].id]["absentCount"] == 1


def test_export_session_attendance(teacher_client, session, students):
    post_json(teacher_client, "/attendance/qr/", {"qrData": f"STUDENT:{students[0].id}", "sessionId": session.id})
    res = teacher_client.get(f"/teacher/sessions/{session.id}/export/")
    assert res.status_code == 200
    assert res["Content-Disposition"].endswith('.xlsx"')

    ws = load_workbook(io.BytesIO(res.content)).active
    statuses = [row[3] for row in ws.iter_rows(values_only=True) if row[0] in {s.id for s in students}]
    assert sorted(statuses) == ["ABSENT", "ABSENT", "PRESENT"]


def test_export_other_teachers_session_is_hidden(client, other_teacher, session):
    client.force_login(other_teacher.user)
    assert client.get(f"/teacher/sessions/{session.id}/export/").status_code == 404


def test_admin_attendance_endpoints(admin_client_json, session, students):
    payload = {"studentId": students[0].id, "sessionId": session.id, "status": "absent"}
    res = post_json(admin_client_json, "/attendance/", payload)
    assert res.status_code == 201
    assert res.json()["data"]["status"] == "absent"

    res = post_json(admin_client_json, "/attendance/", payload)
    assert res.status_code == 409

    res = admin_client_json.get(f"/attendance/student/{students[0].id}/")
    assert len(res.json()["data"]) == 1


def test_admin_endpoints_require_staff(teacher_client, session, students):
    res = post_json(teacher_client, "/attendance/", {"studentId": students[0].id, "sessionId": session.id, "status": "present"})
    assert res.status_code == 403


def test_database_failure_surfaces_as_store_error(teacher_client, rooms, monkeypatch):
    from django.db import DatabaseError

    from teacher_app.models import Room

    def broken(*args, **kwargs):
        raise DatabaseError("disk I/O error")

    monkeypatch.setattr(Room.objects, "order_by", broken)
    res = teacher_client.get("/teacher/rooms/")
    assert res.status_code == 500
    assert res.json()["code"] == "store_error"


def test_json_client_with_csrf_checks_logs_in_and_books(teacher, group, rooms):
    client = Client(enforce_csrf_checks=True)
    credentials = json.dumps({"username": "teacher01", "password": "Pass@123"})

    res = client.post("/auth/login/", data=credentials, content_type="application/json")
    assert res.status_code == 403
    assert res.json()["code"] == "csrf_failed"

    token = client.get("/auth/csrf/").json()["data"]["csrfToken"]
    res = client.post("/auth/login/", data=credentials, content_type="application/json", HTTP_X_CSRFTOKEN=token)
    assert res.status_code == 200
    assert res.json()["data"]["role"] == "teacher"

    payload = {"groupId": group.id, "roomId": rooms[0].id, "date": "2026-01-10", "startTime": "14:00", "endTime": "15:30"}
    res = client.post(
        "/teacher/sessions/",
        data=json.dumps(payload),
        content_type="application/json",
        HTTP_X_CSRFTOKEN=client.cookies["csrftoken"].value,
    )
    assert res.status_code == 201


def test_dashboard(teacher_client, session, students, rooms, monkeypatch):
    monkeypatch.setattr("django.utils.timezone.localdate", lambda *args, **kwargs: DAY)
    Session.objects.create(
        date="2026-01-12", start_time="09:00", end_time="10:00", group=session.group, teacher=session.teacher, room=rooms[1]
    )
    post_json(teacher_client, "/attendance/qr/", {"qrData": f"STUDENT:{students[0].id}", "sessionId": session.id})

    res = teacher_client.get("/teacher/dashboard/")
    assert res.status_code == 200
    data = res.json()["data"]
    assert data["stats"] == {
        "totalStudents": 3,
        "totalGroups": 1,
        "totalSessions": 2,
        "todaySessions": 1,
        "attendanceRate": 100,
    }
    assert [s["id"] for s in data["todaySessions"]] == [session.id]
    assert data["todaySessions"][0]["attendanceCount"] == 1
    assert data["groups"][0]["name"] == "Maths-A"
    assert data["attendanceStats"]["totalPresent"] == 1
    assert {s["id"] for s in data["studentStats"]} == {s.id for s in students[:3]}


def test_dashboard_of_a_teacher_without_groups(client, other_teacher):
    client.force_login(other_teacher.user)
    data = client.get("/teacher/dashboard/").json()["data"]
    assert data["groups"] == [] and data["todaySessions"] == []
    assert data["stats"]["totalStudents"] == 0
    assert data["stats"]["attendanceRate"] == 0
