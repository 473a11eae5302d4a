from __future__ import annotations

from src.safepass.safepass.core.enums import Role, UserStatus
from tests.helpers import make_user


def test_login_and_me(client, login):
    resp = login("teacher@test.com")

    assert resp.get_json()["user"]["role"] == "teacher"
    me = client.get("/api/auth/me").get_json()
    assert me["approved"] is True


def test_bad_login_is_401(client):
    resp = client.post("/api/auth/login", json={"email": "teacher@test.com", "password": "nope"})

    assert resp.status_code == 401
    assert resp.get_json() == {"success": False, "message": "Invalid email or password"}


def test_gated_endpoints_require_login(client):
    assert client.get("/api/students").status_code == 401


def test_pending_user_is_blocked(client, users_repo, login):
    users_repo.create_user(make_user("nurse-9", Role.NURSE, status=UserStatus.PENDING, school_id="S", email="n9@test.com"))
    login("n9@test.com")

    resp = client.get("/api/students")

    assert resp.status_code == 403
    assert resp.get_json()["message"] == "Your account is pending admin approval."


def test_signup_then_admin_approves(client, login):
    resp = client.post(
        "/api/auth/signup",
        json={"name": "Mo", "email": "mo@test.com", "password": "secret1", "phone": "1", "role": "monitor", "school_id": "S"},
    )
    assert resp.status_code == 201
    user_id = resp.get_json()["user"]["id"]

    login("admin@test.com")
    assert client.post(f"/api/users/{user_id}/approve").get_json()["user"]["status"] == "approved"


def test_scan_flow_with_allergy_alert(client, login, functions_recorder):
    login("teacher@test.com")

    resp = client.post("/api/scans", json={"student_id": "STU001", "location": "Bus #1", "action": "in"})

    assert resp.status_code == 201
    body = resp.get_json()
    assert body["message"] == "Ava Brown scanned in at Bus #1"
    assert body["allergy_alert"]["allergies"] == ["Peanuts", "Shellfish"]
    assert functions_recorder.names() == ["allergy-notification"]


def test_unknown_student_scan_is_404(client, login):
    login("teacher@test.com")

    resp = client.post("/api/scans", json={"student_id": "NOPE", "location": "Bus #1", "action": "in"})

    assert resp.status_code == 404


def test_remote_failure_is_502(client, login, scans_repo):
    login("teacher@test.com")
    scans_repo.fail = True

    resp = client.post("/api/scans", json={"student_id": "STU002", "location": "Bus #1", "action": "in"})

    assert resp.status_code == 502


def test_alerts_resolve_and_counts(client, login):
    login("teacher@test.com")

    resp = client.post("/api/alerts/missed-STU001/resolve")
    assert resp.status_code == 200

    body = client.get("/api/alerts").get_json()
    assert [a["id"] for a in body["alerts"]] == ["missed-STU002"]
    assert [a["id"] for a in body["resolved"]] == ["missed-STU001"]


def test_driver_cannot_see_reports(client, login):
    login("driver@test.com")

    assert client.get("/api/reports/attendance").status_code == 403
    alerts = client.get("/api/alerts").get_json()["alerts"]
    assert {a["id"] for a in alerts} == {"allergy-STU001", "unscanned-STU001", "unscanned-STU002"}


def test_attendance_report_csv(client, login):
    login("teacher@test.com")

    resp = client.get("/api/reports/attendance?date=2026-03-10&format=csv")

    assert resp.status_code == 200
    assert resp.mimetype == "text/csv"
    assert resp.get_data(as_text=True).splitlines()[0] == "Grade,Total,Present,Late,Missing,Attendance Rate"


def test_bad_report_date_is_400(client, login):
    login("teacher@test.com")

    assert client.get("/api/reports/history?date=03/10/2026").status_code == 400


def test_admin_only_settings(client, login):
    login("teacher@test.com")
    assert client.put("/api/settings/alert-thresholds", json={"unscanned_minutes": 20}).status_code == 403

    client.post("/api/auth/logout")
    login("admin@test.com")
    resp = client.put("/api/settings/alert-thresholds", json={"unscanned_minutes": 20})
    assert resp.get_json()["alert_thresholds"]["unscanned_minutes"] == 20


def test_import_template_download(client, login):
    login("admin@test.com")

    resp = client.get("/api/imports/schedules/template")

    assert resp.headers["Content-Disposition"] == "attachment; filename=schedules_template.csv"


def test_student_qr_badge(client, login):
    login("teacher@test.com")

    resp = client.get("/api/students/STU001/qr")

    assert resp.status_code == 200
    assert resp.mimetype == "image/png"


def test_unscanned_notify(client, login, functions_recorder):
    login("admin@test.com")

    resp = client.post("/api/unscanned/STU001/notify")

    assert resp.status_code == 200
    assert functions_recorder.names() == ["attendance-notification"]
