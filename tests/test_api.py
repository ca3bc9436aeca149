import pytest

from geo_attendance.core.enums import AttendanceType, Role
from geo_attendance.summary.generator import MISSING_KEY_MESSAGE

INSIDE = {"latitude": 13.7565, "longitude": 100.5020, "accuracy": 8, "timestamp": 1_770_019_200_000}
FAR_AWAY = {"latitude": 13.80, "longitude": 100.60}


def login(client, email="student@example.com", password="secret123"):
    return client.post("/api/auth/login", json={"email": email, "password": password})


@pytest.fixture
def student_client(client):
    assert login(client).status_code == 200
    return client


def test_requires_login(client):
    resp = client.get("/api/attendance/state")

    assert resp.status_code == 401
    assert resp.get_json()["success"] is False


def test_login_with_wrong_password(client):
    resp = login(client, password="nope")

    assert resp.status_code == 401
    assert resp.get_json()["message"] == "Invalid login credentials"


def test_me_returns_session_user(student_client):
    body = student_client.get("/api/auth/me").get_json()

    assert body["user"]["id"] == "student"
    assert body["user"]["role"] == Role.STUDENT.value


def test_buttons_disabled_until_location_reported(student_client):
    body = student_client.get("/api/attendance/state").get_json()

    assert body["is_checked_in"] is False
    assert body["can_check_in"] is False and body["can_check_out"] is False
    assert body["geofence"] is None


def test_location_failure_code(student_client):
    resp = student_client.post("/api/location", json={"error": "permission_denied"})

    assert resp.status_code == 400
    assert "permission denied" in resp.get_json()["message"]


def test_check_in_then_check_out(student_client, attendance_repo):
    loc = student_client.post("/api/location", json=INSIDE).get_json()
    assert loc["geofence"]["in_range"] is True

    resp = student_client.post("/api/attendance/check-in", json={"note": "  early shift "})
    body = resp.get_json()
    assert resp.status_code == 200
    assert body["record"]["note"] == "early shift"
    assert body["is_checked_in"] is True
    assert body["can_check_in"] is False and body["can_check_out"] is True

    again = student_client.post("/api/attendance/check-in", json={})
    assert again.status_code == 400
    assert again.get_json()["message"] == "already checked in"

    out = student_client.post("/api/attendance/check-out", json={})
    assert out.status_code == 200
    assert out.get_json()["is_checked_in"] is False

    assert [r.type for r in attendance_repo.records] == [AttendanceType.CHECK_IN, AttendanceType.CHECK_OUT]


def test_check_in_outside_geofence(student_client, attendance_repo):
    student_client.post("/api/location", json=FAR_AWAY)

    resp = student_client.post("/api/attendance/check-in", json={})

    assert resp.status_code == 400
    assert resp.get_json()["message"].startswith("outside allowed radius: got ")
    assert attendance_repo.append_calls == []


def test_persist_failure_is_502(student_client, attendance_repo, persist_error):
    student_client.post("/api/location", json=INSIDE)
    attendance_repo.fail_with = persist_error

    resp = student_client.post("/api/attendance/check-in", json={})
    body = resp.get_json()

    assert resp.status_code == 502
    assert body["error"].startswith("Save failed:")
    assert body["is_checked_in"] is False


def test_history_view_all_is_admin_only(student_client):
    assert student_client.get("/api/attendance/history?view=all").status_code == 403
    assert student_client.get("/api/attendance/history").status_code == 200


def test_history_grouped_by_day(student_client):
    student_client.post("/api/location", json=INSIDE)
    student_client.post("/api/attendance/check-in", json={})

    body = student_client.get("/api/attendance/history").get_json()

    assert len(body["groups"]) == 1
    assert body["groups"][0]["records"][0]["type"] == AttendanceType.CHECK_IN.value


def test_student_cannot_update_workplace(student_client, workplace_repo):
    resp = student_client.put("/api/workplace", json={"latitude": 1, "longitude": 2, "radius_meters": 100})

    assert resp.status_code == 403
    assert workplace_repo.writes == []


def test_admin_updates_workplace(client, workplace_repo):
    login(client, email="admin@example.com")

    resp = client.put("/api/workplace", json={"latitude": 10.0, "longitude": 106.0, "radius_meters": 300})

    assert resp.status_code == 200
    assert workplace_repo.writes[-1].radius_meters == 300
    assert client.get("/api/workplace").get_json()["workplace"]["latitude"] == 10.0


def test_admin_radius_out_of_bounds(client, workplace_repo):
    login(client, email="admin@example.com")

    resp = client.put("/api/workplace", json={"latitude": 10.0, "longitude": 106.0, "radius_meters": 10})

    assert resp.status_code == 400
    assert workplace_repo.writes == []


def test_workplace_publishes_location_timeout(student_client):
    body = student_client.get("/api/workplace").get_json()

    assert body["location_timeout_ms"] == 10_000
    assert body["workplace"]["radius_meters"] == 500


def test_summary(student_client):
    assert student_client.post("/api/attendance/summary", json={}).status_code == 400

    student_client.post("/api/location", json=INSIDE)
    student_client.post("/api/attendance/check-in", json={})
    resp = student_client.post("/api/attendance/summary", json={})

    assert resp.status_code == 200
    assert resp.get_json()["summary"] == MISSING_KEY_MESSAGE


def test_logout_clears_session(student_client):
    assert student_client.post("/api/auth/logout").status_code == 200
    assert student_client.get("/api/auth/me").status_code == 401


def test_register_logs_in(client):
    resp = client.post(
        "/api/auth/register",
        json={"email": "new@example.com", "password": "pw12345", "name": "New", "role": "teacher"},
    )

    assert resp.status_code == 200
    assert resp.get_json()["user"]["role"] == Role.TEACHER.value
    assert client.get("/api/auth/me").status_code == 200


def test_second_device_cannot_use_first_device_location(app, attendance_repo):
    phone, laptop = app.test_client(), app.test_client()
    login(phone)
    login(laptop)

    assert phone.post("/api/location", json=INSIDE).status_code == 200

    resp = laptop.post("/api/attendance/check-in", json={})

    assert resp.status_code == 400
    assert resp.get_json()["message"] == "location unavailable"
    assert attendance_repo.append_calls == []
    assert phone.get("/api/attendance/state").get_json()["can_check_in"] is True


def test_login_on_second_device_keeps_first_device_state(app):
    phone, laptop = app.test_client(), app.test_client()
    login(phone)
    phone.post("/api/location", json=INSIDE)

    login(laptop)

    body = phone.get("/api/attendance/state").get_json()
    assert body["location"]["latitude"] == INSIDE["latitude"]
    assert body["geofence"]["in_range"] is True


def test_expired_location_cannot_check_in(student_client, container, attendance_repo):
    student_client.post("/api/location", json=INSIDE)
    with student_client.session_transaction() as sess:
        token = sess["workspace_token"]
    container.sessions.get(token).state.location_received_ms -= 120_001

    resp = student_client.post("/api/attendance/check-in", json={})

    assert resp.status_code == 400
    assert "expired" in resp.get_json()["message"]
    assert resp.get_json()["location_error"] == resp.get_json()["message"]
    assert attendance_repo.append_calls == []
