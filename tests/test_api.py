from __future__ import annotations

from datetime import date

import pytest

from hrms.container import build_container
from hrms.core.enums import AttendanceStatus, LeaveStatus
from hrms.main import create_app


@pytest.fixture
def app(uow_factory):
    return create_app(build_container(uow_factory=uow_factory), settings_module="hrms.config.testing")


@pytest.fixture
def client(app):
    return app.test_client()


def _login(client, email, password="secret123"):
    resp = client.post("/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.get_json()
    return resp.get_json()["data"]


def test_requires_login(client):
    resp = client.get("/attendance/today")
    assert resp.status_code == 401
    assert resp.get_json()["success"] is False


def test_bad_credentials(client, employee):
    resp = client.post("/auth/login", json={"email": "jane@example.com", "password": "nope"})
    assert resp.status_code == 401


def test_check_in_flow(client, employee):
    _login(client, "jane@example.com")

    resp = client.post("/attendance/check-in")
    assert resp.status_code == 201
    assert resp.get_json()["data"]["status"] == "PRESENT"

    again = client.post("/attendance/check-in")
    assert again.status_code == 409
    assert again.get_json()["error"] == "AlreadyCheckedIn"

    out = client.post("/attendance/check-out")
    assert out.status_code == 200
    assert out.get_json()["data"]["check_out_time"] is not None


def test_check_out_without_check_in(client, employee):
    _login(client, "jane@example.com")
    resp = client.post("/attendance/check-out")
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "NoCheckInFound"


def test_employee_cannot_override_or_read_others(client, employee, admin):
    _login(client, "jane@example.com")

    resp = client.post(
        "/attendance/override",
        json={"employee_id": employee.employee_id, "date": "2025-03-03", "status": "PRESENT"},
    )
    assert resp.status_code == 403

    resp = client.get(f"/attendance/employees/{admin.employee_id}/history")
    assert resp.status_code == 403


def test_admin_override(client, employee, admin, store):
    _login(client, "admin@example.com")
    resp = client.post(
        "/attendance/override",
        json={"employee_id": employee.employee_id, "date": "2025-03-03", "status": "half_day", "reason": "Doctor"},
    )
    assert resp.status_code == 200
    assert resp.get_json()["data"]["status"] == "HALF_DAY"
    assert store.attendance_for(employee.employee_id, date(2025, 3, 3)).status == AttendanceStatus.HALF_DAY

    bad = client.post("/attendance/override", json={"employee_id": employee.employee_id, "date": "2025-03-03", "status": "LATE"})
    assert bad.status_code == 400


def test_leave_apply_and_approve(client, app, employee, admin, store):
    _login(client, "jane@example.com")
    resp = client.post(
        "/leaves",
        json={"leave_type": "PAID", "start_date": "2025-03-10", "end_date": "2025-03-11", "reason": "Trip"},
    )
    assert resp.status_code == 201
    leave = resp.get_json()["data"]
    assert leave["status"] == "PENDING"
    assert leave["start_date"] == "2025-03-10"

    overlap = client.post("/leaves", json={"leave_type": "SICK", "start_date": "2025-03-11", "end_date": "2025-03-11"})
    assert overlap.status_code == 409

    assert client.post(f"/leaves/{leave['leave_id']}/approve").status_code == 403

    admin_client = app.test_client()
    _login(admin_client, "admin@example.com")
    pending = admin_client.get("/leaves/pending").get_json()["data"]
    assert [p["leave"]["leave_id"] for p in pending] == [leave["leave_id"]]

    approved = admin_client.post(f"/leaves/{leave['leave_id']}/approve", json={"comments": "OK"})
    assert approved.status_code == 200
    body = approved.get_json()["data"]
    assert body["status"] == "APPROVED"
    assert body["approvals"][0]["comments"] == "OK"

    twice = admin_client.post(f"/leaves/{leave['leave_id']}/approve")
    assert twice.status_code == 400
    assert twice.get_json()["current_status"] == "APPROVED"

    assert store.leaves[leave["leave_id"]].status == LeaveStatus.APPROVED
    assert store.attendance_for(employee.employee_id, date(2025, 3, 11)).status == AttendanceStatus.LEAVE

    history = client.get("/attendance/history?start=2025-03-01&end=2025-03-31").get_json()["data"]
    assert [r["work_date"] for r in history] == ["2025-03-11", "2025-03-10"]


def test_invalid_date_range(client, employee):
    _login(client, "jane@example.com")
    resp = client.post("/leaves", json={"leave_type": "PAID", "start_date": "2025-03-12", "end_date": "2025-03-10"})
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "InvalidDateRange"


def test_reject_requires_reason(client, app, employee, admin, store):
    leave = store.add_leave(employee.employee_id, date(2025, 3, 10), date(2025, 3, 10))
    _login(client, "admin@example.com")

    assert client.post(f"/leaves/{leave.leave_id}/reject", json={}).status_code == 400
    resp = client.post(f"/leaves/{leave.leave_id}/reject", json={"reason": "Short staffed"})
    assert resp.get_json()["data"]["status"] == "REJECTED"


def test_payroll_amounts_are_strings(client, employee, admin):
    _login(client, "admin@example.com")
    resp = client.post(
        f"/payroll/employees/{employee.employee_id}",
        json={"base_salary": "3000", "allowances": "150.25", "effective_date": "2025-03-15"},
    )
    assert resp.status_code == 201
    data = resp.get_json()["data"]
    assert data["net_salary"] == "3150.25"
    assert data["month"] == "2025-03-01"


def test_signup_then_me(client):
    resp = client.post(
        "/auth/signup",
        json={"email": "new@example.com", "password": "hunter22", "first_name": "New", "last_name": "Hire"},
    )
    assert resp.status_code == 201

    me = client.get("/auth/me").get_json()["data"]
    assert me["role"] == "EMPLOYEE"
    assert me["name"] == "New Hire"

    client.post("/auth/logout")
    assert client.get("/auth/me").status_code == 401


def test_admin_reads_audit_trail_and_deactivates(client, app, employee, admin):
    _login(client, "admin@example.com")
    client.post(
        "/attendance/override",
        json={"employee_id": employee.employee_id, "date": "2025-03-03", "status": "ABSENT"},
    )
    record_id = client.get(f"/attendance/employees/{employee.employee_id}/history").get_json()["data"][0]["attendance_id"]

    trail = client.get(f"/audit/Attendance/{record_id}").get_json()["data"]
    assert [e["action"] for e in trail] == ["OVERRIDE"]
    assert client.get("/audit/Invoice/1").status_code == 400

    resp = client.patch(f"/users/{employee.user_id}/active", json={"is_active": False})
    assert resp.get_json()["data"]["is_active"] is False

    employee_client = app.test_client()
    assert employee_client.post("/auth/login", json={"email": "jane@example.com", "password": "secret123"}).status_code == 401
    assert employee_client.get("/audit/Attendance/1").status_code == 401
