from __future__ import annotations

from dataclasses import asdict

from flask import Flask, request

from ..common.datetime_utils import parse_iso_date
from ..common.permissions import require_ownership_or_admin
from ..common.web import (
    admin_required,
    current_principal,
    json_ok,
    login_required,
    optional_date_arg,
    own_employee_id,
    request_json,
)
from ..container import Container
from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError
from .model import AttendanceRecord


def record_json(r: AttendanceRecord) -> dict:
    out = asdict(r)
    out["duration_hours"] = round(r.duration_hours, 2) if r.duration_hours is not None else None
    return out


def register(app: Flask, container: Container) -> None:
    svc = container.attendance_service

    @app.route("/attendance/check-in", methods=["POST"], endpoint="checkin")
    @login_required
    def checkin():
        record = svc.check_in(own_employee_id(current_principal()))
        return json_ok(record_json(record), 201)

    @app.route("/attendance/check-out", methods=["POST"], endpoint="checkout")
    @login_required
    def checkout():
        record = svc.check_out(own_employee_id(current_principal()))
        return json_ok(record_json(record))

    @app.route("/attendance/today", methods=["GET"], endpoint="attendance_today")
    @login_required
    def attendance_today():
        record = svc.today(own_employee_id(current_principal()))
        return json_ok(record_json(record) if record else None)

    @app.route("/attendance/history", methods=["GET"], endpoint="my_attendance_history")
    @login_required
    def my_attendance_history():
        rows = svc.history(
            own_employee_id(current_principal()),
            start_date=optional_date_arg("start"),
            end_date=optional_date_arg("end"),
        )
        return json_ok([record_json(r) for r in rows])

    @app.route("/attendance/employees/<int:employee_id>/history", methods=["GET"], endpoint="employee_attendance_history")
    @login_required
    def employee_attendance_history(employee_id: int):
        require_ownership_or_admin(current_principal(), employee_id)
        rows = svc.history(employee_id, start_date=optional_date_arg("start"), end_date=optional_date_arg("end"))
        return json_ok([record_json(r) for r in rows])

    @app.route("/attendance/date/<work_date>", methods=["GET"], endpoint="attendance_by_date")
    @login_required
    def attendance_by_date(work_date: str):
        record = svc.record_for(own_employee_id(current_principal()), parse_iso_date(work_date))
        return json_ok(record_json(record))

    @app.route("/attendance/stats", methods=["GET"], endpoint="attendance_stats")
    @login_required
    def attendance_stats():
        stats = svc.monthly_stats(own_employee_id(current_principal()), request.args.get("month", ""))
        return json_ok(stats.as_dict())

    @app.route("/attendance/override", methods=["POST"], endpoint="override_attendance")
    @admin_required
    def override_attendance():
        data = request_json()
        try:
            status = AttendanceStatus(str(data.get("status", "")).upper())
            employee_id = int(data.get("employee_id"))
        except (TypeError, ValueError):
            raise ValidationError("employee_id and a valid status are required")

        record = svc.override(
            employee_id=employee_id,
            work_date=parse_iso_date(data.get("date", "")),
            status=status,
            reason=data.get("reason"),
            admin_user_id=current_principal().user_id,
        )
        return json_ok(record_json(record))
