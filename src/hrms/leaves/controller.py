from __future__ import annotations

from flask import Flask

from ..common.datetime_utils import parse_iso_date
from ..common.permissions import require_ownership_or_admin
from ..common.web import admin_required, current_principal, json_ok, login_required, own_employee_id, request_json
from ..container import Container


def register(app: Flask, container: Container) -> None:
    svc = container.leave_service

    @app.route("/leaves", methods=["POST"], endpoint="apply_leave")
    @login_required
    def apply_leave():
        data = request_json()
        leave = svc.apply(
            employee_id=own_employee_id(current_principal()),
            leave_type=data.get("leave_type", ""),
            start_date=parse_iso_date(data.get("start_date", "")),
            end_date=parse_iso_date(data.get("end_date", "")),
            reason=data.get("reason"),
        )
        return json_ok(leave, 201)

    @app.route("/leaves/mine", methods=["GET"], endpoint="my_leaves")
    @login_required
    def my_leaves():
        return json_ok(list(svc.list_mine(own_employee_id(current_principal()))))

    @app.route("/leaves/pending", methods=["GET"], endpoint="pending_leaves")
    @admin_required
    def pending_leaves():
        return json_ok(list(svc.list_pending()))

    @app.route("/leaves/<int:leave_id>", methods=["GET"], endpoint="leave_detail")
    @login_required
    def leave_detail(leave_id: int):
        leave = svc.get(leave_id)
        require_ownership_or_admin(current_principal(), leave.employee_id)
        return json_ok(leave)

    @app.route("/leaves/<int:leave_id>/approve", methods=["POST"], endpoint="approve_leave")
    @admin_required
    def approve_leave(leave_id: int):
        data = request_json()
        leave = svc.approve(
            leave_id=leave_id,
            approver_user_id=current_principal().user_id,
            comment=data.get("comments"),
        )
        return json_ok(leave)

    @app.route("/leaves/<int:leave_id>/reject", methods=["POST"], endpoint="reject_leave")
    @admin_required
    def reject_leave(leave_id: int):
        data = request_json()
        leave = svc.reject(
            leave_id=leave_id,
            approver_user_id=current_principal().user_id,
            reason=data.get("reason", ""),
        )
        return json_ok(leave)
