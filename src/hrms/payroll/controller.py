from __future__ import annotations

from flask import Flask

from ..common.datetime_utils import parse_iso_date
from ..common.web import admin_required, current_principal, json_ok, login_required, own_employee_id, request_json
from ..container import Container


def register(app: Flask, container: Container) -> None:
    svc = container.payroll_service

    @app.route("/payroll/employees/<int:employee_id>", methods=["POST"], endpoint="create_payroll")
    @admin_required
    def create_payroll(employee_id: int):
        data = request_json()
        record = svc.create(
            employee_id=employee_id,
            base_salary=data.get("base_salary"),
            allowances=data.get("allowances", 0),
            deductions=data.get("deductions", 0),
            effective_date=parse_iso_date(data.get("effective_date", "")),
            actor_user_id=current_principal().user_id,
        )
        return json_ok(record, 201)

    @app.route("/payroll/employees/<int:employee_id>", methods=["GET"], endpoint="employee_payroll")
    @admin_required
    def employee_payroll(employee_id: int):
        return json_ok(list(svc.list_for_employee(employee_id)))

    @app.route("/payroll/mine", methods=["GET"], endpoint="my_payroll")
    @login_required
    def my_payroll():
        return json_ok(list(svc.list_for_employee(own_employee_id(current_principal()))))

    @app.route("/payroll/mine/<year_month>", methods=["GET"], endpoint="my_payroll_month")
    @login_required
    def my_payroll_month(year_month: str):
        return json_ok(svc.for_month(own_employee_id(current_principal()), year_month))
