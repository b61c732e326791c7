from __future__ import annotations

from dataclasses import asdict

from flask import Flask

from ..common.permissions import require_ownership_or_admin
from ..common.web import admin_required, current_principal, json_ok, login_required, own_employee_id, request_json
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import ValidationError
from .model import Employee


def employee_json(e: Employee) -> dict:
    out = asdict(e)
    out["full_name"] = e.full_name
    return out


def register(app: Flask, container: Container) -> None:
    @app.route("/employees/me", methods=["GET"], endpoint="my_profile")
    @login_required
    def my_profile():
        employee = container.employee_service.get(own_employee_id(current_principal()))
        return json_ok(employee_json(employee))

    @app.route("/employees/<int:employee_id>", methods=["GET"], endpoint="employee_detail")
    @login_required
    def employee_detail(employee_id: int):
        require_ownership_or_admin(current_principal(), employee_id)
        return json_ok(employee_json(container.employee_service.get(employee_id)))

    @app.route("/employees/<int:employee_id>", methods=["PATCH"], endpoint="update_employee")
    @admin_required
    def update_employee(employee_id: int):
        data = request_json()
        employee = container.employee_service.update_profile(
            employee_id=employee_id,
            actor_user_id=current_principal().user_id,
            department=data.get("department"),
            designation=data.get("designation"),
            phone=data.get("phone"),
        )
        return json_ok(employee_json(employee))

    @app.route("/employees", methods=["GET"], endpoint="list_employees")
    @admin_required
    def list_employees():
        return json_ok([employee_json(e) for e in container.employee_service.list_all()])

    @app.route("/employees", methods=["POST"], endpoint="create_employee")
    @admin_required
    def create_employee():
        data = request_json()
        try:
            role = Role(str(data.get("role") or Role.EMPLOYEE.value).upper())
        except ValueError:
            raise ValidationError("Role must be ADMIN or EMPLOYEE")

        employee = container.user_service.register_employee(
            email=data.get("email", ""),
            password=data.get("password", ""),
            first_name=data.get("first_name", ""),
            last_name=data.get("last_name", ""),
            role=role,
            department=data.get("department"),
            designation=data.get("designation"),
            phone=data.get("phone"),
            actor_user_id=current_principal().user_id,
        )
        return json_ok(employee_json(employee), 201)
