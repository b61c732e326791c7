from __future__ import annotations

from datetime import timedelta

from flask import Flask, session

from ..common.web import admin_required, current_principal, json_ok, login_required, request_json
from ..container import Container
from ..core.constants import SESSION_DAYS
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    def _start_session(s_user, *, remember: bool) -> None:
        session.clear()
        session.permanent = remember
        app.permanent_session_lifetime = timedelta(days=SESSION_DAYS)

        session["user_id"] = s_user.user_id
        session["role"] = s_user.role.value
        session["employee_id"] = s_user.employee_id
        session["name"] = s_user.full_name

    @app.route("/auth/login", methods=["POST"], endpoint="login")
    def login():
        data = request_json()
        s_user = container.auth_service.authenticate(data.get("email", ""), data.get("password", ""))
        _start_session(s_user, remember=bool(data.get("remember_me")))
        return json_ok(s_user)

    @app.route("/auth/signup", methods=["POST"], endpoint="signup")
    def signup():
        data = request_json()
        employee = container.user_service.register_employee(
            email=data.get("email", ""),
            password=data.get("password", ""),
            first_name=data.get("first_name", ""),
            last_name=data.get("last_name", ""),
        )
        s_user = container.auth_service.authenticate(data.get("email", ""), data.get("password", ""))
        _start_session(s_user, remember=False)
        return json_ok({"user": s_user, "employee_id": employee.employee_id}, 201)

    @app.route("/auth/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return json_ok()

    @app.route("/auth/me", methods=["GET"], endpoint="me")
    @login_required
    def me():
        principal = current_principal()
        return json_ok(
            {
                "user_id": principal.user_id,
                "role": principal.role.value,
                "employee_id": principal.employee_id,
                "name": session.get("name"),
            }
        )

    @app.route("/users/<int:user_id>/active", methods=["PATCH"], endpoint="set_user_active")
    @admin_required
    def set_user_active(user_id: int):
        data = request_json()
        if not isinstance(data.get("is_active"), bool):
            raise ValidationError("is_active must be true or false")
        user = container.user_service.set_active(
            user_id=user_id,
            is_active=data["is_active"],
            actor_user_id=current_principal().user_id,
        )
        return json_ok({"user_id": user.user_id, "email": user.email, "role": user.role.value, "is_active": user.is_active})
