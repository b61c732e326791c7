"""Flask glue shared by the feature controllers: session principal, JSON
responses and the mapping from domain errors to HTTP status codes."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from functools import wraps
from typing import Any, Optional

from flask import Flask, jsonify, request, session
from flask.json.provider import DefaultJSONProvider
from werkzeug.exceptions import HTTPException

from ..core.enums import Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DomainError,
    InvalidStateTransition,
    NotFoundError,
    ValidationError,
)
from .datetime_utils import parse_iso_date
from .permissions import require_role

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR: tuple[tuple[type, int], ...] = (
    (ValidationError, 400),
    (InvalidStateTransition, 400),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (ConflictError, 409),
)


@dataclass(frozen=True)
class SessionPrincipal:
    user_id: int
    role: Role
    employee_id: Optional[int]


class HRMSJSONProvider(DefaultJSONProvider):
    """ISO-8601 dates and string decimals instead of Flask's HTTP-date format."""

    @staticmethod
    def default(o: Any) -> Any:
        if isinstance(o, (date, datetime)):
            return o.isoformat()
        if isinstance(o, Decimal):
            return str(o)
        return DefaultJSONProvider.default(o)


def current_principal() -> SessionPrincipal:
    if "user_id" not in session:
        raise AuthenticationError("Please log in to continue")
    employee_id = session.get("employee_id")
    return SessionPrincipal(
        user_id=int(session["user_id"]),
        role=Role(session.get("role")),
        employee_id=int(employee_id) if employee_id is not None else None,
    )


def own_employee_id(principal: SessionPrincipal) -> int:
    if principal.employee_id is None:
        raise NotFoundError("Employee not found")
    return principal.employee_id


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        current_principal()
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        require_role(current_principal(), Role.ADMIN)
        return view(*args, **kwargs)

    return wrapper


def json_ok(data: Any = None, status: int = 200):
    return jsonify({"success": True, "data": data}), status


def request_json() -> dict:
    return request.get_json(silent=True) or {}


def optional_date_arg(name: str) -> Optional[date]:
    value = (request.args.get(name) or "").strip()
    return parse_iso_date(value) if value else None


def error_status(err: DomainError) -> int:
    for err_type, status in _STATUS_BY_ERROR:
        if isinstance(err, err_type):
            return status
    return 400


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(err: DomainError):
        body = {"success": False, "error": type(err).__name__, "message": str(err)}
        if isinstance(err, InvalidStateTransition) and err.current_status:
            body["current_status"] = err.current_status
        return jsonify(body), error_status(err)

    @app.errorhandler(HTTPException)
    def handle_http_error(err: HTTPException):
        return jsonify({"success": False, "error": err.name, "message": err.description}), err.code

    @app.errorhandler(Exception)
    def handle_unexpected(err: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return jsonify({"success": False, "error": "Unexpected", "message": "Unexpected server error"}), 500
