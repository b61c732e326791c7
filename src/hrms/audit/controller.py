from __future__ import annotations

from flask import Flask

from ..common.web import admin_required, json_ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/audit/<entity_type>/<int:entity_id>", methods=["GET"], endpoint="audit_trail")
    @admin_required
    def audit_trail(entity_type: str, entity_id: int):
        return json_ok(list(container.audit_service.for_entity(entity_type, entity_id)))
