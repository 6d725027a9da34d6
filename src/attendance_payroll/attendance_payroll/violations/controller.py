from __future__ import annotations

from flask import Flask, jsonify, request

from ..container import Container
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    rules = container.rules_service

    @app.get("/api/violation-rules")
    def violation_rules_get():
        return jsonify({"rules": rules.get_active().to_dict()})

    @app.post("/api/violation-rules")
    def violation_rules_activate():
        payload = request.get_json(silent=True)
        if not isinstance(payload, dict):
            raise ValidationError("JSON object body required")
        stored = rules.activate(payload)
        return jsonify({"success": True, "rules": stored.to_dict()}), 201
