from __future__ import annotations

from flask import Flask, jsonify, request

from ..container import Container
from ..core.exceptions import ValidationError


def _report_json(report) -> dict:
    return {
        "empCode": report.employee_code,
        "year": report.year,
        "duplicatesRemoved": [r.leave_date.isoformat() for r in report.duplicates_removed],
        "orphansRemoved": [r.leave_date.isoformat() for r in report.orphans_removed],
        "takenByQuarter": {str(q): n for q, n in report.taken_by_quarter.items()},
    }


def register(app: Flask, container: Container) -> None:
    ledger = container.leave_service

    @app.get("/api/leaves/<employee_code>/<int:year>")
    def leave_balances(employee_code: str, year: int):
        return jsonify({"empCode": employee_code, "quarters": [b.to_dict() for b in ledger.year_balances(employee_code, year)]})

    @app.post("/api/leaves")
    def leave_grant():
        payload = request.get_json(silent=True) or {}
        if not isinstance(payload, dict):
            raise ValidationError("JSON object body required")
        balance = ledger.grant(payload.get("empCode"), payload.get("date"), reason=payload.get("reason"))
        return jsonify(balance.to_dict()), 201

    @app.delete("/api/leaves/<employee_code>/<leave_date>")
    def leave_revoke(employee_code: str, leave_date: str):
        return jsonify(ledger.revoke(employee_code, leave_date).to_dict())

    @app.post("/api/leaves/<employee_code>/<int:year>/reconcile")
    def leave_reconcile(employee_code: str, year: int):
        return jsonify(_report_json(ledger.reconcile(employee_code, year)))
