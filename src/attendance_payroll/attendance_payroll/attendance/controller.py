from __future__ import annotations

from flask import Flask, jsonify, request

from ..container import Container
from ..core.enums import short_code
from ..core.exceptions import ValidationError
from .model import DayOverride


def _override_json(o: DayOverride) -> dict:
    return {
        "empCode": o.employee_code,
        "date": o.work_date.isoformat(),
        "status": o.status.value if o.status else None,
        "code": short_code(o.status),
        "reason": o.reason,
        "checkInTime": o.check_in.strftime("%H:%M") if o.check_in else None,
        "checkOutTime": o.check_out.strftime("%H:%M") if o.check_out else None,
        "violationExcused": o.excused,
        "lateExcused": o.late_excused,
        "earlyExcused": o.early_excused,
    }


def register(app: Flask, container: Container) -> None:
    corrections = container.corrections_service

    @app.post("/api/attendance/corrections")
    def attendance_correct_day():
        payload = request.get_json(silent=True)
        if not isinstance(payload, dict):
            raise ValidationError("JSON object body required")
        override = corrections.correct(
            payload.get("empCode"),
            payload.get("date"),
            status=payload.get("status"),
            reason=payload.get("reason"),
            check_in=payload.get("checkInTime"),
            check_out=payload.get("checkOutTime"),
            excused=bool(payload.get("violationExcused", False)),
            late_excused=payload.get("lateExcused"),
            early_excused=payload.get("earlyExcused"),
        )
        return jsonify(_override_json(override)), 201
