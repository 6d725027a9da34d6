from __future__ import annotations

from flask import Flask, jsonify, request

from ..container import Container


def _summary_json(summary, *, include_days: bool) -> dict:
    data = summary.to_dict()
    if not include_days:
        data.pop("days", None)
    return data


def register(app: Flask, container: Container) -> None:
    payroll = container.payroll_service

    @app.get("/api/payroll/<int:year>/<int:month>")
    def payroll_month_all(year: int, month: int):
        include_days = request.args.get("days", "0") == "1"
        result = payroll.build_month_for_all(year, month)
        return jsonify(
            {
                "year": result.year,
                "month": result.month,
                "employees": [_summary_json(s, include_days=include_days) for s in result.summaries],
                "failures": result.failures,
            }
        )

    @app.get("/api/payroll/<int:year>/<int:month>/<employee_code>")
    def payroll_month_employee(year: int, month: int, employee_code: str):
        summary = payroll.build_month(employee_code, year, month)
        return jsonify(_summary_json(summary, include_days=True))
