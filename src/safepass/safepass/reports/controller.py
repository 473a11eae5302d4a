from __future__ import annotations

from datetime import date
from typing import Optional

from flask import Flask, Response, request

from ..common.datetime_utils import parse_iso_date
from ..common.web import ok, roles_required
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import ValidationError
from .export import grade_report_csv, scan_history_csv


def _day_arg() -> Optional[date]:
    raw = request.args.get("date")
    if not raw:
        return None
    try:
        return parse_iso_date(raw)
    except ValueError:
        raise ValidationError("Date must be YYYY-MM-DD") from None


def _csv_response(text: str, filename: str) -> Response:
    return Response(
        text,
        mimetype="text/csv",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


def register(app: Flask, container: Container) -> None:
    reporters = roles_required(Role.ADMIN, Role.TEACHER, Role.MONITOR, Role.NURSE)

    @app.route("/api/reports/attendance", endpoint="attendance_report")
    @reporters
    def attendance_report():
        report = container.report_service.attendance_report(_day_arg())
        if request.args.get("format") == "csv":
            return _csv_response(grade_report_csv(report), f"attendance-report-{report.day.isoformat()}.csv")
        return ok(report=report.to_public())

    @app.route("/api/reports/analytics", endpoint="analytics")
    @reporters
    def analytics():
        return ok(analytics=container.report_service.analytics(_day_arg()))

    @app.route("/api/reports/history", endpoint="scan_history")
    @reporters
    def scan_history():
        day = _day_arg()
        rows = container.report_service.scan_history(
            day,
            search=request.args.get("search", ""),
            sort_field=request.args.get("sort", "timestamp"),
            direction=request.args.get("direction", "desc"),
        )
        if request.args.get("format") == "csv":
            stamp = (day or container.clock().date()).isoformat()
            return _csv_response(scan_history_csv(rows), f"scan-history-{stamp}.csv")
        return ok(scans=[r.to_public() for r in rows])
