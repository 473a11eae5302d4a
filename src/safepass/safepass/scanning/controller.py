from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import now_local
from ..common.web import approved_required, current_user, json_error, ok, payload
from ..container import Container
from .qr_codes import decode_badge


def register(app: Flask, container: Container) -> None:
    @app.route("/api/scan/locations", endpoint="scan_locations")
    @approved_required
    def scan_locations():
        return ok(locations=list(container.scan_service.locations))

    @app.route("/api/scans", methods=["POST"], endpoint="submit_scan")
    @approved_required
    def submit_scan():
        data = payload()
        result = container.scan_service.submit_scan(
            data.get("student_id", ""), data.get("location", ""), data.get("action", "in"), current_user()
        )
        return ok(**result.to_public()), 201

    @app.route("/api/scans/quick", methods=["POST"], endpoint="quick_scan")
    @approved_required
    def quick_scan():
        data = payload()
        result = container.scan_service.quick_scan(data.get("student_id", ""), data.get("action", "in"), current_user())
        return ok(**result.to_public()), 201

    @app.route("/api/scans/image", methods=["POST"], endpoint="scan_image")
    @approved_required
    def scan_image():
        file = request.files.get("image")
        if not file:
            return json_error("Please upload a badge image", 400)
        student_id = decode_badge(file.stream)
        result = container.scan_service.submit_scan(
            student_id, request.form.get("location", ""), request.form.get("action", "in"), current_user()
        )
        return ok(**result.to_public()), 201

    @app.route("/api/scans/recent", endpoint="recent_scans")
    @approved_required
    def recent_scans():
        container.state.ensure_loaded()
        limit = request.args.get("limit", default=10, type=int)
        events = container.state.scan_events[: max(limit, 0)]
        return ok(scans=[e.to_public() for e in events])

    @app.route("/api/allergy-alerts", endpoint="allergy_alerts")
    @approved_required
    def allergy_alerts():
        return ok(alerts=[a.to_public() for a in container.allergy_board.active(now_local())])

    @app.route("/api/allergy-alerts/<alert_id>/acknowledge", methods=["POST"], endpoint="acknowledge_allergy_alert")
    @approved_required
    def acknowledge_allergy_alert(alert_id: str):
        if not container.allergy_board.acknowledge(alert_id):
            return json_error("Alert not found", 404)
        return ok(message="Alert acknowledged")
