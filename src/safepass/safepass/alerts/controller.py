from __future__ import annotations

from flask import Flask, request

from ..common.web import approved_required, current_user, ok, payload, roles_required
from ..container import Container
from ..core.enums import Role


def register(app: Flask, container: Container) -> None:
    staff = roles_required(Role.ADMIN, Role.TEACHER, Role.MONITOR, Role.NURSE)

    @app.route("/api/alerts", endpoint="alerts")
    @approved_required
    def alerts():
        container.state.ensure_loaded()
        user = current_user()
        active = container.alert_service.alerts_for(user)
        body = {"alerts": [a.to_public() for a in active]}
        if user.role != Role.DRIVER:
            body["resolved"] = [a.to_public() for a in container.alert_service.resolved_alerts()]
            body["counts"] = container.alert_service.counts()
        return ok(**body)

    @app.route("/api/alerts/<alert_id>/resolve", methods=["POST"], endpoint="resolve_alert")
    @staff
    def resolve_alert(alert_id: str):
        alert = container.alert_service.resolve(alert_id)
        return ok(alert=alert.to_public())

    @app.route("/api/unscanned", endpoint="unscanned")
    @staff
    def unscanned():
        container.state.ensure_loaded()
        return ok(students=[u.to_public() for u in container.alert_service.unscanned()])

    @app.route("/api/unscanned/<student_id>/notify", methods=["POST"], endpoint="notify_unscanned")
    @staff
    def notify_unscanned(student_id: str):
        entry = container.alert_service.notify_unscanned(student_id)
        return ok(message=f"Notification sent for {entry.student.name}")

    @app.route("/api/unscanned/<student_id>/mark", methods=["POST"], endpoint="mark_manually")
    @staff
    def mark_manually(student_id: str):
        result = container.alert_service.mark_manually(student_id, payload().get("action", "in"), current_user())
        return ok(**result.to_public()), 201

    @app.route("/api/tracker", endpoint="tracker")
    @staff
    def tracker():
        container.state.ensure_loaded()
        snapshot = container.alert_service.tracker(grade=request.args.get("grade"))
        return ok(**snapshot.to_public())
