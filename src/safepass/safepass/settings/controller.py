from __future__ import annotations

from flask import Flask, Response, request

from ..common.validators import parse_enum
from ..common.web import admin_required, approved_required, current_user, ok, payload
from ..container import Container
from ..core.enums import UploadType
from ..imports.templates import template_filename


def register(app: Flask, container: Container) -> None:
    @app.route("/api/settings", endpoint="get_settings")
    @approved_required
    def get_settings():
        return ok(settings=container.settings_service.get().to_public())

    @app.route("/api/settings/alert-thresholds", methods=["PUT"], endpoint="update_alert_thresholds")
    @admin_required
    def update_alert_thresholds():
        thresholds = container.settings_service.update_alert_thresholds(current=current_user(), form=payload())
        return ok(alert_thresholds=thresholds.to_public(), message="Alert settings saved")

    @app.route("/api/settings/notifications", methods=["PUT"], endpoint="update_notification_settings")
    @admin_required
    def update_notification_settings():
        settings = container.settings_service.update_notification_settings(current=current_user(), form=payload())
        return ok(notification_settings=settings.to_public(), message="Notification settings saved")

    @app.route("/api/settings/profile-fields", methods=["POST"], endpoint="add_profile_field")
    @admin_required
    def add_profile_field():
        fields = container.settings_service.add_profile_field(current=current_user(), name=payload().get("name", ""))
        return ok(student_profile_fields=list(fields)), 201

    @app.route("/api/settings/profile-fields/<name>", methods=["DELETE"], endpoint="remove_profile_field")
    @admin_required
    def remove_profile_field(name: str):
        fields = container.settings_service.remove_profile_field(current=current_user(), name=name)
        return ok(student_profile_fields=list(fields))

    @app.route("/api/imports/<upload_type>", methods=["POST"], endpoint="import_csv")
    @admin_required
    def import_csv(upload_type: str):
        file = request.files.get("file")
        text = file.read().decode("utf-8-sig") if file else (payload().get("csv") or "")
        if request.args.get("remote"):
            result = container.import_service.process_remote(current=current_user(), text=text, upload_type=upload_type)
        else:
            result = container.import_service.import_local(current=current_user(), text=text, upload_type=upload_type)
        return ok(**result.to_public())

    @app.route("/api/imports/<upload_type>/template", endpoint="import_template")
    @admin_required
    def import_template(upload_type: str):
        kind = parse_enum(UploadType, upload_type, "Upload type")
        return Response(
            container.import_service.template(kind),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={template_filename(kind)}"},
        )
