from __future__ import annotations

import io

from flask import Flask, request, send_file

from ..common.web import admin_required, approved_required, current_user, ok, payload
from ..container import Container
from ..scanning.qr_codes import make_badge_png


def register(app: Flask, container: Container) -> None:
    @app.route("/api/students", endpoint="list_students")
    @approved_required
    def list_students():
        students = container.student_service.list_students(grade=request.args.get("grade"))
        return ok(students=[s.to_public() for s in students])

    @app.route("/api/students/<student_id>", endpoint="get_student")
    @approved_required
    def get_student(student_id: str):
        return ok(student=container.student_service.get_student(student_id).to_public())

    @app.route("/api/students", methods=["POST"], endpoint="add_student")
    @admin_required
    def add_student():
        student = container.student_service.add_student(current=current_user(), form=payload())
        return ok(student=student.to_public(), message=f"{student.name} added"), 201

    @app.route("/api/students/<student_id>/qr", endpoint="student_qr")
    @approved_required
    def student_qr(student_id: str):
        student = container.student_service.get_student(student_id)
        return send_file(
            io.BytesIO(make_badge_png(student.student_id)),
            mimetype="image/png",
            as_attachment=bool(request.args.get("download")),
            download_name=f"{student.student_id}.png",
        )

    @app.route("/api/students/<student_id>/schedule", endpoint="student_schedule")
    @approved_required
    def student_schedule(student_id: str):
        entries = container.schedule_service.list_for_student(student_id)
        return ok(schedule=[e.to_public() for e in entries])
