from __future__ import annotations

from flask import Flask, jsonify, request
from flask_jwt_extended import jwt_required

from ..common.auth import current_principal
from ..common.datetime_utils import now_local
from ..container import Container
from ..core.constants import API_VERSION


def register(app: Flask, container: Container) -> None:
    @app.route("/api/health", methods=["GET"], endpoint="api_health")
    def health():
        return jsonify({"status": "OK", "timestamp": now_local().isoformat(), "version": API_VERSION})

    @app.route("/api/dashboard", methods=["GET"], endpoint="api_dashboard")
    @jwt_required()
    def dashboard():
        return jsonify(container.report_service.dashboard(current_principal()))

    @app.route("/api/reports/attendance", methods=["GET"], endpoint="api_attendance_report")
    @jwt_required()
    def attendance_report():
        rows = container.report_service.attendance_report(
            current_principal(),
            start_date=request.args.get("startDate"),
            end_date=request.args.get("endDate"),
            class_name=request.args.get("className"),
        )
        return jsonify(rows)

    @app.route("/api/reports/teacher-attendance", methods=["GET"], endpoint="api_teacher_attendance_report")
    @jwt_required()
    def teacher_attendance_report():
        report = container.report_service.teacher_attendance_report(
            current_principal(),
            start_date=request.args.get("startDate"),
            end_date=request.args.get("endDate"),
            teacher_id=request.args.get("teacherId"),
        )
        return jsonify(report)

    @app.route("/api/admin/statistics", methods=["GET"], endpoint="api_admin_statistics")
    @jwt_required()
    def admin_statistics():
        return jsonify(container.report_service.system_statistics(current_principal()))
