from __future__ import annotations

from flask import Flask, Response, jsonify, request
from flask_jwt_extended import jwt_required

from ..common.auth import current_principal
from ..common.http import json_object
from ..container import Container
from .export import records_to_csv


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance", methods=["GET"], endpoint="api_attendance")
    @jwt_required()
    def list_attendance():
        records = container.attendance_service.list_records(
            current_principal(),
            class_name=request.args.get("class"),
            on_date=request.args.get("date"),
            student_id=request.args.get("studentId"),
            marked_by=request.args.get("markedBy"),
        )
        return jsonify([r.to_dict() for r in records])

    @app.route("/api/attendance/mark", methods=["POST"], endpoint="api_mark_attendance")
    @jwt_required()
    def mark_attendance():
        data = json_object()
        count = container.attendance_service.mark(
            current_principal(),
            class_name=data.get("class"),
            date=data.get("date"),
            subject=data.get("subject"),
            students=data.get("students") or [],
        )
        return jsonify({"message": "Attendance marked successfully", "records": count})

    @app.route("/api/attendance/bulk-mark", methods=["POST"], endpoint="api_bulk_mark_attendance")
    @jwt_required()
    def bulk_mark_attendance():
        data = json_object()
        count = container.attendance_service.bulk_mark(current_principal(), data.get("attendanceData"))
        return jsonify({"message": f"{count} attendance records processed successfully", "records": count})

    @app.route("/api/attendance/export", methods=["GET"], endpoint="api_export_attendance")
    @jwt_required()
    def export_attendance():
        records = container.attendance_service.export(
            current_principal(),
            start_date=request.args.get("startDate"),
            end_date=request.args.get("endDate"),
            class_name=request.args.get("className"),
        )
        if request.args.get("format") == "csv":
            return Response(
                records_to_csv(records),
                mimetype="text/csv",
                headers={"Content-Disposition": "attachment; filename=attendance_export.csv"},
            )
        return jsonify([r.to_dict() for r in records])

    @app.route("/api/teacher-attendance", methods=["GET"], endpoint="api_teacher_attendance")
    @jwt_required()
    def list_teacher_attendance():
        records = container.teacher_attendance_service.list_records(
            current_principal(),
            teacher_id=request.args.get("teacherId"),
            start_date=request.args.get("startDate"),
            end_date=request.args.get("endDate"),
        )
        return jsonify([r.to_dict() for r in records])

    @app.route("/api/teacher-attendance/mark", methods=["POST"], endpoint="api_mark_teacher_attendance")
    @jwt_required()
    def mark_teacher_attendance():
        data = json_object()
        record = container.teacher_attendance_service.mark(
            current_principal(),
            teacher_id=data.get("teacherId"),
            date=data.get("date"),
            status=data.get("status"),
            notes=data.get("notes"),
        )
        return jsonify({"message": "Teacher attendance marked successfully", "record": record.to_dict()})
