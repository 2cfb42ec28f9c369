from __future__ import annotations

from flask import Flask, jsonify, request
from flask_jwt_extended import jwt_required

from ..common.auth import current_principal
from ..common.http import json_object
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/classes", methods=["GET"], endpoint="api_classes")
    @jwt_required()
    def list_classes():
        classes = container.class_service.list_classes(current_principal())
        return jsonify([c.to_dict() for c in classes])

    @app.route("/api/classes", methods=["POST"], endpoint="api_create_class")
    @jwt_required()
    def create_class():
        data = json_object()
        room = container.class_service.create_class(
            current_principal(),
            class_name=data.get("className"),
            teacher_id=data.get("teacher"),
            subjects=data.get("subjects"),
        )
        return jsonify({"message": "Class created successfully", "class": room.to_dict()}), 201

    @app.route("/api/classes/<int:class_id>", methods=["DELETE"], endpoint="api_delete_class")
    @jwt_required()
    def delete_class(class_id: int):
        container.class_service.delete_class(current_principal(), class_id)
        return jsonify({"message": "Class deleted successfully"})

    @app.route("/api/classes/<class_name>/stats", methods=["GET"], endpoint="api_class_stats")
    @jwt_required()
    def class_stats(class_name: str):
        stats = container.report_service.class_stats(
            current_principal(),
            class_name,
            start_date=request.args.get("startDate"),
            end_date=request.args.get("endDate"),
        )
        return jsonify(stats)
