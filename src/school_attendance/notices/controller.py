from __future__ import annotations

from flask import Flask, jsonify, request
from flask_jwt_extended import jwt_required

from ..common.auth import current_principal
from ..common.http import json_object
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/notices", methods=["GET"], endpoint="api_notices")
    @jwt_required()
    def list_notices():
        notices = container.notice_service.list_notices(
            current_principal(),
            target_class=request.args.get("targetClass"),
            notice_type=request.args.get("type"),
            active=request.args.get("active"),
        )
        return jsonify([n.to_dict() for n in notices])

    @app.route("/api/notices", methods=["POST"], endpoint="api_create_notice")
    @jwt_required()
    def create_notice():
        data = json_object()
        notice = container.notice_service.create_notice(
            current_principal(),
            title=data.get("title"),
            content=data.get("content"),
            notice_type=data.get("type"),
            target_class=data.get("targetClass"),
            target_role=data.get("targetRole"),
            priority=data.get("priority"),
            expiry_date=data.get("expiryDate"),
        )
        return jsonify({"message": "Notice created successfully", "notice": notice.to_dict()}), 201

    @app.route("/api/notices/<int:notice_id>", methods=["PUT"], endpoint="api_update_notice")
    @jwt_required()
    def update_notice(notice_id: int):
        data = json_object()
        notice = container.notice_service.update_notice(current_principal(), notice_id, data)
        return jsonify({"message": "Notice updated successfully", "notice": notice.to_dict()})

    @app.route("/api/notices/<int:notice_id>", methods=["DELETE"], endpoint="api_delete_notice")
    @jwt_required()
    def delete_notice(notice_id: int):
        container.notice_service.delete_notice(current_principal(), notice_id)
        return jsonify({"message": "Notice deleted successfully"})
