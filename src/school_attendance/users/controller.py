from __future__ import annotations

from flask import Flask, jsonify, request
from flask_jwt_extended import jwt_required

from ..common.auth import current_principal, issue_token
from ..common.http import json_object
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/login", methods=["POST"], endpoint="api_login")
    def login():
        data = json_object()
        user = container.auth_service.authenticate(data.get("userId"), data.get("password"), data.get("role"))
        token = issue_token(container.auth_service.principal_for(user))
        return jsonify(
            {
                "message": "Login successful",
                "token": token,
                "user": {
                    "userId": user.user_id,
                    "name": user.name,
                    "role": user.role.value,
                    "class": user.class_name,
                    "subject": user.subject,
                },
            }
        )

    @app.route("/api/register", methods=["POST"], endpoint="api_register")
    @jwt_required()
    def register_user():
        data = json_object()
        user = container.user_service.register(
            current_principal(),
            user_id=data.get("userId"),
            password=data.get("password"),
            role=data.get("role"),
            name=data.get("name"),
            email=data.get("email"),
            class_name=data.get("class"),
            subject=data.get("subject"),
        )
        return jsonify({"message": "User created successfully", "user": user.to_public()}), 201

    @app.route("/api/students", methods=["GET"], endpoint="api_students")
    @jwt_required()
    def list_students():
        class_filter = request.args.get("classFilter") or request.args.get("class")
        students = container.user_service.list_students(current_principal(), class_filter=class_filter)
        return jsonify([s.to_public() for s in students])

    @app.route("/api/students/<class_name>", methods=["GET"], endpoint="api_students_in_class")
    @jwt_required()
    def list_students_in_class(class_name: str):
        students = container.user_service.list_students_in_class(current_principal(), class_name)
        return jsonify([s.to_public() for s in students])

    @app.route("/api/students/<student_id>", methods=["DELETE"], endpoint="api_delete_student")
    @jwt_required()
    def delete_student(student_id: str):
        container.user_service.delete_student(current_principal(), student_id)
        return jsonify({"message": "Student deleted successfully"})

    @app.route("/api/teachers", methods=["GET"], endpoint="api_teachers")
    @jwt_required()
    def list_teachers():
        teachers = container.user_service.list_teachers(current_principal())
        return jsonify([t.to_public() for t in teachers])

    @app.route("/api/teachers/<teacher_id>", methods=["DELETE"], endpoint="api_delete_teacher")
    @jwt_required()
    def delete_teacher(teacher_id: str):
        container.user_service.delete_teacher(current_principal(), teacher_id)
        return jsonify({"message": "Teacher deleted successfully"})

    @app.route("/api/profile", methods=["GET"], endpoint="api_profile")
    @jwt_required()
    def get_profile():
        return jsonify(container.user_service.get_profile(current_principal()).to_public())

    @app.route("/api/profile", methods=["PUT"], endpoint="api_update_profile")
    @jwt_required()
    def update_profile():
        data = json_object()
        user = container.user_service.update_profile(
            current_principal(),
            name=data.get("name"),
            email=data.get("email"),
            current_password=data.get("currentPassword"),
            new_password=data.get("newPassword"),
        )
        return jsonify({"message": "Profile updated successfully", "user": user.to_public()})
