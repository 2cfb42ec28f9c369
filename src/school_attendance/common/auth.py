"""Bearer token issuance and verification (flask-jwt-extended).

The token identity is the user id; role, name and class travel as extra
claims so a request never needs the identity store to rebuild its principal.
"""

from __future__ import annotations

from datetime import timedelta

from flask import Flask, jsonify
from flask_jwt_extended import JWTManager, create_access_token, get_jwt, get_jwt_identity

from ..core.constants import TOKEN_EXPIRES_HOURS
from ..core.enums import Role
from ..core.exceptions import AuthenticationError
from ..core.principal import Principal

jwt = JWTManager()


def init_jwt(app: Flask, *, secret_key: str, expires_hours: int = TOKEN_EXPIRES_HOURS) -> None:
    app.config["JWT_SECRET_KEY"] = secret_key
    app.config["JWT_ACCESS_TOKEN_EXPIRES"] = timedelta(hours=expires_hours)
    app.config["JWT_TOKEN_LOCATION"] = ["headers"]
    jwt.init_app(app)


@jwt.unauthorized_loader
def _missing_token(reason: str):
    return jsonify({"error": "Access token required"}), 401


@jwt.invalid_token_loader
def _invalid_token(reason: str):
    return jsonify({"error": "Invalid token"}), 403


@jwt.expired_token_loader
def _expired_token(jwt_header, jwt_payload):
    return jsonify({"error": "Invalid token"}), 403


def issue_token(principal: Principal) -> str:
    return create_access_token(
        identity=principal.user_id,
        additional_claims={
            "role": principal.role.value,
            "name": principal.name,
            "class": principal.class_name,
        },
    )


def current_principal() -> Principal:
    """Principal of the current request; call only inside ``jwt_required`` views."""

    claims = get_jwt()
    try:
        role = Role(claims.get("role"))
    except ValueError:
        raise AuthenticationError("Invalid token")
    return Principal(
        user_id=str(get_jwt_identity()),
        role=role,
        name=claims.get("name") or "",
        class_name=claims.get("class"),
    )
