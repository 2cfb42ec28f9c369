from __future__ import annotations

import logging

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from ..core.exceptions import DomainError

logger = logging.getLogger(__name__)


def register_error_handlers(app: Flask) -> None:
    """Every failure leaves the API as ``{"error": message}``."""

    @app.errorhandler(DomainError)
    def _domain_error(e: DomainError):
        return jsonify({"error": str(e)}), e.status_code

    @app.errorhandler(404)
    def _not_found(e):
        if request.path.startswith("/api"):
            return jsonify({"error": "API endpoint not found"}), 404
        return jsonify({"error": "Not found"}), 404

    @app.errorhandler(HTTPException)
    def _http_error(e: HTTPException):
        return jsonify({"error": e.description or e.name}), e.code

    @app.errorhandler(Exception)
    def _unexpected(e: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return jsonify({"error": "Internal server error"}), 500
