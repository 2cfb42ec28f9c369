from __future__ import annotations

from flask import request

from ..core.exceptions import ValidationError


def json_object() -> dict:
    """Parsed JSON body of the request; a missing body is ``{}``, anything but an object is a 400."""

    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Invalid request body")
    return data
