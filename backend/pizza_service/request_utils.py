# Overview: Request parsing helpers shared by route modules.

from __future__ import annotations

from flask import request

from .errors import ValidationError


def json_body() -> dict:
    """Parsed JSON object body, or ValidationError."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("request body must be a JSON object")
    return data


def query_int(name: str) -> int | None:
    value = request.args.get(name)
    if value is None or value == "":
        return None
    try:
        return int(value)
    except ValueError:
        raise ValidationError(f"{name} must be an integer")
