"""Input validation helpers."""

from __future__ import annotations

from flask import jsonify
from pydantic import ValidationError


def jsonable_errors(exc: ValidationError) -> list[dict]:
    errors = exc.errors()
    for err in errors:
        err.pop("url", None)
        if "ctx" in err and isinstance(err["ctx"], dict):
            err["ctx"] = {k: str(v) for k, v in err["ctx"].items()}
    return errors


def validation_response(exc: ValidationError):
    """400 response body for a failed schema validation."""
    return (
        jsonify({"ok": False, "error": "validation_error", "details": jsonable_errors(exc)}),
        400,
    )
