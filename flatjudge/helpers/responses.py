from flask import jsonify, make_response, request

from flatjudge.helpers.errors import ValidationError


def ok(data, status: int = 200):
    return jsonify({"success": True, "data": data}), status


def json_object() -> dict:
    """Request body as a dict. Missing, unparseable or non-object bodies are a 400."""
    data = request.get_json(force=True, silent=True)
    if not isinstance(data, dict):
        raise ValidationError("JSON object required")
    return data


def no_store(resp):
    """Polling endpoints must never be served from a cache."""
    resp = make_response(resp)
    resp.headers["Cache-Control"] = "no-store, no-cache, must-revalidate, max-age=0"
    resp.headers["Pragma"] = "no-cache"
    return resp
