from flask import Blueprint, request, make_response

from flatjudge.helpers.audit import get_logs
from flatjudge.helpers.errors import ValidationError
from flatjudge.helpers.export import export_csv
from flatjudge.helpers.gate import get_settings, update_settings, set_voting_enabled
from flatjudge.helpers.judges import get_judges, create_judge, update_judge, delete_judge
from flatjudge.helpers.responses import ok, no_store, json_object

admin_bp = Blueprint("admin", __name__)


# --- Settings ---

@admin_bp.route("/api/admin/settings", methods=["GET"])
def api_get_settings():
    return no_store(ok(get_settings().to_dict()))


@admin_bp.route("/api/admin/settings", methods=["POST"])
def api_update_settings():
    """Partial update; unknown keys are rejected."""
    data = json_object()

    settings = update_settings(data)
    return ok(settings.to_dict())


# --- Voting gate ---

@admin_bp.route("/api/admin/voting", methods=["GET"])
def api_voting_status():
    settings = get_settings()
    return no_store(ok({
        "voting_enabled": bool(settings.voting_enabled),
        "current_rider_id": settings.current_rider_id,
    }))


@admin_bp.route("/api/admin/voting", methods=["POST"])
def api_voting_control():
    """
    Payload:
      {"enabled": true, "rider_id": "rider_..."}

    rider_id is optional; send null to clear the current rider.
    """
    data = json_object()

    enabled = data.get("enabled")
    if not isinstance(enabled, bool):
        raise ValidationError("enabled is required (true/false)")

    if "rider_id" in data:
        settings = set_voting_enabled(enabled, data["rider_id"])
    else:
        settings = set_voting_enabled(enabled)

    return ok(settings.to_dict())


# --- Logs / export ---

@admin_bp.route("/api/admin/logs", methods=["GET"])
def api_logs():
    log_type = (request.args.get("type") or "").strip() or None
    return ok([e.to_dict() for e in get_logs(log_type)])


@admin_bp.route("/api/admin/export", methods=["GET"])
def api_export():
    export_type = (request.args.get("type") or "all").strip()
    content, filename = export_csv(export_type)

    resp = make_response(content)
    resp.headers["Content-Type"] = "text/csv; charset=utf-8"
    resp.headers["Content-Disposition"] = f'attachment; filename="{filename}"'
    return resp


# --- Judges ---

@admin_bp.route("/api/admin/judges", methods=["GET"])
def api_list_judges():
    return ok([j.to_dict() for j in get_judges()])


@admin_bp.route("/api/admin/judges", methods=["POST"])
def api_create_judge():
    data = json_object()
    judge = create_judge(data.get("name"), is_active=data.get("is_active", True))
    return ok(judge.to_dict(), 201)


@admin_bp.route("/api/admin/judges", methods=["PUT"])
def api_update_judge():
    data = json_object()

    judge_id = data.pop("id", None)
    if not judge_id:
        raise ValidationError("id is required")

    return ok(update_judge(judge_id, data).to_dict())


@admin_bp.route("/api/admin/judges", methods=["DELETE"])
def api_delete_judge():
    judge_id = (request.args.get("id") or "").strip()
    if not judge_id:
        raise ValidationError("id is required")

    delete_judge(judge_id)
    return ok(True)
