from flask import Blueprint, request

from flatjudge.helpers.errors import ValidationError
from flatjudge.helpers.responses import ok, json_object
from flatjudge.helpers.riders import get_riders, create_rider, update_rider, delete_rider

riders_bp = Blueprint("riders", __name__)


@riders_bp.route("/api/riders", methods=["GET"])
def api_list_riders():
    return ok([r.to_dict() for r in get_riders()])


@riders_bp.route("/api/riders", methods=["POST"])
def api_create_rider():
    """
    Payload:
      {"name": "Taro Yamada", "rider_name": "TARO", "display_order": 3}

    rider_name and display_order are optional (defaults: name, last + 1).
    """
    data = json_object()

    rider = create_rider(
        data.get("name"),
        rider_name=data.get("rider_name"),
        display_order=data.get("display_order"),
    )
    return ok(rider.to_dict(), 201)


@riders_bp.route("/api/riders", methods=["PUT"])
def api_update_rider():
    data = json_object()

    rider_id = data.pop("id", None)
    if not rider_id:
        raise ValidationError("id is required")

    rider = update_rider(rider_id, data)
    return ok(rider.to_dict())


@riders_bp.route("/api/riders", methods=["DELETE"])
def api_delete_rider():
    rider_id = (request.args.get("id") or "").strip()
    if not rider_id:
        raise ValidationError("id is required")

    delete_rider(rider_id)
    return ok(True)
