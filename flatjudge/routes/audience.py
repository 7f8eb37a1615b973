from flask import Blueprint, request

from flatjudge.helpers.errors import ValidationError
from flatjudge.helpers.gate import voting_state
from flatjudge.helpers.ledger import get_audience_votes, get_device_vote, submit_audience_vote, can_modify
from flatjudge.helpers.responses import ok, no_store, json_object

audience_bp = Blueprint("audience", __name__)


def _client_ip() -> str:
    forwarded = request.headers.get("X-Forwarded-For", "")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.headers.get("X-Real-IP") or request.remote_addr or "unknown"


@audience_bp.route("/api/audience/vote", methods=["GET"])
def api_audience_votes():
    rider_id = (request.args.get("rider_id") or "").strip() or None
    device_id = (request.args.get("device_id") or "").strip() or None

    # "Have I already voted?" check from the vote page
    if device_id and rider_id:
        vote = get_device_vote(device_id, rider_id)
        return ok({
            "has_voted": vote is not None,
            "can_modify": bool(vote and can_modify(vote)),
            "vote": vote.to_dict() if vote else None,
        })

    return ok([v.to_dict() for v in get_audience_votes(rider_id)])


@audience_bp.route("/api/audience/vote", methods=["POST"])
def api_submit_vote():
    """
    Payload:
      {"rider_id": "rider_...", "score": 4, "device_id": "<fingerprint>"}
    """
    data = json_object()

    if not data.get("rider_id") or data.get("score") is None or not data.get("device_id"):
        raise ValidationError("rider_id, score and device_id are required")

    vote = submit_audience_vote(
        data.get("device_id"),
        data.get("rider_id"),
        data.get("score"),
        ip=_client_ip(),
        user_agent=request.headers.get("User-Agent", "unknown"),
    )
    return ok(vote.to_dict())


@audience_bp.route("/api/audience/state", methods=["GET"])
def api_voting_state():
    return no_store(ok(voting_state()))
