from flask import Blueprint, request

from flatjudge.helpers.errors import ValidationError
from flatjudge.helpers.judges import get_judges
from flatjudge.helpers.ledger import get_judge_scores, submit_judge_score, has_judge_scored
from flatjudge.helpers.responses import ok, json_object

judge_bp = Blueprint("judge", __name__)


@judge_bp.route("/api/judge/score", methods=["GET"])
def api_judge_scores():
    rider_id = (request.args.get("rider_id") or "").strip() or None
    return ok([s.to_dict() for s in get_judge_scores(rider_id)])


@judge_bp.route("/api/judge/score", methods=["POST"])
def api_submit_judge_score():
    """
    Payload:
      {
        "judge_id": "judge_...",
        "rider_id": "rider_...",
        "scores": [{"item_id": "make_rate", "score": 4}, ...]
      }

    One submission per judge per rider; a second one gets 409.
    """
    data = json_object()

    score = submit_judge_score(data.get("judge_id"), data.get("rider_id"), data.get("scores"))
    return ok(score.to_dict(), 201)


@judge_bp.route("/api/judge/status", methods=["GET"])
def api_judge_status():
    judge_id = (request.args.get("judge_id") or "").strip()
    rider_id = (request.args.get("rider_id") or "").strip()

    # No filters: list judges for the judge picker
    if not judge_id and not rider_id:
        return ok({"judges": [j.to_dict() for j in get_judges()]})

    if not judge_id or not rider_id:
        raise ValidationError("judge_id and rider_id are both required")

    return ok({
        "judge_id": judge_id,
        "rider_id": rider_id,
        "has_scored": has_judge_scored(judge_id, rider_id),
    })
