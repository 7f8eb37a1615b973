from flask import Blueprint, request, current_app

from flatjudge.helpers.responses import ok, no_store
from flatjudge.helpers.results import compute_results

scores_bp = Blueprint("scores", __name__)


@scores_bp.route("/api/scores", methods=["GET"])
def api_results():
    """Ranked leaderboard. Polled by the results screen, so never cached."""
    details = (request.args.get("details") or "1").strip() not in ("0", "false")

    rows = compute_results(include_details=details)
    current_app.logger.debug("Results computed rows=%s details=%s", len(rows), details)

    return no_store(ok(rows))
