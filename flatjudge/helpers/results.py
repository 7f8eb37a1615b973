from flatjudge.helpers.gate import get_settings, get_items
from flatjudge.helpers.ledger import get_judge_scores, get_audience_votes
from flatjudge.helpers.riders import get_riders
from flatjudge.helpers.scoring import (
    judge_average,
    audience_average,
    audience_weighted_score,
    total_score,
    max_judge_score,
    max_audience_score,
    rank,
)


def compute_results(include_details: bool = True) -> list[dict]:
    """
    Build ranked leaderboard rows, fresh on every call (no cache, no writes).

    Rows are shaped like:
        {
          "rider_id", "rider",
          "judge_scores", "judge_count", "judge_average",
          "audience_votes", "vote_count", "audience_average",
          "audience_weighted_score",
          "total_score", "max_judge_score", "max_audience_score",
          "rank"
        }

    Scores/votes whose rider no longer exists are ignored.
    """
    riders = get_riders()
    if not riders:
        return []

    settings = get_settings()
    items = get_items(settings)
    weight = float(settings.audience_weight)

    scores_by_rider = {}
    for s in get_judge_scores():
        scores_by_rider.setdefault(s.rider_id, []).append(s)

    votes_by_rider = {}
    for v in get_audience_votes():
        votes_by_rider.setdefault(v.rider_id, []).append(v)

    judge_max = max_judge_score(items)
    audience_max = max_audience_score(settings.audience_max_score, weight)

    rows = []
    for rider in riders:
        scores = scores_by_rider.get(rider.id, [])
        votes = votes_by_rider.get(rider.id, [])

        judge_avg = judge_average(scores)
        weighted = audience_weighted_score(votes, weight)

        row = {
            "rider_id": rider.id,
            "rider": rider.to_dict(),
            "judge_count": len(scores),
            "judge_average": judge_avg,
            "vote_count": len(votes),
            "audience_average": audience_average(votes),
            "audience_weighted_score": weighted,
            "total_score": total_score(judge_avg, weighted),
            "max_judge_score": judge_max,
            "max_audience_score": audience_max,
        }
        if include_details:
            row["judge_scores"] = [s.to_dict() for s in scores]
            row["audience_votes"] = [v.to_dict() for v in votes]

        rows.append(row)

    return rank(rows)
