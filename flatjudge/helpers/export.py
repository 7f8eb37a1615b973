import csv
import json
from io import StringIO

from flask import current_app

from flatjudge.helpers.errors import ValidationError
from flatjudge.helpers.ledger import get_judge_scores, get_audience_votes
from flatjudge.helpers.results import compute_results
from flatjudge.helpers.riders import get_riders
from flatjudge.helpers.time import to_contest_tz

EXPORT_TYPES = ("riders", "judge_scores", "audience_votes", "results", "all")

# Excel needs the BOM to pick up UTF-8 (rider names are often non-ASCII)
BOM = "\ufeff"


def _fmt_dt(dt) -> str:
    local = to_contest_tz(dt, current_app.config.get("CONTEST_TIMEZONE"))
    return local.isoformat(timespec="seconds") if local else ""


def _to_csv(header, rows) -> str:
    buf = StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(header)
    writer.writerows(rows)
    return buf.getvalue()


def riders_csv() -> str:
    return _to_csv(
        ["id", "name", "rider_name", "display_order", "created_at"],
        [
            [r.id, r.name, r.rider_name or r.name, r.display_order, _fmt_dt(r.created_at)]
            for r in get_riders()
        ],
    )


def judge_scores_csv() -> str:
    return _to_csv(
        ["id", "judge_id", "rider_id", "total_score", "submitted_at", "scores"],
        [
            [
                s.id,
                s.judge_id,
                s.rider_id,
                s.total_score,
                _fmt_dt(s.submitted_at),
                json.dumps(s.scores, separators=(",", ":")),
            ]
            for s in get_judge_scores()
        ],
    )


def audience_votes_csv() -> str:
    return _to_csv(
        ["id", "rider_id", "score", "device_id", "ip", "user_agent", "timestamp"],
        [
            [v.id, v.rider_id, v.score, v.device_id, v.ip or "", v.user_agent or "", _fmt_dt(v.timestamp)]
            for v in get_audience_votes()
        ],
    )


def results_csv() -> str:
    return _to_csv(
        [
            "rank", "rider_id", "name", "rider_name",
            "judge_average", "audience_score", "vote_count", "total_score",
        ],
        [
            [
                r["rank"],
                r["rider_id"],
                r["rider"]["name"],
                r["rider"]["rider_name"],
                f"{r['judge_average']:.2f}",
                f"{r['audience_weighted_score']:.2f}",
                r["vote_count"],
                f"{r['total_score']:.2f}",
            ]
            for r in compute_results(include_details=False)
        ],
    )


def export_csv(export_type: str = "all") -> tuple[str, str]:
    """
    Return (content, filename) for one export type, BOM included.

    "all" concatenates the four tables with section headers.
    """
    if export_type not in EXPORT_TYPES:
        raise ValidationError(f"Unknown export type: {export_type}")

    if export_type == "riders":
        content, filename = riders_csv(), "riders.csv"
    elif export_type == "judge_scores":
        content, filename = judge_scores_csv(), "judge_scores.csv"
    elif export_type == "audience_votes":
        content, filename = audience_votes_csv(), "audience_votes.csv"
    elif export_type == "results":
        content, filename = results_csv(), "results.csv"
    else:
        content = "\n".join([
            "=== Riders ===",
            riders_csv(),
            "=== Judge scores ===",
            judge_scores_csv(),
            "=== Audience votes ===",
            audience_votes_csv(),
            "=== Results ===",
            results_csv(),
        ])
        filename = "all_data.csv"

    return BOM + content, filename
