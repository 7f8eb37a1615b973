"""
Pure scoring functions: no DB, no Flask, no clock.

Judge side:   total = sum(score * weight) over enabled rubric items,
              averaged across judges.
Audience side: mean star rating * audience weight.
Leaderboard:  judge average + weighted audience score, competition ranking.

The judge average is NOT normalised to 100 here; a rubric whose maximum is
100 gives a 0..100 judge scale. That is a rubric design choice.
"""
import math
from typing import Iterable

from flatjudge.helpers.schema import EvaluationItem, find_enabled, max_possible_score


def _field(obj, name):
    if isinstance(obj, dict):
        return obj[name]
    return getattr(obj, name)


# --- Judge scoring ---

def judge_total(item_scores: Iterable[dict], items: list[EvaluationItem]) -> float:
    """
    Weighted total for one judge sheet.

    Scores pointing at a disabled or unknown item contribute 0.
    fsum keeps the result independent of submission order.
    """
    parts = []
    for s in item_scores:
        item = find_enabled(items, s.get("item_id"))
        if item is None:
            continue
        parts.append(s["score"] * item.weight)
    return math.fsum(parts)


def max_judge_score(items: list[EvaluationItem]) -> float:
    return max_possible_score(items)


def normalize_judge_score(score: float, items: list[EvaluationItem]) -> float:
    """Express a judge total on a 0..100 scale against the current rubric."""
    max_score = max_judge_score(items)
    if max_score == 0:
        return 0.0
    return score / max_score * 100


def judge_average(judge_scores) -> float:
    scores = list(judge_scores)
    if not scores:
        return 0.0
    return sum(float(_field(s, "total_score")) for s in scores) / len(scores)


def normalize_weights(items: list[EvaluationItem]) -> list[EvaluationItem]:
    """
    Rescale enabled weights so max_judge_score comes out at (about) 100.

    Weights are rounded to one decimal, so the result can be a little off.
    Disabled items keep their weight.
    """
    current = max_judge_score(items)
    if current == 0:
        return list(items)

    factor = 100 / current
    out = []
    for item in items:
        weight = round(item.weight * factor, 1) if item.enabled else item.weight
        out.append(EvaluationItem(
            id=item.id,
            name=item.name,
            weight=weight,
            min_score=item.min_score,
            max_score=item.max_score,
            order=item.order,
            enabled=item.enabled,
        ))
    return out


# --- Audience scoring ---

def audience_average(votes) -> float:
    votes = list(votes)
    if not votes:
        return 0.0
    return sum(_field(v, "score") for v in votes) / len(votes)


def audience_weighted_score(votes, weight: float) -> float:
    return audience_average(votes) * weight


def max_audience_score(max_score: int, weight: float) -> float:
    return max_score * weight


# --- Combined ---

def total_score(judge_avg: float, audience_weighted: float) -> float:
    return judge_avg + audience_weighted


def rank(results: list[dict]) -> list[dict]:
    """
    Sort by total_score desc and assign competition ranks.

    Equal totals share a rank; the next distinct total gets its 1-based
    position, so [10, 10, 8] -> [1, 1, 3]. Input dicts are not mutated.
    """
    ordered = sorted(results, key=lambda r: -r["total_score"])

    ranked = []
    current = 1
    prev_total = None
    for idx, row in enumerate(ordered):
        if idx > 0 and row["total_score"] != prev_total:
            current = idx + 1
        prev_total = row["total_score"]
        ranked.append({**row, "rank": current})
    return ranked
