"""
Append-only submission ledger: judge scores and audience votes.

Uniqueness of (judge_id, rider_id) and (device_id, rider_id) is owned by
the DB unique constraints. The up-front lookups below only give a nicer
error; a concurrent duplicate still loses at commit time and comes back
as DuplicateSubmission.
"""
from datetime import datetime, timedelta
from typing import Optional

from flask import current_app
from sqlalchemy.exc import IntegrityError

from flatjudge.extensions import db
from flatjudge.models import JudgeScore, AudienceVote
from flatjudge.helpers.audit import add_log
from flatjudge.helpers.errors import (
    ValidationError,
    DuplicateSubmission,
    ScoreOutOfRange,
    VotingClosed,
    WrongRider,
)
from flatjudge.helpers.gate import get_settings, get_items, check_vote_allowed
from flatjudge.helpers.judges import get_judge_or_404
from flatjudge.helpers.riders import get_rider_or_404
from flatjudge.helpers.schema import find_enabled
from flatjudge.helpers.scoring import judge_total
from flatjudge.helpers.storage import commit, flush
from flatjudge.helpers.time import utc_now


def _require_id(value, field):
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field} is required")
    return value.strip()


def _as_number(value, field):
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"{field} must be a number")
    return value


# --- Judge scores ---

def get_judge_scores(rider_id: Optional[str] = None) -> list[JudgeScore]:
    q = JudgeScore.query
    if rider_id:
        q = q.filter(JudgeScore.rider_id == rider_id)
    return q.order_by(JudgeScore.submitted_at.desc()).all()


def get_judge_score(judge_id, rider_id) -> Optional[JudgeScore]:
    return JudgeScore.query.filter_by(judge_id=judge_id, rider_id=rider_id).first()


def has_judge_scored(judge_id, rider_id) -> bool:
    return get_judge_score(judge_id, rider_id) is not None


def _clean_item_scores(item_scores, items) -> list[dict]:
    if not isinstance(item_scores, list) or not item_scores:
        raise ValidationError("scores must be a non-empty list")

    cleaned = []
    seen = set()
    for raw in item_scores:
        if not isinstance(raw, dict):
            raise ValidationError("Each score must be an object with item_id and score")

        item_id = _require_id(raw.get("item_id"), "item_id")
        score = _as_number(raw.get("score"), f"score for {item_id}")

        if item_id in seen:
            raise ValidationError(f"Item {item_id} scored twice")
        seen.add(item_id)

        # Disabled / unknown items are accepted and simply count 0
        item = find_enabled(items, item_id)
        if item is not None and not item.accepts(score):
            raise ScoreOutOfRange(
                f"Score for {item.name} must be between {item.min_score} and {item.max_score}",
                item_id=item_id,
                score=score,
            )

        cleaned.append({"item_id": item_id, "score": score})
    return cleaned


def submit_judge_score(judge_id, rider_id, item_scores, now: Optional[datetime] = None) -> JudgeScore:
    """
    Record one judge's sheet for one rider. Final: there is no edit or delete.

    The total is computed against the rubric in force right now and stored;
    later rubric edits do not touch it.
    """
    judge_id = _require_id(judge_id, "judge_id")
    rider_id = _require_id(rider_id, "rider_id")

    judge = get_judge_or_404(judge_id)
    if not judge.is_active:
        raise ValidationError(f"Judge {judge_id} is not active")
    get_rider_or_404(rider_id)

    if has_judge_scored(judge_id, rider_id):
        current_app.logger.warning("Duplicate judge score judge_id=%s rider_id=%s", judge_id, rider_id)
        raise DuplicateSubmission("This judge has already scored this rider")

    items = get_items()
    cleaned = _clean_item_scores(item_scores, items)

    score = JudgeScore(
        judge_id=judge_id,
        rider_id=rider_id,
        scores=cleaned,
        total_score=judge_total(cleaned, items),
        submitted_at=now or utc_now(),
        locked=True,
    )
    db.session.add(score)

    try:
        flush("judge score")
    except IntegrityError:
        # a concurrent submission won the race
        raise DuplicateSubmission("This judge has already scored this rider")

    add_log("judge_score", "Judge score submitted", {"score": score.to_dict()}, user_id=judge_id)
    commit("judge score", duplicate_message="This judge has already scored this rider")

    current_app.logger.info(
        "Judge score saved judge_id=%s rider_id=%s total=%.2f", judge_id, rider_id, score.total_score
    )
    return score


# --- Audience votes ---

def get_audience_votes(rider_id: Optional[str] = None) -> list[AudienceVote]:
    q = AudienceVote.query
    if rider_id:
        q = q.filter(AudienceVote.rider_id == rider_id)
    return q.order_by(AudienceVote.timestamp.desc()).all()


def get_device_vote(device_id, rider_id) -> Optional[AudienceVote]:
    return AudienceVote.query.filter_by(device_id=device_id, rider_id=rider_id).first()


def has_device_voted(device_id, rider_id) -> bool:
    return get_device_vote(device_id, rider_id) is not None


def can_modify(vote: AudienceVote, now: Optional[datetime] = None) -> bool:
    """True strictly before the vote's modify-until deadline."""
    if vote.can_modify_until is None:
        return False
    return (now or utc_now()) < vote.can_modify_until


def submit_audience_vote(device_id, rider_id, score, ip=None, user_agent=None,
                         now: Optional[datetime] = None, enforce_deadline: bool = False) -> AudienceVote:
    """
    Cast (or, inside the modification window, replace) a device's vote.

    Order of checks: voting open -> current rider -> score range ->
    existing vote. enforce_deadline additionally rejects votes after the
    advisory per-run countdown.
    """
    device_id = _require_id(device_id, "device_id")
    rider_id = _require_id(rider_id, "rider_id")
    if isinstance(score, bool) or not isinstance(score, int):
        raise ValidationError("score must be an integer")

    now = now or utc_now()
    settings = get_settings()

    try:
        check_vote_allowed(settings, rider_id, now, enforce_deadline=enforce_deadline)
    except (VotingClosed, WrongRider) as e:
        current_app.logger.warning("Vote rejected device_id=%s rider_id=%s: %s", device_id, rider_id, e)
        raise

    if not settings.audience_min_score <= score <= settings.audience_max_score:
        raise ScoreOutOfRange(
            f"Score must be between {settings.audience_min_score} and {settings.audience_max_score}",
            score=score,
        )

    existing = get_device_vote(device_id, rider_id)
    if existing is not None:
        if settings.allow_vote_modification and can_modify(existing, now):
            previous = existing.score
            existing.score = score
            existing.timestamp = now
            existing.ip = ip
            existing.user_agent = user_agent

            add_log(
                "audience_vote",
                "Audience vote modified",
                {"vote": existing.to_dict(), "previous_score": previous},
                user_id=device_id,
            )
            commit("audience vote")

            current_app.logger.info(
                "Vote modified device_id=%s rider_id=%s %s -> %s", device_id, rider_id, previous, score
            )
            return existing

        current_app.logger.warning("Duplicate vote device_id=%s rider_id=%s", device_id, rider_id)
        raise DuplicateSubmission("This device has already voted for this rider")

    vote = AudienceVote(
        device_id=device_id,
        rider_id=rider_id,
        score=score,
        ip=ip,
        user_agent=user_agent,
        timestamp=now,
        can_modify_until=(
            now + timedelta(seconds=settings.modification_window_seconds)
            if settings.allow_vote_modification
            else None
        ),
    )
    db.session.add(vote)

    try:
        flush("audience vote")
    except IntegrityError:
        raise DuplicateSubmission("This device has already voted for this rider")

    add_log("audience_vote", "Audience vote submitted", {"vote": vote.to_dict()}, user_id=device_id)
    commit("audience vote", duplicate_message="This device has already voted for this rider")

    current_app.logger.info("Vote saved device_id=%s rider_id=%s score=%s", device_id, rider_id, score)
    return vote
