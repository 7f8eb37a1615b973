"""
Voting gate + contest settings singleton.

The gate is two fields on the settings row: voting_enabled and
current_rider_id. An audience vote is accepted only while voting is
enabled AND the vote targets the current rider. There are no timers
here; the deadline in voting_state() is advisory.

Settings updates are read-modify-write on a single row. Two admins
editing at the same moment => last writer wins. One operator is assumed.
"""
from datetime import datetime, timedelta, date
from typing import Optional

from flask import current_app
from sqlalchemy.exc import IntegrityError

from flatjudge import config
from flatjudge.extensions import db
from flatjudge.models import ContestSettings, Rider, SETTINGS_ID
from flatjudge.helpers.audit import add_log
from flatjudge.helpers.errors import ValidationError, NotFound, VotingClosed, WrongRider
from flatjudge.helpers.schema import parse_items, load_items, EvaluationItem, max_possible_score
from flatjudge.helpers.storage import commit, flush
from flatjudge.helpers.time import utc_now, iso

# sentinel: "rider not given" vs "rider explicitly cleared (None)"
_UNSET = object()


def _default_settings() -> ContestSettings:
    return ContestSettings(
        id=SETTINGS_ID,
        evaluation_items=[dict(i) for i in config.DEFAULT_EVALUATION_ITEMS],
        audience_weight=config.DEFAULT_AUDIENCE_WEIGHT,
        audience_min_score=config.DEFAULT_AUDIENCE_MIN_SCORE,
        audience_max_score=config.DEFAULT_AUDIENCE_MAX_SCORE,
        voting_enabled=False,
        current_rider_id=None,
        voting_deadline_seconds=config.DEFAULT_VOTING_DEADLINE_SECONDS,
        allow_vote_modification=config.DEFAULT_ALLOW_VOTE_MODIFICATION,
        modification_window_seconds=config.DEFAULT_MODIFICATION_WINDOW_SECONDS,
        contest_name=config.DEFAULT_CONTEST_NAME,
        contest_date=date.today().isoformat(),
    )


def get_settings() -> ContestSettings:
    """Return the settings row, creating it with defaults on first use."""
    settings = db.session.get(ContestSettings, SETTINGS_ID)
    if settings:
        return settings

    db.session.add(_default_settings())
    try:
        flush("create settings")
    except IntegrityError:
        # another request created it first
        return db.session.get(ContestSettings, SETTINGS_ID)
    commit("create settings")
    return db.session.get(ContestSettings, SETTINGS_ID)


def get_items(settings: Optional[ContestSettings] = None) -> list[EvaluationItem]:
    settings = settings or get_settings()
    return load_items(settings.evaluation_items)


def max_judge_score_for(settings: Optional[ContestSettings] = None) -> float:
    return max_possible_score(get_items(settings))


# --- validation of partial updates ---

def _as_int(key, value, minimum=None):
    if isinstance(value, bool):
        raise ValidationError(f"{key} must be an integer")
    try:
        as_float = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{key} must be an integer")
    if not as_float.is_integer():
        raise ValidationError(f"{key} must be an integer")
    out = int(as_float)
    if minimum is not None and out < minimum:
        raise ValidationError(f"{key} must be >= {minimum}")
    return out


def _as_float(key, value, minimum=None):
    if isinstance(value, bool):
        raise ValidationError(f"{key} must be a number")
    try:
        out = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{key} must be a number")
    if minimum is not None and out < minimum:
        raise ValidationError(f"{key} must be >= {minimum}")
    return out


def _as_bool(key, value):
    if not isinstance(value, bool):
        raise ValidationError(f"{key} must be true or false")
    return value


def _as_optional_str(key, value):
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{key} must be a string")
    return value.strip() or None


def _clean_contest_date(key, value):
    value = _as_optional_str(key, value)
    if value is None:
        return None
    try:
        datetime.strptime(value, "%Y-%m-%d")
    except ValueError:
        raise ValidationError(f"{key} must be YYYY-MM-DD")
    return value


def _clean_name(key, value):
    value = _as_optional_str(key, value)
    if not value:
        raise ValidationError(f"{key} cannot be empty")
    return value


_FIELD_CLEANERS = {
    "evaluation_items": lambda k, v: [i.to_dict() for i in parse_items(v)],
    "audience_weight": lambda k, v: _as_float(k, v, minimum=0),
    "audience_min_score": lambda k, v: _as_int(k, v),
    "audience_max_score": lambda k, v: _as_int(k, v),
    "voting_enabled": _as_bool,
    "current_rider_id": _as_optional_str,
    "voting_deadline_seconds": lambda k, v: _as_int(k, v, minimum=0),
    "allow_vote_modification": _as_bool,
    "modification_window_seconds": lambda k, v: _as_int(k, v, minimum=0),
    "contest_name": _clean_name,
    "contest_date": _clean_contest_date,
}

UPDATABLE_FIELDS = frozenset(_FIELD_CLEANERS)


def _clean_updates(settings: ContestSettings, updates: dict) -> dict:
    if not isinstance(updates, dict):
        raise ValidationError("Settings update must be an object")

    unknown = sorted(set(updates) - UPDATABLE_FIELDS)
    if unknown:
        raise ValidationError(f"Unknown settings field(s): {', '.join(unknown)}")

    cleaned = {k: _FIELD_CLEANERS[k](k, v) for k, v in updates.items()}

    lo = cleaned.get("audience_min_score", settings.audience_min_score)
    hi = cleaned.get("audience_max_score", settings.audience_max_score)
    if lo > hi:
        raise ValidationError("audience_min_score cannot be above audience_max_score")

    rider_id = cleaned.get("current_rider_id")
    if rider_id is not None and not db.session.get(Rider, rider_id):
        raise NotFound(f"Rider {rider_id} not found")

    return cleaned


def _apply(settings: ContestSettings, cleaned: dict, now: datetime) -> None:
    rider_changed = (
        "current_rider_id" in cleaned
        and cleaned["current_rider_id"] != settings.current_rider_id
    )
    enabled_after = cleaned.get("voting_enabled", settings.voting_enabled)
    # countdown restarts when voting opens or moves to another rider while open
    opening = bool(enabled_after) and (not settings.voting_enabled or rider_changed)
    for key, value in cleaned.items():
        setattr(settings, key, value)
    if opening:
        settings.voting_started_at = now


def update_settings(updates: dict, user_id: Optional[str] = None, now: Optional[datetime] = None) -> ContestSettings:
    """
    Merge a partial update into the settings row.

    Everything is validated before anything is written; a bad field
    rejects the whole update.
    """
    settings = get_settings()
    cleaned = _clean_updates(settings, updates)

    _apply(settings, cleaned, now or utc_now())
    add_log("setting_change", "Settings updated", {"updates": cleaned}, user_id=user_id)
    commit("update settings")

    current_app.logger.info("Settings updated fields=%s", sorted(cleaned))
    return settings


# --- gate transitions ---

def set_voting_enabled(enabled: bool, rider_id=_UNSET, user_id: Optional[str] = None,
                       now: Optional[datetime] = None) -> ContestSettings:
    """
    Open/close voting. Passing rider_id also selects that rider
    (None clears it); leaving it out keeps the current rider.
    """
    if not isinstance(enabled, bool):
        raise ValidationError("enabled must be true or false")

    settings = get_settings()

    updates = {"voting_enabled": enabled}
    if rider_id is not _UNSET:
        updates["current_rider_id"] = rider_id
    cleaned = _clean_updates(settings, updates)

    if (
        enabled
        and settings.voting_enabled
        and cleaned.get("current_rider_id", settings.current_rider_id) == settings.current_rider_id
    ):
        # already open for this rider
        return settings

    _apply(settings, cleaned, now or utc_now())
    add_log(
        "voting_control",
        "Voting started" if enabled else "Voting stopped",
        {"rider_id": settings.current_rider_id},
        user_id=user_id,
    )
    commit("voting control")

    current_app.logger.info(
        "Voting %s rider_id=%s", "started" if enabled else "stopped", settings.current_rider_id
    )
    return settings


def start_voting(rider_id=_UNSET, user_id=None, now=None) -> ContestSettings:
    return set_voting_enabled(True, rider_id, user_id=user_id, now=now)


def stop_voting(user_id=None, now=None) -> ContestSettings:
    """Close voting. The current rider stays selected."""
    return set_voting_enabled(False, user_id=user_id, now=now)


def select_rider(rider_id: Optional[str], user_id=None, now: Optional[datetime] = None) -> ContestSettings:
    """Point the gate at a rider (or None). Allowed while voting is open."""
    settings = get_settings()
    cleaned = _clean_updates(settings, {"current_rider_id": rider_id})

    _apply(settings, cleaned, now or utc_now())
    add_log("voting_control", "Rider selected", {"rider_id": settings.current_rider_id}, user_id=user_id)
    commit("select rider")

    current_app.logger.info("Current rider set to %s", settings.current_rider_id)
    return settings


def voting_deadline(settings: ContestSettings) -> Optional[datetime]:
    if not settings.voting_enabled or not settings.voting_started_at:
        return None
    return settings.voting_started_at + timedelta(seconds=settings.voting_deadline_seconds or 0)


def voting_state(now: Optional[datetime] = None) -> dict:
    """Gate snapshot for polling clients. remaining_seconds is advisory."""
    settings = get_settings()
    now = now or utc_now()
    deadline = voting_deadline(settings)

    remaining = 0
    if deadline is not None:
        remaining = max(0, int((deadline - now).total_seconds()))

    return {
        "is_open": bool(settings.voting_enabled),
        "current_rider_id": settings.current_rider_id,
        "deadline_timestamp": iso(deadline),
        "remaining_seconds": remaining,
    }


def check_vote_allowed(settings: ContestSettings, rider_id: str, now: datetime,
                       enforce_deadline: bool = False) -> None:
    """Raise VotingClosed / WrongRider unless the gate admits a vote for rider_id."""
    if not settings.voting_enabled:
        raise VotingClosed("Voting is not open right now")

    if rider_id != settings.current_rider_id:
        raise WrongRider("Votes for this rider are not being accepted right now")

    if enforce_deadline:
        deadline = voting_deadline(settings)
        if deadline is not None and now >= deadline:
            raise VotingClosed("The voting window for this run has ended")
