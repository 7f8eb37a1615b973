from typing import Optional

from flask import current_app

from flatjudge.extensions import db
from flatjudge.models import Rider
from flatjudge.helpers.audit import add_log
from flatjudge.helpers.errors import ValidationError, NotFound
from flatjudge.helpers.storage import commit, flush


def get_riders() -> list[Rider]:
    """All riders in running order."""
    return Rider.query.order_by(Rider.display_order.asc(), Rider.created_at.asc()).all()


def get_rider(rider_id) -> Optional[Rider]:
    if not rider_id:
        return None
    return db.session.get(Rider, rider_id)


def get_rider_or_404(rider_id) -> Rider:
    rider = get_rider(rider_id)
    if not rider:
        raise NotFound(f"Rider {rider_id} not found")
    return rider


def _clean_name(value, field="name", required=True):
    if value is None and not required:
        return None
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"Rider {field} is required")
    return value.strip()


def _clean_order(value):
    if isinstance(value, bool):
        raise ValidationError("display_order must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError("display_order must be an integer")


def _next_display_order() -> int:
    top = db.session.query(db.func.max(Rider.display_order)).scalar()
    return (top or 0) + 1


def create_rider(name, rider_name=None, display_order=None, user_id=None) -> Rider:
    name = _clean_name(name)
    rider_name = _clean_name(rider_name, "rider_name", required=False) or name
    order = _clean_order(display_order) if display_order is not None else _next_display_order()

    rider = Rider(name=name, rider_name=rider_name, display_order=order)
    db.session.add(rider)
    flush("create rider")

    add_log("setting_change", "Rider created", {"rider": rider.to_dict()}, user_id=user_id)
    commit("create rider")

    current_app.logger.info("Rider created id=%s name=%r order=%s", rider.id, rider.name, rider.display_order)
    return rider


def update_rider(rider_id, updates: dict, user_id=None) -> Rider:
    if not isinstance(updates, dict):
        raise ValidationError("Rider update must be an object")

    rider = get_rider_or_404(rider_id)

    cleaned = {}
    if "name" in updates:
        cleaned["name"] = _clean_name(updates["name"])
    if "rider_name" in updates:
        cleaned["rider_name"] = _clean_name(updates["rider_name"], "rider_name", required=False)
    if "display_order" in updates:
        cleaned["display_order"] = _clean_order(updates["display_order"])

    for key, value in cleaned.items():
        setattr(rider, key, value)

    add_log("setting_change", "Rider updated", {"rider": rider.to_dict()}, user_id=user_id)
    commit("update rider")

    current_app.logger.info("Rider updated id=%s fields=%s", rider.id, sorted(cleaned))
    return rider


def delete_rider(rider_id, user_id=None) -> Rider:
    """
    Remove a rider. Their judge scores and audience votes are left in
    place (orphaned) and simply stop showing up in results.
    """
    rider = get_rider_or_404(rider_id)
    snapshot = rider.to_dict()

    db.session.delete(rider)
    add_log("setting_change", "Rider deleted", {"rider": snapshot}, user_id=user_id)
    commit("delete rider")

    current_app.logger.info("Rider deleted id=%s", rider_id)
    return rider
