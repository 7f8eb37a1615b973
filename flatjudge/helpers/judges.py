from typing import Optional

from flask import current_app

from flatjudge.extensions import db
from flatjudge.models import Judge
from flatjudge.helpers.audit import add_log
from flatjudge.helpers.errors import ValidationError, NotFound
from flatjudge.helpers.storage import commit, flush


def get_judges() -> list[Judge]:
    return Judge.query.order_by(Judge.created_at.asc(), Judge.id.asc()).all()


def get_judge(judge_id) -> Optional[Judge]:
    if not judge_id:
        return None
    return db.session.get(Judge, judge_id)


def get_judge_or_404(judge_id) -> Judge:
    judge = get_judge(judge_id)
    if not judge:
        raise NotFound(f"Judge {judge_id} not found")
    return judge


def _clean_name(value):
    if not isinstance(value, str) or not value.strip():
        raise ValidationError("Judge name is required")
    return value.strip()


def create_judge(name, is_active=True, user_id=None) -> Judge:
    if not isinstance(is_active, bool):
        raise ValidationError("is_active must be true or false")

    judge = Judge(name=_clean_name(name), is_active=is_active)
    db.session.add(judge)
    flush("create judge")

    add_log("setting_change", "Judge created", {"judge": judge.to_dict()}, user_id=user_id)
    commit("create judge")

    current_app.logger.info("Judge created id=%s name=%r", judge.id, judge.name)
    return judge


def update_judge(judge_id, updates: dict, user_id=None) -> Judge:
    if not isinstance(updates, dict):
        raise ValidationError("Judge update must be an object")

    judge = get_judge_or_404(judge_id)

    cleaned = {}
    if "name" in updates:
        cleaned["name"] = _clean_name(updates["name"])
    if "is_active" in updates:
        if not isinstance(updates["is_active"], bool):
            raise ValidationError("is_active must be true or false")
        cleaned["is_active"] = updates["is_active"]

    for key, value in cleaned.items():
        setattr(judge, key, value)

    add_log("setting_change", "Judge updated", {"judge": judge.to_dict()}, user_id=user_id)
    commit("update judge")
    return judge


def delete_judge(judge_id, user_id=None) -> Judge:
    """Submitted scores stay; they are final regardless of the judge row."""
    judge = get_judge_or_404(judge_id)
    snapshot = judge.to_dict()

    db.session.delete(judge)
    add_log("setting_change", "Judge deleted", {"judge": snapshot}, user_id=user_id)
    commit("delete judge")

    current_app.logger.info("Judge deleted id=%s", judge_id)
    return judge
