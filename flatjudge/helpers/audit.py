from typing import Optional

from flask import current_app

from flatjudge.extensions import db
from flatjudge.models import LogEntry, LOG_TYPES
from flatjudge.helpers.storage import flush


def _log_limit() -> int:
    return int(current_app.config.get("LOG_LIMIT", 1000))


def add_log(log_type: str, action: str, data: Optional[dict] = None, user_id: Optional[str] = None) -> LogEntry:
    """
    Queue an audit entry in the caller's transaction and prune the oldest
    rows beyond LOG_LIMIT. The caller commits.
    """
    if log_type not in LOG_TYPES:
        raise ValueError(f"unknown log type {log_type!r}")

    entry = LogEntry(type=log_type, action=action, data=data or {}, user_id=user_id)
    db.session.add(entry)
    flush("audit log")

    # id of the newest row that falls outside the cap
    cutoff = (
        db.session.query(LogEntry.id)
        .order_by(LogEntry.id.desc())
        .offset(_log_limit())
        .limit(1)
        .scalar()
    )
    if cutoff is not None:
        LogEntry.query.filter(LogEntry.id <= cutoff).delete(synchronize_session=False)

    return entry


def get_logs(log_type: Optional[str] = None) -> list[LogEntry]:
    """Newest first, capped at LOG_LIMIT."""
    q = LogEntry.query
    if log_type:
        q = q.filter(LogEntry.type == log_type)
    return (
        q.order_by(LogEntry.timestamp.desc(), LogEntry.id.desc())
        .limit(_log_limit())
        .all()
    )
