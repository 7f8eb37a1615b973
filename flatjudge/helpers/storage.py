from typing import Optional

from flask import current_app
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from flatjudge.extensions import db
from flatjudge.helpers.errors import DuplicateSubmission, StorageFailure


def commit(action: str, duplicate_message: Optional[str] = None) -> None:
    """
    Commit the current session exactly once.

    - IntegrityError + duplicate_message -> DuplicateSubmission (unique key hit)
    - any other DB error                 -> StorageFailure (caller may retry)

    The session is rolled back on failure; nothing is retried here.
    """
    try:
        db.session.commit()
    except IntegrityError as e:
        db.session.rollback()
        if duplicate_message:
            raise DuplicateSubmission(duplicate_message) from e
        current_app.logger.error("DB integrity error during %s: %s", action, e)
        raise StorageFailure(f"Could not save ({action})") from e
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error("DB error during %s: %s", action, e)
        raise StorageFailure(f"Storage unavailable ({action})") from e


def flush(action: str) -> None:
    """Flush so defaults (ids, timestamps) are populated before logging."""
    try:
        db.session.flush()
    except IntegrityError:
        db.session.rollback()
        raise
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error("DB error during %s: %s", action, e)
        raise StorageFailure(f"Storage unavailable ({action})") from e
