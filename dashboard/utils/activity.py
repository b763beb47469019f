from typing import Optional

from flask import current_app
from flask_login import current_user
from sqlalchemy.exc import SQLAlchemyError

from dashboard.models import ActivityLog, db


def log_activity(activity: str, user_id: Optional[int] = None) -> None:
    """Record an activity performed by a user.

    A failed audit write is rolled back and logged; it never fails the
    action that triggered it.
    """
    if user_id is None:
        if current_user and not current_user.is_anonymous:
            user_id = current_user.id
    entry = ActivityLog(user_id=user_id, activity=activity)
    db.session.add(entry)
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("Failed to record activity %r", activity)
