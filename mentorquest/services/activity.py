"""Append-only activity log."""
from datetime import date, datetime, time, timedelta, timezone

from sqlalchemy import select
from sqlalchemy.orm import Session

from mentorquest.models.activity import ACTIVITY_TYPES, ActivityLog


def record(
    db: Session,
    student_id: int,
    activity_type: str,
    *,
    question_id: int | None = None,
    badge_id: int | None = None,
    points_earned: int = 0,
    streak_count: int | None = None,
    at: datetime | None = None,
) -> ActivityLog:
    """Append one entry. Flushed with the caller's transaction."""
    if activity_type not in ACTIVITY_TYPES:
        raise ValueError(f"unknown activity type {activity_type!r}")
    entry = ActivityLog(
        student_id=student_id,
        activity_type=activity_type,
        question_id=question_id,
        badge_id=badge_id,
        points_earned=points_earned,
        streak_count=streak_count,
    )
    if at is not None:
        entry.activity_date = at
    db.add(entry)
    return entry


def recent_activity(db: Session, student_id: int, limit: int = 20) -> list[ActivityLog]:
    return list(
        db.scalars(
            select(ActivityLog)
            .where(ActivityLog.student_id == student_id)
            .order_by(ActivityLog.activity_date.desc(), ActivityLog.id.desc())
            .limit(limit)
        )
    )


def activity_for_day(db: Session, student_id: int, day: date) -> list[ActivityLog]:
    """Entries whose timestamp falls on the given UTC day."""
    start = datetime.combine(day, time.min, tzinfo=timezone.utc)
    end = start + timedelta(days=1)
    return list(
        db.scalars(
            select(ActivityLog)
            .where(
                ActivityLog.student_id == student_id,
                ActivityLog.activity_date >= start,
                ActivityLog.activity_date < end,
            )
            .order_by(ActivityLog.activity_date, ActivityLog.id)
        )
    )
