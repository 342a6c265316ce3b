"""Streak and points accumulator: runs once per first-solve event.

Streak counters move at most once per UTC calendar day:

    no previous activity  -> current = 1, max = 1
    gap of exactly 1 day  -> current += 1, max = max(max, current)
    gap of 2+ days        -> current = 1
    same day              -> unchanged

Points and topic counters are not day-gated.
"""
import logging

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from mentorquest.core.clock import Clock, days_between
from mentorquest.models.question import Question, QuestionTag
from mentorquest.models.user import TopicStat, User
from mentorquest.services import activity

logger = logging.getLogger(__name__)


def next_streak(current: int, maximum: int, days_since_last_active: int | None) -> tuple[int, int]:
    """Return (current_streak, max_streak) after activity with the given day gap."""
    if days_since_last_active is None:
        return 1, 1
    if days_since_last_active == 1:
        current += 1
        return current, max(maximum, current)
    if days_since_last_active > 1:
        return 1, maximum
    return current, maximum


def update_streak(db: Session, student: User, clock: Clock) -> int:
    now = clock.now()
    gap = None
    if student.last_active_date is not None:
        gap = days_between(student.last_active_date, now)
    student.current_streak, student.max_streak = next_streak(
        student.current_streak or 0, student.max_streak or 0, gap
    )
    student.last_active_date = now
    activity.record(
        db, student.id, "streak_maintained", streak_count=student.current_streak, at=now
    )
    return student.current_streak


def get_or_create_topic_stat(student: User, topic: str) -> TopicStat:
    for stat in student.topic_stats:
        if stat.topic == topic:
            return stat
    stat = TopicStat(topic=topic, total_questions=0, solved_questions=0, attempted_questions=0)
    student.topic_stats.append(stat)
    return stat


def active_question_count(db: Session, topic: str) -> int:
    return db.scalar(
        select(func.count(func.distinct(Question.id)))
        .join(QuestionTag, QuestionTag.question_id == Question.id)
        .where(QuestionTag.tag == topic, Question.is_active.is_(True))
    ) or 0


def record_topic_attempt(db: Session, student: User, topics) -> None:
    """First contact with a question. Only used when full topic tracking is on."""
    for topic in topics:
        stat = get_or_create_topic_stat(student, topic)
        stat.attempted_questions += 1
        stat.total_questions = active_question_count(db, topic)


def on_question_solved(
    db: Session,
    student: User,
    points_earned: int,
    topics,
    clock: Clock,
    track_topic_attempts: bool = False,
) -> None:
    student.total_points = (student.total_points or 0) + points_earned
    for topic in topics:
        stat = get_or_create_topic_stat(student, topic)
        stat.solved_questions += 1
        if track_topic_attempts:
            stat.total_questions = active_question_count(db, topic)
    streak = update_streak(db, student, clock)
    logger.info(
        "student %s +%s points (total %s), streak %s",
        student.id, points_earned, student.total_points, streak,
    )
