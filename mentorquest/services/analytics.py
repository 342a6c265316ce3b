"""Admin analytics: platform counts, top performers, popular questions, submission trends."""
from datetime import timedelta

from sqlalchemy import case, func, select
from sqlalchemy.orm import Session

from mentorquest.core.clock import Clock, as_day
from mentorquest.models.activity import ActivityLog
from mentorquest.models.badge import Badge
from mentorquest.models.question import Question
from mentorquest.models.submission import Submission
from mentorquest.models.user import ROLE_STUDENT, User
from mentorquest.schemas.admin import (
    AdminDashboardSchema,
    AdminOverviewSchema,
    PopularQuestionSchema,
    SubmissionTrendSchema,
    TopPerformerSchema,
)
from mentorquest.schemas.stats import ActivitySchema

TREND_DAYS = 30


def overview(db: Session) -> AdminOverviewSchema:
    return AdminOverviewSchema(
        total_users=db.scalar(select(func.count(User.id)).where(User.role == ROLE_STUDENT)) or 0,
        total_questions=db.scalar(select(func.count(Question.id)).where(Question.is_active.is_(True))) or 0,
        total_submissions=db.scalar(select(func.count(Submission.id))) or 0,
        total_badges=db.scalar(select(func.count(Badge.id)).where(Badge.is_active.is_(True))) or 0,
    )


def top_performers(db: Session, limit: int = 10) -> list[TopPerformerSchema]:
    students = db.scalars(
        select(User)
        .where(User.role == ROLE_STUDENT)
        .order_by(User.total_points.desc(), User.name.asc(), User.id.asc())
        .limit(limit)
    )
    return [
        TopPerformerSchema(
            id=s.id, name=s.name, avatar=s.avatar, total_points=s.total_points, current_streak=s.current_streak
        )
        for s in students
    ]


def popular_questions(db: Session, limit: int = 10) -> list[PopularQuestionSchema]:
    """Most submitted questions; success rate is the solved share of their submissions."""
    count = func.count(Submission.id).label("submission_count")
    solved = func.sum(case((Submission.status == "solved", 1), else_=0)).label("solved")
    rows = db.execute(
        select(Question.id, Question.title, Question.difficulty, count, solved)
        .join(Submission, Submission.question_id == Question.id)
        .group_by(Question.id, Question.title, Question.difficulty)
        .order_by(count.desc(), Question.id.asc())
        .limit(limit)
    ).all()
    return [
        PopularQuestionSchema(
            question_id=row.id,
            title=row.title,
            difficulty=row.difficulty,
            submission_count=row.submission_count,
            success_rate=round((row.solved or 0) / row.submission_count, 4),
        )
        for row in rows
    ]


def submission_trends(db: Session, clock: Clock, days: int = TREND_DAYS) -> list[SubmissionTrendSchema]:
    """Per-day submission and solve counts over the trailing window, oldest day first.

    Days without submissions are left out.
    """
    since = clock.now() - timedelta(days=days)
    rows = db.execute(
        select(Submission.submitted_at, Submission.status).where(Submission.submitted_at >= since)
    ).all()
    buckets: dict = {}
    for submitted_at, status in rows:
        day = as_day(submitted_at)
        count, solved = buckets.get(day, (0, 0))
        buckets[day] = (count + 1, solved + (1 if status == "solved" else 0))
    return [
        SubmissionTrendSchema(day=day, count=count, solved=solved)
        for day, (count, solved) in sorted(buckets.items())
    ]


def get_admin_dashboard(db: Session, clock: Clock) -> AdminDashboardSchema:
    recent = db.scalars(
        select(ActivityLog).order_by(ActivityLog.activity_date.desc(), ActivityLog.id.desc()).limit(20)
    )
    return AdminDashboardSchema(
        overview=overview(db),
        recent_activity=[ActivitySchema.model_validate(a) for a in recent],
        top_performers=top_performers(db),
        popular_questions=popular_questions(db),
        submission_trends=submission_trends(db, clock),
    )
