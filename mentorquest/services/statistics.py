"""Per-student statistics, profile and dashboard views."""
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from mentorquest.core.clock import Clock
from mentorquest.models.progress import STATUS_ATTEMPTED, STATUS_NOT_ATTEMPTED, STATUS_SOLVED, StudentQuestion
from mentorquest.models.question import DIFFICULTY_RANK, Question
from mentorquest.models.submission import Submission
from mentorquest.models.user import User
from mentorquest.schemas.badge import EarnedBadgeSchema
from mentorquest.schemas.question import QuestionOutSchema, QuestionWithProgressSchema
from mentorquest.schemas.stats import (
    ActivitySchema,
    DashboardSchema,
    DifficultyCountSchema,
    ProfileSchema,
    StudentStatisticsSchema,
    StudentSummarySchema,
    TopicStatSchema,
)
from mentorquest.schemas.submission import SubmissionOutSchema
from mentorquest.services import activity, qotd
from mentorquest.services.leaderboard import get_student_rank


def _count_by_status(db: Session, student_id: int, statuses) -> int:
    return db.scalar(
        select(func.count(StudentQuestion.id)).where(
            StudentQuestion.student_id == student_id,
            StudentQuestion.status.in_(statuses),
        )
    ) or 0


def get_student_statistics(db: Session, student: User) -> StudentStatisticsSchema:
    rows = db.execute(
        select(Question.difficulty, func.count(StudentQuestion.id))
        .join(Question, Question.id == StudentQuestion.question_id)
        .where(StudentQuestion.student_id == student.id, StudentQuestion.status == STATUS_SOLVED)
        .group_by(Question.difficulty)
    ).all()
    breakdown = sorted(rows, key=lambda row: DIFFICULTY_RANK.get(row[0], len(DIFFICULTY_RANK)))
    return StudentStatisticsSchema(
        total_solved=_count_by_status(db, student.id, [STATUS_SOLVED]),
        total_attempted=_count_by_status(db, student.id, [STATUS_ATTEMPTED, STATUS_SOLVED]),
        difficulty_breakdown=[DifficultyCountSchema(difficulty=d, count=c) for d, c in breakdown],
        topic_stats=[TopicStatSchema.model_validate(s) for s in student.topic_stats],
    )


def student_summary(db: Session, student: User) -> StudentSummarySchema:
    return StudentSummarySchema(
        id=student.id,
        name=student.name,
        total_points=student.total_points,
        current_streak=student.current_streak,
        max_streak=student.max_streak,
        rank=get_student_rank(db, student),
        badges=[
            EarnedBadgeSchema(
                badge_id=sb.badge_id,
                name=sb.badge.name,
                points=sb.badge.points,
                earned_date=sb.earned_date,
            )
            for sb in student.badges
        ],
    )


def get_profile(db: Session, student: User) -> ProfileSchema:
    return ProfileSchema(
        user=student_summary(db, student),
        statistics=get_student_statistics(db, student),
        recent_activity=[
            ActivitySchema.model_validate(a) for a in activity.recent_activity(db, student.id, limit=20)
        ],
    )


def get_dashboard(db: Session, student: User, clock: Clock) -> DashboardSchema:
    pick = qotd.get_question_of_the_day(db, student, clock)
    recent = db.scalars(
        select(Submission)
        .where(Submission.student_id == student.id)
        .order_by(Submission.submitted_at.desc(), Submission.id.desc())
        .limit(10)
    ).all()
    return DashboardSchema(
        user=student_summary(db, student),
        question_of_the_day=QuestionOutSchema.model_validate(pick) if pick else None,
        today_activities=[
            ActivitySchema.model_validate(a)
            for a in activity.activity_for_day(db, student.id, clock.today())
        ],
        recent_submissions=[SubmissionOutSchema.model_validate(s) for s in recent],
    )


def with_progress(db: Session, student: User, questions) -> list[QuestionWithProgressSchema]:
    """Attach the student's status, attempts and earned points to catalog rows."""
    ids = [q.id for q in questions]
    progress = {}
    if ids:
        progress = {
            p.question_id: p
            for p in db.scalars(
                select(StudentQuestion).where(
                    StudentQuestion.student_id == student.id,
                    StudentQuestion.question_id.in_(ids),
                )
            )
        }
    items = []
    for question in questions:
        row = progress.get(question.id)
        item = QuestionWithProgressSchema.model_validate(question)
        if row is not None:
            item.student_status = row.status
            item.attempts = row.attempts
            item.total_points_earned = row.total_points_earned
        else:
            item.student_status = STATUS_NOT_ATTEMPTED
        items.append(item)
    return items
