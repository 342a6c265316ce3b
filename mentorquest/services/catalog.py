"""Question catalog: admin CRUD, tag queries and the delete cascade."""
import logging
import math

from sqlalchemy import case, delete, func, select, update
from sqlalchemy.orm import Session

from mentorquest.core.clock import sort_key
from mentorquest.core.errors import NotFoundError, ValidationError
from mentorquest.db.session import begin_write
from mentorquest.models.activity import ActivityLog
from mentorquest.models.progress import StudentQuestion
from mentorquest.models.question import DIFFICULTY_RANK, Question, QuestionTag
from mentorquest.models.submission import Submission
from mentorquest.models.user import User
from mentorquest.schemas.question import (
    CountSchema,
    PaginationSchema,
    QuestionCreateSchema,
    QuestionOutSchema,
    QuestionStatsSchema,
    QuestionUpdateSchema,
)

logger = logging.getLogger(__name__)

# sort_by values accepted by list_questions
QUESTION_SORTS = {
    "created_at": Question.created_at,
    "points": Question.points,
    "title": Question.title,
    "difficulty": case(DIFFICULTY_RANK, value=Question.difficulty),
    "total_submissions": Question.total_submissions,
}
SORT_ORDERS = ("asc", "desc")


def get_question(db: Session, question_id: int, active_only: bool = False) -> Question:
    """Fetch a question; inactive questions count as missing when active_only."""
    question = db.get(Question, question_id)
    if question is None or (active_only and not question.is_active):
        raise NotFoundError("Question", question_id)
    return question


def ordered(questions) -> list[Question]:
    """Ascending difficulty rank, then oldest first."""
    return sorted(questions, key=lambda q: (DIFFICULTY_RANK[q.difficulty], sort_key(q.created_at), q.id))


def active_questions(db: Session, tag: str | None = None, exclude_ids=()) -> list[Question]:
    query = select(Question).where(Question.is_active.is_(True))
    if tag is not None:
        query = query.where(
            Question.id.in_(select(QuestionTag.question_id).where(QuestionTag.tag == tag))
        )
    if exclude_ids:
        query = query.where(Question.id.not_in(list(exclude_ids)))
    return ordered(db.scalars(query))


def distinct_tags(db: Session, active_only: bool = True) -> list[str]:
    query = select(QuestionTag.tag).distinct()
    if active_only:
        query = query.join(Question, Question.id == QuestionTag.question_id).where(
            Question.is_active.is_(True)
        )
    return sorted(db.scalars(query))


def list_questions(
    db: Session,
    *,
    tags: list[str] | None = None,
    difficulty: list[str] | None = None,
    active_only: bool = True,
    page: int = 1,
    limit: int = 20,
    sort_by: str = "created_at",
    sort_order: str = "desc",
) -> tuple[list[Question], PaginationSchema]:
    if sort_by not in QUESTION_SORTS:
        raise ValidationError("sort_by", f"must be one of {', '.join(QUESTION_SORTS)}")
    if sort_order not in SORT_ORDERS:
        raise ValidationError("sort_order", "must be asc or desc")

    query = select(Question)
    if active_only:
        query = query.where(Question.is_active.is_(True))
    if tags:
        query = query.where(
            Question.id.in_(select(QuestionTag.question_id).where(QuestionTag.tag.in_(tags)))
        )
    if difficulty:
        query = query.where(Question.difficulty.in_(difficulty))

    total = db.scalar(select(func.count()).select_from(query.subquery())) or 0
    column = QUESTION_SORTS[sort_by]
    order = column.desc() if sort_order == "desc" else column.asc()
    skip = (page - 1) * limit
    questions = list(db.scalars(query.order_by(order, Question.id).offset(skip).limit(limit)))
    pagination = PaginationSchema(
        current=page,
        total=math.ceil(total / limit) if limit else 0,
        has_next=skip + len(questions) < total,
        has_prev=page > 1,
    )
    return questions, pagination


def create_question(db: Session, body: QuestionCreateSchema, added_by: int | None = None) -> Question:
    question = Question(
        title=body.title,
        description=body.description,
        constraints=body.constraints,
        difficulty=body.difficulty,
        points=body.points,
        is_active=body.is_active,
        added_by=added_by,
    )
    question.tags = body.tags
    db.add(question)
    db.commit()
    db.refresh(question)
    logger.info("question %s created (%s, %s points)", question.id, question.difficulty, question.points)
    return question


def update_question(db: Session, question_id: int, body: QuestionUpdateSchema) -> Question:
    question = get_question(db, question_id)
    updates = body.model_dump(exclude_unset=True)
    tags = updates.pop("tags", None)
    if tags is not None:
        question.tags = tags
    for field, value in updates.items():
        if value is not None or field == "constraints":
            setattr(question, field, value)
    db.commit()
    db.refresh(question)
    return question


def delete_question(db: Session, question_id: int) -> None:
    """Delete a question and everything that references it.

    Submissions, progress rows, log entries, tags and pending QOTD picks go
    first, the question last, all inside one transaction.
    """
    begin_write(db)
    question = get_question(db, question_id)
    steps = [
        delete(Submission).where(Submission.question_id == question.id),
        delete(StudentQuestion).where(StudentQuestion.question_id == question.id),
        delete(ActivityLog).where(ActivityLog.question_id == question.id),
        update(User)
        .where(User.question_of_the_day_id == question.id)
        .values(question_of_the_day_id=None, question_of_the_day_date=None),
        delete(QuestionTag).where(QuestionTag.question_id == question.id),
        delete(Question).where(Question.id == question.id),
    ]
    try:
        for step in steps:
            db.execute(step)
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("delete of question %s rolled back", question_id)
        raise
    db.expire_all()
    logger.info("question %s and related data deleted", question_id)


def question_stats(db: Session, question_id: int) -> QuestionStatsSchema:
    question = get_question(db, question_id)
    by_status = db.execute(
        select(Submission.status, func.count(Submission.id))
        .where(Submission.question_id == question.id)
        .group_by(Submission.status)
        .order_by(Submission.status)
    ).all()
    by_language = db.execute(
        select(Submission.language, func.count(Submission.id))
        .where(Submission.question_id == question.id)
        .group_by(Submission.language)
        .order_by(Submission.language)
    ).all()
    return QuestionStatsSchema(
        question=QuestionOutSchema.model_validate(question),
        submission_stats=[CountSchema(key=k, count=c) for k, c in by_status],
        language_stats=[CountSchema(key=k, count=c) for k, c in by_language],
    )
