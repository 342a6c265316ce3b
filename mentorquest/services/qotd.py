"""Question of the day: a per-student recommendation aimed at the weakest topic.

Selection order:
  1. no topic stats yet -> oldest active cakewalk question
  2. topic with the fewest solved questions among stats with total >= 1
  3. no such topic -> random tag from the active catalog
  4. unsolved active questions in that topic
  5. none left -> any unsolved active question
  6. random pick among the lowest difficulty present
A pick is only shown on the day it was assigned for.
"""
import logging
import random
from dataclasses import dataclass
from datetime import date, timedelta

from sqlalchemy import select
from sqlalchemy.orm import Session

from mentorquest.core.clock import Clock, as_day
from mentorquest.core.locks import StudentLockRegistry, student_locks
from mentorquest.db.session import begin_write
from mentorquest.models.progress import STATUS_SOLVED, StudentQuestion
from mentorquest.models.question import DIFFICULTIES, Question
from mentorquest.models.user import ROLE_STUDENT, User
from mentorquest.services import catalog

logger = logging.getLogger(__name__)


def solved_question_ids(db: Session, student_id: int) -> set[int]:
    return set(
        db.scalars(
            select(StudentQuestion.question_id).where(
                StudentQuestion.student_id == student_id,
                StudentQuestion.status == STATUS_SOLVED,
            )
        )
    )


def starter_question(db: Session) -> Question | None:
    return db.scalar(
        select(Question)
        .where(Question.is_active.is_(True), Question.difficulty == DIFFICULTIES[0])
        .order_by(Question.created_at.asc(), Question.id.asc())
        .limit(1)
    )


def weakest_topic(student: User) -> str | None:
    """Topic with the fewest solves among stats that track at least one question."""
    selected = None
    min_solved = None
    for stat in student.topic_stats:
        if stat.total_questions >= 1 and (min_solved is None or stat.solved_questions < min_solved):
            min_solved = stat.solved_questions
            selected = stat.topic
    return selected


def select_question_of_the_day(db: Session, student: User, rng: random.Random | None = None) -> Question | None:
    rng = rng or random.Random()
    if not student.topic_stats:
        return starter_question(db)

    topic = weakest_topic(student)
    if topic is None:
        tags = catalog.distinct_tags(db)
        if not tags:
            return None
        topic = rng.choice(tags)

    solved = solved_question_ids(db, student.id)
    candidates = catalog.active_questions(db, tag=topic, exclude_ids=solved)
    if not candidates:
        candidates = catalog.active_questions(db, exclude_ids=solved)
    if not candidates:
        return None

    lowest = candidates[0].difficulty
    easiest = [q for q in candidates if q.difficulty == lowest]
    return rng.choice(easiest)


def assign_question_of_the_day(
    db: Session, student: User, effective_date: date, rng: random.Random | None = None
) -> Question | None:
    """Pick and store a question for the given day. Overwrites any pending pick.

    When nothing can be picked the previous assignment is left untouched.
    """
    question = select_question_of_the_day(db, student, rng)
    if question is not None:
        student.question_of_the_day_id = question.id
        student.question_of_the_day_date = effective_date
    return question


def get_question_of_the_day(db: Session, student: User, clock: Clock) -> Question | None:
    if student.question_of_the_day_id is None:
        return None
    if as_day(student.question_of_the_day_date) != clock.today():
        return None
    question = db.get(Question, student.question_of_the_day_id)
    if question is None or not question.is_active:
        return None
    return question


@dataclass
class BatchSummary:
    effective_date: date
    assigned: int = 0
    skipped: int = 0
    failed: int = 0


def run_daily_selection(
    db: Session,
    effective_date: date,
    rng: random.Random | None = None,
    locks: StudentLockRegistry = student_locks,
) -> BatchSummary:
    """Assign a pick to every student. Each student commits on its own.

    A failure for one student is logged and leaves that student with the
    previous assignment; the rest of the batch continues.
    """
    rng = rng or random.Random()
    summary = BatchSummary(effective_date=effective_date)
    student_ids = list(
        db.scalars(select(User.id).where(User.role == ROLE_STUDENT).order_by(User.id))
    )
    logger.info("running question of the day selection for %s students (%s)", len(student_ids), effective_date)
    for student_id in student_ids:
        with locks.hold(student_id):
            try:
                begin_write(db)
                student = db.get(User, student_id, populate_existing=True)
                if student is None:
                    db.rollback()
                    continue
                question = assign_question_of_the_day(db, student, effective_date, rng)
                db.commit()
            except Exception:
                db.rollback()
                summary.failed += 1
                logger.exception("question of the day selection failed for student %s", student_id)
                continue
        if question is None:
            summary.skipped += 1
        else:
            summary.assigned += 1
            logger.debug("student %s -> question %s", student_id, question.id)
    logger.info(
        "question of the day selection done: %s assigned, %s skipped, %s failed",
        summary.assigned, summary.skipped, summary.failed,
    )
    return summary


def run_scheduled_selection(db: Session, clock: Clock, rng: random.Random | None = None) -> BatchSummary:
    """Day-boundary run: pre-computes tomorrow's pick."""
    return run_daily_selection(db, clock.today() + timedelta(days=1), rng)


def run_manual_selection(db: Session, clock: Clock, rng: random.Random | None = None) -> BatchSummary:
    """On-demand run: assigns today's pick."""
    return run_daily_selection(db, clock.today(), rng)
