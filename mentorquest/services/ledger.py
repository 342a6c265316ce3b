"""Progress ledger: turns a submission into updated student state.

Each submission runs as one transaction under the student's lock. The solve
transition is a compare-and-set on the progress row's status, so a pair can be
credited at most once even when writers race from other processes.
"""
import logging
from dataclasses import dataclass, field

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from mentorquest.core.clock import Clock, as_day
from mentorquest.core.errors import ConflictError, NotFoundError, ValidationError
from mentorquest.core.locks import StudentLockRegistry, student_locks
from mentorquest.db.session import begin_write
from mentorquest.models.progress import STATUS_ATTEMPTED, STATUS_SOLVED, StudentQuestion
from mentorquest.models.question import Question
from mentorquest.models.submission import LANGUAGES, Submission
from mentorquest.models.user import User
from mentorquest.services import activity, badges, streaks
from mentorquest.services.catalog import get_question
from mentorquest.services.grading import Grader

logger = logging.getLogger(__name__)


@dataclass
class SubmissionResult:
    status: str
    points_earned: int
    message: str
    submission_id: int
    first_solve: bool = False
    badges_earned: list[str] = field(default_factory=list)


def get_student(db: Session, student_id: int) -> User:
    """Load the student row fresh from the database, locking it where supported."""
    student = db.get(User, student_id, populate_existing=True, with_for_update=True)
    if student is None or not student.is_student:
        raise NotFoundError("Student", student_id)
    return student


def _insert_progress(db: Session, student_id: int, question_id: int, now) -> StudentQuestion:
    progress = StudentQuestion(
        student_id=student_id,
        question_id=question_id,
        status=STATUS_ATTEMPTED,
        attempts=1,
        first_attempt_date=now,
        last_attempt_date=now,
    )
    try:
        with db.begin_nested():
            db.add(progress)
    except IntegrityError as exc:
        raise ConflictError(f"progress row for {student_id}/{question_id} already exists") from exc
    return progress


def _find_progress(db: Session, student_id: int, question_id: int) -> StudentQuestion | None:
    return db.scalar(
        select(StudentQuestion).where(
            StudentQuestion.student_id == student_id,
            StudentQuestion.question_id == question_id,
        )
    )


def touch_progress(db: Session, student_id: int, question_id: int, now) -> tuple[StudentQuestion, bool]:
    """Find or create the pair's row and count the attempt. Returns (row, created)."""
    progress = _find_progress(db, student_id, question_id)
    if progress is None:
        try:
            return _insert_progress(db, student_id, question_id, now), True
        except ConflictError:
            logger.info("concurrent first attempt on %s/%s, reusing row", student_id, question_id)
            progress = _find_progress(db, student_id, question_id)

    db.execute(
        update(StudentQuestion)
        .where(StudentQuestion.id == progress.id)
        .values(attempts=StudentQuestion.attempts + 1, last_attempt_date=now)
        .execution_options(synchronize_session=False)
    )
    db.refresh(progress)
    return progress, False


def mark_solved(db: Session, progress: StudentQuestion, question: Question, code: str, language: str, verdict, now) -> bool:
    """Move the row to solved. True only for the call that made the transition."""
    result = db.execute(
        update(StudentQuestion)
        .where(StudentQuestion.id == progress.id, StudentQuestion.status != STATUS_SOLVED)
        .values(
            status=STATUS_SOLVED,
            solved_date=now,
            total_points_earned=question.points,
            best_code=code,
            best_language=language,
            best_execution_time_ms=verdict.execution_time_ms,
            best_points_earned=question.points,
        )
        .execution_options(synchronize_session=False)
    )
    db.refresh(progress)
    return result.rowcount == 1


def is_current_pick(student: User, question_id: int, clock: Clock) -> bool:
    return (
        student.question_of_the_day_id == question_id
        and as_day(student.question_of_the_day_date) == clock.today()
    )


def record_submission(
    db: Session,
    student_id: int,
    question_id: int,
    code: str,
    language: str,
    *,
    clock: Clock,
    grader: Grader,
    track_topic_attempts: bool = False,
    locks: StudentLockRegistry = student_locks,
) -> SubmissionResult:
    if not code or not code.strip():
        raise ValidationError("code", "must not be empty")
    if language not in LANGUAGES:
        raise ValidationError("language", f"must be one of {', '.join(LANGUAGES)}")

    # a read transaction kept open while waiting would block the lock holder's commit
    db.commit()
    with locks.hold(student_id):
        try:
            begin_write(db)
            # anything loaded before the lock (the authenticated user, its stats) is stale
            db.expire_all()
            result = _apply_submission(
                db, student_id, question_id, code, language, clock, grader, track_topic_attempts
            )
            db.commit()
        except Exception:
            db.rollback()
            raise
    logger.info(
        "submission %s by student %s on question %s: %s%s",
        result.submission_id, student_id, question_id, result.status,
        " (first solve)" if result.first_solve else "",
    )
    return result


def _apply_submission(db, student_id, question_id, code, language, clock, grader, track_topic_attempts):
    student = get_student(db, student_id)
    question = get_question(db, question_id, active_only=True)
    verdict = grader.grade(question, code, language)
    now = clock.now()

    progress, created = touch_progress(db, student.id, question.id, now)
    if created and track_topic_attempts:
        streaks.record_topic_attempt(db, student, question.tags)

    first_solve = False
    if verdict.solved:
        first_solve = mark_solved(db, progress, question, code, language, verdict, now)

    points = question.points if first_solve else 0
    submission = Submission(
        student_id=student.id,
        question_id=question.id,
        code=code,
        language=language,
        status=verdict.status,
        points_earned=points,
        execution_time_ms=verdict.execution_time_ms,
        is_question_of_the_day=is_current_pick(student, question.id, clock),
        submitted_at=now,
    )
    db.add(submission)

    db.execute(
        update(Question)
        .where(Question.id == question.id)
        .values(
            total_submissions=Question.total_submissions + 1,
            successful_submissions=Question.successful_submissions + (1 if first_solve else 0),
        )
        .execution_options(synchronize_session=False)
    )
    db.refresh(question)

    earned = []
    if first_solve:
        streaks.on_question_solved(
            db, student, points, question.tags, clock, track_topic_attempts=track_topic_attempts
        )
        activity.record(
            db, student.id, "question_solved", question_id=question.id, points_earned=points, at=now
        )
        earned = badges.evaluate_and_grant(db, student, clock)
    elif created:
        activity.record(db, student.id, "question_attempted", question_id=question.id, at=now)

    db.flush()
    return SubmissionResult(
        status=verdict.status,
        points_earned=points,
        message="Solution accepted!" if verdict.solved else "Keep trying!",
        submission_id=submission.id,
        first_solve=first_solve,
        badges_earned=[b.name for b in earned],
    )
