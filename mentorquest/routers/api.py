"""Student API: dashboard, questions, submissions, question of the day, leaderboard."""
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from mentorquest.core.clock import Clock, get_clock
from mentorquest.core.config import Settings, get_settings
from mentorquest.db.session import get_db
from mentorquest.models.user import User
from mentorquest.routers.deps import get_current_user, require_student
from mentorquest.schemas.question import QuestionOutSchema, QuestionPageSchema, QuestionWithProgressSchema
from mentorquest.schemas.stats import DashboardSchema, LeaderboardSchema, ProfileSchema
from mentorquest.schemas.submission import SubmissionCreateSchema, SubmissionResultSchema
from mentorquest.services import catalog, leaderboard, ledger, qotd, statistics
from mentorquest.services.grading import Grader, get_grader

router = APIRouter(prefix="/api", tags=["api"])


@router.get("/dashboard", response_model=DashboardSchema)
def get_dashboard(
    db: Annotated[Session, Depends(get_db)],
    student: Annotated[User, Depends(require_student)],
    clock: Annotated[Clock, Depends(get_clock)],
):
    """User summary with rank, today's question, today's activity, recent submissions."""
    return statistics.get_dashboard(db, student, clock)


@router.get("/questions", response_model=QuestionPageSchema)
def list_questions(
    db: Annotated[Session, Depends(get_db)],
    student: Annotated[User, Depends(require_student)],
    tags: Annotated[list[str] | None, Query()] = None,
    difficulty: Annotated[list[str] | None, Query()] = None,
    status: str | None = None,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = 20,
    sort_by: str = "created_at",
    sort_order: str = "desc",
):
    """Active questions with the student's progress; status filters the current page."""
    questions, pagination = catalog.list_questions(
        db, tags=tags, difficulty=difficulty, page=page, limit=limit,
        sort_by=sort_by, sort_order=sort_order,
    )
    items = statistics.with_progress(db, student, questions)
    if status:
        items = [q for q in items if q.student_status == status]
    return QuestionPageSchema(questions=items, pagination=pagination)


@router.get("/questions/{question_id}", response_model=QuestionWithProgressSchema)
def get_question(
    question_id: int,
    db: Annotated[Session, Depends(get_db)],
    student: Annotated[User, Depends(require_student)],
):
    question = catalog.get_question(db, question_id, active_only=True)
    return statistics.with_progress(db, student, [question])[0]


@router.post("/questions/{question_id}/submit", response_model=SubmissionResultSchema)
def submit_solution(
    question_id: int,
    body: SubmissionCreateSchema,
    db: Annotated[Session, Depends(get_db)],
    student: Annotated[User, Depends(require_student)],
    clock: Annotated[Clock, Depends(get_clock)],
    grader: Annotated[Grader, Depends(get_grader)],
    settings: Annotated[Settings, Depends(get_settings)],
):
    """Grade and record a submission; returns status, points earned and message."""
    result = ledger.record_submission(
        db,
        student.id,
        question_id,
        body.code,
        body.language,
        clock=clock,
        grader=grader,
        track_topic_attempts=settings.track_topic_attempts,
    )
    return SubmissionResultSchema(
        status=result.status,
        points_earned=result.points_earned,
        message=result.message,
        submission_id=result.submission_id,
        first_solve=result.first_solve,
        badges_earned=result.badges_earned,
    )


@router.get("/question-of-the-day", response_model=QuestionOutSchema | None)
def get_question_of_the_day(
    db: Annotated[Session, Depends(get_db)],
    student: Annotated[User, Depends(require_student)],
    clock: Annotated[Clock, Depends(get_clock)],
):
    """Today's pick, or null when none is assigned for today."""
    pick = qotd.get_question_of_the_day(db, student, clock)
    return QuestionOutSchema.model_validate(pick) if pick else None


@router.get("/profile", response_model=ProfileSchema)
def get_profile(
    db: Annotated[Session, Depends(get_db)],
    student: Annotated[User, Depends(require_student)],
):
    return statistics.get_profile(db, student)


@router.get("/leaderboard", response_model=LeaderboardSchema)
def get_leaderboard(
    db: Annotated[Session, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
    settings: Annotated[Settings, Depends(get_settings)],
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1)] = 50,
):
    return leaderboard.get_leaderboard(db, page, min(limit, settings.leaderboard_max_page_size))
