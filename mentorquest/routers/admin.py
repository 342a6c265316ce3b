"""Admin API: question and badge curation, user directory, analytics, manual question of the day run."""
from typing import Annotated, Literal

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from mentorquest.core.clock import Clock, get_clock
from mentorquest.db.session import get_db
from mentorquest.models.user import User
from mentorquest.routers.deps import require_admin
from mentorquest.schemas.admin import (
    AdminDashboardSchema,
    UserAdminSchema,
    UserDetailsSchema,
    UserPageSchema,
    UserUpdateSchema,
)
from mentorquest.schemas.badge import BadgeCreateSchema, BadgeOutSchema, BadgeUpdateSchema
from mentorquest.schemas.question import (
    AdminQuestionPageSchema,
    QuestionCreateSchema,
    QuestionOutSchema,
    QuestionStatsSchema,
    QuestionUpdateSchema,
)
from mentorquest.services import analytics, badges, catalog, qotd, users

router = APIRouter(prefix="/api/admin", tags=["admin"])


# ---------- questions ----------

@router.post("/questions", response_model=QuestionOutSchema, status_code=201)
def create_question(
    body: QuestionCreateSchema,
    db: Annotated[Session, Depends(get_db)],
    admin: Annotated[User, Depends(require_admin)],
):
    return QuestionOutSchema.model_validate(catalog.create_question(db, body, added_by=admin.id))


@router.get("/questions", response_model=AdminQuestionPageSchema)
def list_questions(
    db: Annotated[Session, Depends(get_db)],
    admin: Annotated[User, Depends(require_admin)],
    tags: Annotated[list[str] | None, Query()] = None,
    difficulty: Annotated[list[str] | None, Query()] = None,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = 20,
    sort_by: str = "created_at",
    sort_order: str = "desc",
):
    questions, pagination = catalog.list_questions(
        db, tags=tags, difficulty=difficulty, active_only=False, page=page, limit=limit,
        sort_by=sort_by, sort_order=sort_order,
    )
    return AdminQuestionPageSchema(
        questions=[QuestionOutSchema.model_validate(q) for q in questions],
        pagination=pagination,
    )


@router.put("/questions/{question_id}", response_model=QuestionOutSchema)
def update_question(
    question_id: int,
    body: QuestionUpdateSchema,
    db: Annotated[Session, Depends(get_db)],
    admin: Annotated[User, Depends(require_admin)],
):
    return QuestionOutSchema.model_validate(catalog.update_question(db, question_id, body))


@router.delete("/questions/{question_id}")
def delete_question(
    question_id: int,
    db: Annotated[Session, Depends(get_db)],
    admin: Annotated[User, Depends(require_admin)],
):
    catalog.delete_question(db, question_id)
    return {"message": "Question and related data deleted successfully"}


@router.get("/questions/{question_id}/stats", response_model=QuestionStatsSchema)
def question_stats(
    question_id: int,
    db: Annotated[Session, Depends(get_db)],
    admin: Annotated[User, Depends(require_admin)],
):
    return catalog.question_stats(db, question_id)


@router.get("/tags", response_model=list[str])
def list_tags(
    db: Annotated[Session, Depends(get_db)],
    admin: Annotated[User, Depends(require_admin)],
):
    return catalog.distinct_tags(db, active_only=False)


# ---------- badges ----------

@router.post("/badges", response_model=BadgeOutSchema, status_code=201)
def create_badge(
    body: BadgeCreateSchema,
    db: Annotated[Session, Depends(get_db)],
    admin: Annotated[User, Depends(require_admin)],
):
    return BadgeOutSchema.from_model(badges.create_badge(db, body, created_by=admin.id))


@router.get("/badges", response_model=list[BadgeOutSchema])
def list_badges(
    db: Annotated[Session, Depends(get_db)],
    admin: Annotated[User, Depends(require_admin)],
):
    return [BadgeOutSchema.from_model(b) for b in badges.list_badges(db)]


@router.put("/badges/{badge_id}", response_model=BadgeOutSchema)
def update_badge(
    badge_id: int,
    body: BadgeUpdateSchema,
    db: Annotated[Session, Depends(get_db)],
    admin: Annotated[User, Depends(require_admin)],
):
    return BadgeOutSchema.from_model(badges.update_badge(db, badge_id, body))


@router.delete("/badges/{badge_id}")
def delete_badge(
    badge_id: int,
    db: Annotated[Session, Depends(get_db)],
    admin: Annotated[User, Depends(require_admin)],
):
    badges.delete_badge(db, badge_id)
    return {"message": "Badge deleted successfully"}


# ---------- question of the day ----------

@router.post("/question-of-the-day/run")
def run_question_of_the_day(
    db: Annotated[Session, Depends(get_db)],
    admin: Annotated[User, Depends(require_admin)],
    clock: Annotated[Clock, Depends(get_clock)],
):
    """Assign today's pick for every student. Safe to re-run: picks are overwritten."""
    summary = qotd.run_manual_selection(db, clock)
    return {
        "message": "Question of the Day updated for all students",
        "effective_date": summary.effective_date.isoformat(),
        "assigned": summary.assigned,
        "skipped": summary.skipped,
        "failed": summary.failed,
    }


# ---------- users ----------

@router.get("/users", response_model=UserPageSchema)
def list_users(
    db: Annotated[Session, Depends(get_db)],
    admin: Annotated[User, Depends(require_admin)],
    role: Literal["student", "admin"] | None = None,
    sort_by: str = "total_points",
    sort_order: str = "desc",
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = 20,
):
    return users.list_users(db, role=role, sort_by=sort_by, sort_order=sort_order, page=page, limit=limit)


@router.get("/users/{user_id}", response_model=UserDetailsSchema)
def get_user(
    user_id: int,
    db: Annotated[Session, Depends(get_db)],
    admin: Annotated[User, Depends(require_admin)],
):
    """Account, solve statistics and the 20 latest log entries."""
    return users.get_user_details(db, user_id)


@router.put("/users/{user_id}", response_model=UserAdminSchema)
def update_user(
    user_id: int,
    body: UserUpdateSchema,
    db: Annotated[Session, Depends(get_db)],
    admin: Annotated[User, Depends(require_admin)],
):
    return UserAdminSchema.model_validate(users.update_user(db, user_id, body))


# ---------- analytics ----------

@router.get("/dashboard", response_model=AdminDashboardSchema)
def dashboard(
    db: Annotated[Session, Depends(get_db)],
    admin: Annotated[User, Depends(require_admin)],
    clock: Annotated[Clock, Depends(get_clock)],
):
    return analytics.get_admin_dashboard(db, clock)
