"""Admin user directory: listing, details and profile edits."""
import logging
import math
import re

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from mentorquest.core.errors import NotFoundError, ValidationError
from mentorquest.models.user import User
from mentorquest.schemas.admin import UserAdminSchema, UserDetailsSchema, UserPageSchema, UserUpdateSchema
from mentorquest.schemas.stats import ActivitySchema, LeaderboardPaginationSchema
from mentorquest.services import activity
from mentorquest.services.statistics import get_student_statistics

logger = logging.getLogger(__name__)

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

USER_SORTS = {
    "total_points": User.total_points,
    "current_streak": User.current_streak,
    "max_streak": User.max_streak,
    "name": User.name,
    "email": User.email,
    "created_at": User.created_at,
    "last_active_date": User.last_active_date,
}


def normalize_email(email: str | None) -> str:
    return (email or "").strip().lower()


def get_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("User", user_id)
    return user


def list_users(
    db: Session,
    *,
    role: str | None = None,
    sort_by: str = "total_points",
    sort_order: str = "desc",
    page: int = 1,
    limit: int = 20,
) -> UserPageSchema:
    if sort_by not in USER_SORTS:
        raise ValidationError("sort_by", f"must be one of {', '.join(USER_SORTS)}")
    if sort_order not in ("asc", "desc"):
        raise ValidationError("sort_order", "must be asc or desc")

    query = select(User)
    if role:
        query = query.where(User.role == role)
    total = db.scalar(select(func.count()).select_from(query.subquery())) or 0

    column = USER_SORTS[sort_by]
    order = column.desc() if sort_order == "desc" else column.asc()
    users = db.scalars(
        query.order_by(order, User.id.asc()).offset((page - 1) * limit).limit(limit)
    ).all()
    return UserPageSchema(
        users=[UserAdminSchema.model_validate(u) for u in users],
        pagination=LeaderboardPaginationSchema(current=page, total=math.ceil(total / limit)),
    )


def get_user_details(db: Session, user_id: int) -> UserDetailsSchema:
    user = get_user(db, user_id)
    return UserDetailsSchema(
        user=UserAdminSchema.model_validate(user),
        statistics=get_student_statistics(db, user),
        recent_activity=[
            ActivitySchema.model_validate(a) for a in activity.recent_activity(db, user.id, limit=20)
        ],
    )


def update_user(db: Session, user_id: int, body: UserUpdateSchema) -> User:
    """Apply profile edits. Only fields present in the body change."""
    user = get_user(db, user_id)
    updates = body.model_dump(exclude_unset=True, exclude_none=True)
    if "name" in updates:
        updates["name"] = updates["name"].strip()
    if "email" in updates:
        email = normalize_email(updates["email"])
        if not EMAIL_RE.match(email):
            raise ValidationError("email", "invalid email")
        taken = db.scalar(select(User.id).where(User.email == email, User.id != user.id))
        if taken is not None:
            raise ValidationError("email", "already in use")
        updates["email"] = email
    for field, value in updates.items():
        setattr(user, field, value)
    db.commit()
    db.refresh(user)
    logger.info("user %s updated (%s)", user.id, ", ".join(sorted(updates)) or "no changes")
    return user
