"""Badge evaluation and badge administration."""
import logging
from dataclasses import dataclass

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from mentorquest.core.clock import Clock
from mentorquest.core.errors import NotFoundError, ValidationError
from mentorquest.db.session import begin_write
from mentorquest.models.activity import ActivityLog
from mentorquest.models.badge import Badge, StudentBadge
from mentorquest.models.progress import STATUS_SOLVED, StudentQuestion
from mentorquest.models.user import User
from mentorquest.schemas.badge import BadgeCreateSchema, BadgeUpdateSchema
from mentorquest.services import activity

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StatsSnapshot:
    """Student aggregates read once at the start of an evaluation pass."""

    solved_count: int
    current_streak: int


def solved_count(db: Session, student_id: int) -> int:
    return db.scalar(
        select(func.count(StudentQuestion.id)).where(
            StudentQuestion.student_id == student_id,
            StudentQuestion.status == STATUS_SOLVED,
        )
    ) or 0


def take_snapshot(db: Session, student: User) -> StatsSnapshot:
    return StatsSnapshot(
        solved_count=solved_count(db, student.id),
        current_streak=student.current_streak or 0,
    )


def is_satisfied(badge: Badge, snapshot: StatsSnapshot) -> bool:
    # criteria_timeframe is not applied: thresholds use lifetime counts
    kind = badge.criteria_type
    if kind == "problems_solved":
        return snapshot.solved_count >= badge.criteria_value
    if kind in ("streak", "daily_activity"):
        return snapshot.current_streak >= badge.criteria_value
    # contest_participation: no contests yet
    return False


def evaluate_and_grant(db: Session, student: User, clock: Clock) -> list[Badge]:
    """Grant every active badge the student newly qualifies for.

    Predicates read one snapshot, so bonus points granted in this pass never
    influence sibling badges. Already-held badges are skipped.
    """
    snapshot = take_snapshot(db, student)
    held = {b.badge_id for b in student.badges}
    candidates = db.scalars(
        select(Badge).where(Badge.is_active.is_(True)).order_by(Badge.id)
    ).all()

    now = clock.now()
    granted = []
    for badge in candidates:
        if badge.id in held or not is_satisfied(badge, snapshot):
            continue
        student.badges.append(StudentBadge(badge_id=badge.id, earned_date=now))
        held.add(badge.id)
        granted.append(badge)

    bonus = sum(b.points for b in granted)
    if granted:
        student.total_points = (student.total_points or 0) + bonus
        for badge in granted:
            activity.record(
                db, student.id, "badge_earned", badge_id=badge.id, points_earned=badge.points, at=now
            )
        logger.info(
            "student %s earned badges %s (+%s points)",
            student.id, [b.name for b in granted], bonus,
        )
    return granted


# ---------- administration ----------

def get_badge(db: Session, badge_id: int) -> Badge:
    badge = db.get(Badge, badge_id)
    if badge is None:
        raise NotFoundError("Badge", badge_id)
    return badge


def list_badges(db: Session) -> list[Badge]:
    return list(db.scalars(select(Badge).order_by(Badge.id)))


def _check_name_free(db: Session, name: str, badge_id: int | None = None) -> None:
    query = select(Badge.id).where(Badge.name == name)
    if badge_id is not None:
        query = query.where(Badge.id != badge_id)
    if db.scalar(query) is not None:
        raise ValidationError("name", "a badge with this name already exists")


def create_badge(db: Session, body: BadgeCreateSchema, created_by: int | None = None) -> Badge:
    _check_name_free(db, body.name)
    badge = Badge(
        name=body.name,
        description=body.description,
        icon=body.icon,
        criteria_type=body.criteria.type,
        criteria_value=body.criteria.value,
        criteria_timeframe=body.criteria.timeframe,
        points=body.points,
        is_active=body.is_active,
        created_by=created_by,
    )
    db.add(badge)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ValidationError("name", "a badge with this name already exists")
    db.refresh(badge)
    logger.info("badge %s created (%s >= %s)", badge.name, badge.criteria_type, badge.criteria_value)
    return badge


def update_badge(db: Session, badge_id: int, body: BadgeUpdateSchema) -> Badge:
    badge = get_badge(db, badge_id)
    updates = body.model_dump(exclude_unset=True)
    if updates.get("name") is not None:
        _check_name_free(db, updates["name"], badge.id)
    criteria = updates.pop("criteria", None)
    if criteria is not None:
        badge.criteria_type = criteria["type"]
        badge.criteria_value = criteria["value"]
        badge.criteria_timeframe = criteria["timeframe"]
    for field, value in updates.items():
        if value is not None:
            setattr(badge, field, value)
    db.commit()
    db.refresh(badge)
    return badge


def delete_badge(db: Session, badge_id: int) -> None:
    """Remove a badge from every student, drop its log entries, then the badge.

    All steps share one transaction; any failure rolls the whole cascade back.
    Granted bonus points stay on the students' totals.
    """
    begin_write(db)
    badge = get_badge(db, badge_id)
    steps = [
        delete(StudentBadge).where(StudentBadge.badge_id == badge.id),
        delete(ActivityLog).where(ActivityLog.badge_id == badge.id),
        delete(Badge).where(Badge.id == badge.id),
    ]
    try:
        for step in steps:
            db.execute(step)
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("delete of badge %s rolled back", badge_id)
        raise
    db.expire_all()
    logger.info("badge %s deleted", badge_id)
