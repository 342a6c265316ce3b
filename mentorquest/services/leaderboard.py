"""Leaderboard: students ordered by points, ties broken by name."""
import math

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from mentorquest.models.user import ROLE_STUDENT, User
from mentorquest.schemas.stats import (
    LeaderboardEntrySchema,
    LeaderboardPaginationSchema,
    LeaderboardSchema,
)


def get_leaderboard(db: Session, page: int = 1, page_size: int = 50) -> LeaderboardSchema:
    """Ranks are positional: equal points still get distinct consecutive ranks."""
    skip = (page - 1) * page_size
    students = db.scalars(
        select(User)
        .where(User.role == ROLE_STUDENT)
        .order_by(User.total_points.desc(), User.name.asc(), User.id.asc())
        .offset(skip)
        .limit(page_size)
    ).all()
    total = db.scalar(select(func.count(User.id)).where(User.role == ROLE_STUDENT)) or 0

    entries = [
        LeaderboardEntrySchema(
            student_id=s.id,
            name=s.name,
            avatar=s.avatar,
            rank=skip + index + 1,
            total_points=s.total_points,
            current_streak=s.current_streak,
            max_streak=s.max_streak,
        )
        for index, s in enumerate(students)
    ]
    return LeaderboardSchema(
        leaderboard=entries,
        pagination=LeaderboardPaginationSchema(current=page, total=math.ceil(total / page_size)),
    )


def get_student_rank(db: Session, student: User) -> int:
    """Dashboard rank: students with strictly more points, plus one."""
    ahead = db.scalar(
        select(func.count(User.id)).where(
            User.role == ROLE_STUDENT, User.total_points > student.total_points
        )
    )
    return (ahead or 0) + 1
