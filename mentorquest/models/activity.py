"""ActivityLog model: append-only history of state-changing events."""
from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String

from mentorquest.core.clock import utcnow
from mentorquest.db.session import Base

ACTIVITY_TYPES = (
    "question_solved",
    "question_attempted",
    "daily_login",
    "streak_maintained",
    "badge_earned",
    "contest_participation",
)


class ActivityLog(Base):
    __tablename__ = "activity_logs"
    __table_args__ = (
        Index("ix_activity_logs_student_date", "student_id", "activity_date"),
        Index("ix_activity_logs_type_date", "activity_type", "activity_date"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    student_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    activity_type = Column(String(32), nullable=False)
    question_id = Column(Integer, ForeignKey("questions.id", ondelete="CASCADE"), nullable=True, index=True)
    badge_id = Column(Integer, ForeignKey("badges.id", ondelete="CASCADE"), nullable=True, index=True)
    points_earned = Column(Integer, nullable=False, default=0)
    streak_count = Column(Integer, nullable=True)
    activity_date = Column(DateTime(timezone=True), default=utcnow, nullable=False)
