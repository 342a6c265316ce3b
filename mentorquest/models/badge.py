"""Badge definitions and per-student grants."""
from sqlalchemy import Boolean, Column, DateTime, Float, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from mentorquest.core.clock import utcnow
from mentorquest.db.session import Base

CRITERIA_TYPES = ("problems_solved", "streak", "contest_participation", "daily_activity")
# stored, not applied: evaluation always uses lifetime counts
TIMEFRAMES = ("daily", "weekly", "monthly", "all_time")


class Badge(Base):
    __tablename__ = "badges"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(120), unique=True, nullable=False)
    description = Column(Text, nullable=False)
    icon = Column(String(500), nullable=True)
    criteria_type = Column(String(32), nullable=False)
    criteria_value = Column(Float, nullable=False)
    criteria_timeframe = Column(String(16), nullable=False, default="all_time")
    points = Column(Integer, nullable=False, default=100)
    is_active = Column(Boolean, nullable=False, default=True)
    created_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)


class StudentBadge(Base):
    __tablename__ = "student_badges"
    __table_args__ = (UniqueConstraint("student_id", "badge_id", name="uq_student_badges_pair"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    student_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    badge_id = Column(Integer, ForeignKey("badges.id", ondelete="CASCADE"), nullable=False)
    earned_date = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    student = relationship("User", back_populates="badges")
    badge = relationship("Badge")
