"""User model: students and admins; students carry points, streak and topic mastery."""
from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from mentorquest.core.clock import utcnow
from mentorquest.db.session import Base

ROLE_STUDENT = "student"
ROLE_ADMIN = "admin"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(120), nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=True)
    avatar = Column(String(500), nullable=True)
    role = Column(String(16), nullable=False, default=ROLE_STUDENT, index=True)  # student | admin
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    # student progression
    total_points = Column(Integer, nullable=False, default=0, index=True)
    current_streak = Column(Integer, nullable=False, default=0)
    max_streak = Column(Integer, nullable=False, default=0)
    last_active_date = Column(DateTime(timezone=True), nullable=True)
    question_of_the_day_id = Column(
        Integer, ForeignKey("questions.id", ondelete="SET NULL"), nullable=True
    )
    question_of_the_day_date = Column(Date, nullable=True)

    topic_stats = relationship(
        "TopicStat",
        back_populates="student",
        cascade="all, delete-orphan",
        order_by="TopicStat.id",
    )
    badges = relationship(
        "StudentBadge",
        back_populates="student",
        cascade="all, delete-orphan",
        order_by="StudentBadge.id",
    )
    question_of_the_day = relationship("Question", foreign_keys=[question_of_the_day_id])

    @property
    def is_student(self) -> bool:
        return self.role == ROLE_STUDENT

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN


class TopicStat(Base):
    """Per-student mastery counters for one topic tag."""

    __tablename__ = "topic_stats"
    __table_args__ = (UniqueConstraint("student_id", "topic", name="uq_topic_stats_student_topic"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    student_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    topic = Column(String(64), nullable=False)
    total_questions = Column(Integer, nullable=False, default=0)
    solved_questions = Column(Integer, nullable=False, default=0)
    attempted_questions = Column(Integer, nullable=False, default=0)

    student = relationship("User", back_populates="topic_stats")
