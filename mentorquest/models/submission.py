"""Submission model: every code submission with its verdict."""
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import relationship

from mentorquest.core.clock import utcnow
from mentorquest.db.session import Base

LANGUAGES = ("javascript", "python", "java", "cpp")
VERDICTS = ("solved", "attempted", "partial")


class Submission(Base):
    __tablename__ = "submissions"
    __table_args__ = (
        Index("ix_submissions_student_question", "student_id", "question_id"),
        Index("ix_submissions_question_status", "question_id", "status"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    student_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    question_id = Column(Integer, ForeignKey("questions.id", ondelete="CASCADE"), nullable=False)
    code = Column(Text, nullable=False)
    language = Column(String(16), nullable=False)  # see LANGUAGES
    status = Column(String(16), nullable=False)  # see VERDICTS
    points_earned = Column(Integer, nullable=False, default=0)
    execution_time_ms = Column(Integer, nullable=True)
    is_question_of_the_day = Column(Boolean, nullable=False, default=False)
    submitted_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    question = relationship("Question")
