"""StudentQuestion model: one progress row per student-question pair."""
from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from mentorquest.db.session import Base

STATUS_NOT_ATTEMPTED = "not_attempted"
STATUS_ATTEMPTED = "attempted"
STATUS_SOLVED = "solved"


class StudentQuestion(Base):
    __tablename__ = "student_questions"
    __table_args__ = (
        UniqueConstraint("student_id", "question_id", name="uq_student_questions_pair"),
        Index("ix_student_questions_student_status", "student_id", "status"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    student_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    question_id = Column(Integer, ForeignKey("questions.id", ondelete="CASCADE"), nullable=False, index=True)

    # not_attempted -> attempted -> solved, never backwards
    status = Column(String(16), nullable=False, default=STATUS_NOT_ATTEMPTED)
    attempts = Column(Integer, nullable=False, default=0)
    first_attempt_date = Column(DateTime(timezone=True), nullable=True)
    last_attempt_date = Column(DateTime(timezone=True), nullable=True)
    solved_date = Column(DateTime(timezone=True), nullable=True)

    # best submission snapshot
    best_code = Column(Text, nullable=True)
    best_language = Column(String(16), nullable=True)
    best_execution_time_ms = Column(Integer, nullable=True)
    best_points_earned = Column(Integer, nullable=True)

    total_points_earned = Column(Integer, nullable=False, default=0)  # set once, at first solve

    question = relationship("Question")
