"""Question model: catalog entry with difficulty, tags and reward points."""
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from mentorquest.core.clock import utcnow
from mentorquest.db.session import Base

# Ordered scale, easiest first
DIFFICULTIES = ("cakewalk", "easy", "easy-medium", "medium", "hard")
DIFFICULTY_RANK = {name: rank for rank, name in enumerate(DIFFICULTIES)}


class Question(Base):
    __tablename__ = "questions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    constraints = Column(Text, nullable=True)
    difficulty = Column(String(16), nullable=False, index=True)  # see DIFFICULTIES
    points = Column(Integer, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    total_submissions = Column(Integer, nullable=False, default=0)
    successful_submissions = Column(Integer, nullable=False, default=0)
    added_by = Column(Integer, nullable=True)  # admin user id, weak reference
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    tag_rows = relationship(
        "QuestionTag",
        back_populates="question",
        cascade="all, delete-orphan",
        order_by="QuestionTag.id",
    )

    @property
    def tags(self) -> list[str]:
        return [t.tag for t in self.tag_rows]

    @tags.setter
    def tags(self, values) -> None:
        wanted = []
        for value in values:
            if value not in wanted:
                wanted.append(value)
        keep = [t for t in self.tag_rows if t.tag in wanted]
        present = {t.tag for t in keep}
        self.tag_rows = keep + [QuestionTag(tag=v) for v in wanted if v not in present]

class QuestionTag(Base):
    __tablename__ = "question_tags"
    __table_args__ = (UniqueConstraint("question_id", "tag", name="uq_question_tags_question_tag"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    question_id = Column(Integer, ForeignKey("questions.id", ondelete="CASCADE"), nullable=False, index=True)
    tag = Column(String(64), nullable=False, index=True)

    question = relationship("Question", back_populates="tag_rows")
