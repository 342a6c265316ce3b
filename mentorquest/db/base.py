"""SQLAlchemy declarative base and model imports for Alembic."""
from mentorquest.db.session import Base

# Import all models so Alembic can see them
from mentorquest.models.activity import ActivityLog  # noqa: F401
from mentorquest.models.badge import Badge, StudentBadge  # noqa: F401
from mentorquest.models.progress import StudentQuestion  # noqa: F401
from mentorquest.models.question import Question, QuestionTag  # noqa: F401
from mentorquest.models.submission import Submission  # noqa: F401
from mentorquest.models.user import TopicStat, User  # noqa: F401

__all__ = [
    "Base",
    "User",
    "TopicStat",
    "Question",
    "QuestionTag",
    "StudentQuestion",
    "Submission",
    "Badge",
    "StudentBadge",
    "ActivityLog",
]
