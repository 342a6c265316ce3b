from mentorquest.models.user import User, TopicStat
from mentorquest.models.question import Question, QuestionTag
from mentorquest.models.progress import StudentQuestion
from mentorquest.models.submission import Submission
from mentorquest.models.badge import Badge, StudentBadge
from mentorquest.models.activity import ActivityLog

__all__ = [
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
