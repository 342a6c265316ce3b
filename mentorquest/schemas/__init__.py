from mentorquest.schemas.auth import LoginSchema, RegisterSchema, TokenSchema, UserOutSchema
from mentorquest.schemas.badge import BadgeCreateSchema, BadgeOutSchema, BadgeUpdateSchema
from mentorquest.schemas.question import (
    QuestionCreateSchema,
    QuestionOutSchema,
    QuestionUpdateSchema,
    QuestionWithProgressSchema,
)
from mentorquest.schemas.stats import (
    DashboardSchema,
    LeaderboardSchema,
    ProfileSchema,
    StudentStatisticsSchema,
    TopicStatSchema,
)
from mentorquest.schemas.submission import SubmissionCreateSchema, SubmissionResultSchema

__all__ = [
    "LoginSchema",
    "RegisterSchema",
    "TokenSchema",
    "UserOutSchema",
    "BadgeCreateSchema",
    "BadgeOutSchema",
    "BadgeUpdateSchema",
    "QuestionCreateSchema",
    "QuestionOutSchema",
    "QuestionUpdateSchema",
    "QuestionWithProgressSchema",
    "DashboardSchema",
    "LeaderboardSchema",
    "ProfileSchema",
    "StudentStatisticsSchema",
    "TopicStatSchema",
    "SubmissionCreateSchema",
    "SubmissionResultSchema",
]
