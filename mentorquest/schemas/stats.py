"""Pydantic schemas for statistics, leaderboard and dashboard."""
from datetime import datetime

from pydantic import BaseModel

from mentorquest.schemas.badge import EarnedBadgeSchema
from mentorquest.schemas.question import QuestionOutSchema
from mentorquest.schemas.submission import SubmissionOutSchema


class TopicStatSchema(BaseModel):
    topic: str
    total_questions: int = 0
    solved_questions: int = 0
    attempted_questions: int = 0

    class Config:
        from_attributes = True


class DifficultyCountSchema(BaseModel):
    difficulty: str
    count: int


class StudentStatisticsSchema(BaseModel):
    total_solved: int
    total_attempted: int
    difficulty_breakdown: list[DifficultyCountSchema]
    topic_stats: list[TopicStatSchema]


class ActivitySchema(BaseModel):
    id: int
    student_id: int
    activity_type: str
    question_id: int | None = None
    badge_id: int | None = None
    points_earned: int = 0
    streak_count: int | None = None
    activity_date: datetime

    class Config:
        from_attributes = True


class StudentSummarySchema(BaseModel):
    id: int
    name: str
    total_points: int
    current_streak: int
    max_streak: int
    rank: int
    badges: list[EarnedBadgeSchema]


class ProfileSchema(BaseModel):
    user: StudentSummarySchema
    statistics: StudentStatisticsSchema
    recent_activity: list[ActivitySchema]


class DashboardSchema(BaseModel):
    user: StudentSummarySchema
    question_of_the_day: QuestionOutSchema | None = None
    today_activities: list[ActivitySchema]
    recent_submissions: list[SubmissionOutSchema]


class LeaderboardEntrySchema(BaseModel):
    student_id: int
    name: str
    avatar: str | None = None
    rank: int
    total_points: int
    current_streak: int
    max_streak: int


class LeaderboardPaginationSchema(BaseModel):
    current: int
    total: int


class LeaderboardSchema(BaseModel):
    leaderboard: list[LeaderboardEntrySchema]
    pagination: LeaderboardPaginationSchema
