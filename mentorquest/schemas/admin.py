"""Pydantic schemas for the admin user directory and analytics dashboard."""
from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, Field

from mentorquest.schemas.stats import ActivitySchema, LeaderboardPaginationSchema, StudentStatisticsSchema


class UserAdminSchema(BaseModel):
    """User row as admins see it. Never carries the password hash."""

    id: int
    name: str
    email: str
    role: str
    avatar: str | None = None
    total_points: int
    current_streak: int
    max_streak: int
    last_active_date: datetime | None = None
    created_at: datetime

    class Config:
        from_attributes = True


class UserPageSchema(BaseModel):
    users: list[UserAdminSchema]
    pagination: LeaderboardPaginationSchema


class UserUpdateSchema(BaseModel):
    """Profile fields an admin may change. Passwords are not accepted here."""

    name: str | None = Field(default=None, min_length=1, max_length=120)
    email: str | None = Field(default=None, min_length=3, max_length=255)
    avatar: str | None = Field(default=None, max_length=500)
    role: Literal["student", "admin"] | None = None

    class Config:
        extra = "ignore"


class UserDetailsSchema(BaseModel):
    user: UserAdminSchema
    statistics: StudentStatisticsSchema
    recent_activity: list[ActivitySchema]


class AdminOverviewSchema(BaseModel):
    total_users: int
    total_questions: int
    total_submissions: int
    total_badges: int


class TopPerformerSchema(BaseModel):
    id: int
    name: str
    avatar: str | None = None
    total_points: int
    current_streak: int


class PopularQuestionSchema(BaseModel):
    question_id: int
    title: str
    difficulty: str
    submission_count: int
    success_rate: float  # solved share of submissions, 0..1


class SubmissionTrendSchema(BaseModel):
    day: date
    count: int
    solved: int


class AdminDashboardSchema(BaseModel):
    overview: AdminOverviewSchema
    recent_activity: list[ActivitySchema]
    top_performers: list[TopPerformerSchema]
    popular_questions: list[PopularQuestionSchema]
    submission_trends: list[SubmissionTrendSchema]
