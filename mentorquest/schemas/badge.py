"""Pydantic schemas for badges."""
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

CriteriaType = Literal["problems_solved", "streak", "contest_participation", "daily_activity"]
Timeframe = Literal["daily", "weekly", "monthly", "all_time"]


class BadgeCriteriaSchema(BaseModel):
    type: CriteriaType
    value: float = Field(ge=0)
    timeframe: Timeframe = "all_time"


class BadgeCreateSchema(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    description: str = Field(min_length=1)
    icon: str | None = None
    criteria: BadgeCriteriaSchema
    points: int = Field(default=100, ge=0)
    is_active: bool = True


class BadgeUpdateSchema(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=120)
    description: str | None = Field(default=None, min_length=1)
    icon: str | None = None
    criteria: BadgeCriteriaSchema | None = None
    points: int | None = Field(default=None, ge=0)
    is_active: bool | None = None


class BadgeOutSchema(BaseModel):
    id: int
    name: str
    description: str
    icon: str | None = None
    criteria: BadgeCriteriaSchema
    points: int
    is_active: bool

    @classmethod
    def from_model(cls, badge) -> "BadgeOutSchema":
        return cls(
            id=badge.id,
            name=badge.name,
            description=badge.description,
            icon=badge.icon,
            criteria=BadgeCriteriaSchema(
                type=badge.criteria_type,
                value=badge.criteria_value,
                timeframe=badge.criteria_timeframe,
            ),
            points=badge.points,
            is_active=badge.is_active,
        )


class EarnedBadgeSchema(BaseModel):
    badge_id: int
    name: str
    points: int
    earned_date: datetime
