"""Pydantic schemas for catalog questions."""
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field, field_validator

Difficulty = Literal["cakewalk", "easy", "easy-medium", "medium", "hard"]


def _clean_tags(tags: list[str] | None) -> list[str] | None:
    if tags is None:
        return None
    cleaned = []
    for tag in tags:
        tag = tag.strip()
        if tag and tag not in cleaned:
            cleaned.append(tag)
    return cleaned


class QuestionCreateSchema(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: str = ""
    constraints: str | None = None
    difficulty: Difficulty
    tags: list[str] = Field(default_factory=list)
    points: int = Field(gt=0)
    is_active: bool = True

    @field_validator("tags")
    @classmethod
    def clean_tags(cls, tags):
        return _clean_tags(tags)


class QuestionUpdateSchema(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    constraints: str | None = None
    difficulty: Difficulty | None = None
    tags: list[str] | None = None
    points: int | None = Field(default=None, gt=0)
    is_active: bool | None = None

    @field_validator("tags")
    @classmethod
    def clean_tags(cls, tags):
        return _clean_tags(tags)


class QuestionOutSchema(BaseModel):
    id: int
    title: str
    description: str
    constraints: str | None = None
    difficulty: str
    tags: list[str]
    points: int
    is_active: bool
    total_submissions: int
    successful_submissions: int
    created_at: datetime

    class Config:
        from_attributes = True


class QuestionWithProgressSchema(QuestionOutSchema):
    student_status: str = "not_attempted"
    attempts: int = 0
    total_points_earned: int = 0


class PaginationSchema(BaseModel):
    current: int
    total: int
    has_next: bool = False
    has_prev: bool = False


class QuestionPageSchema(BaseModel):
    questions: list[QuestionWithProgressSchema]
    pagination: PaginationSchema


class AdminQuestionPageSchema(BaseModel):
    questions: list[QuestionOutSchema]
    pagination: PaginationSchema


class CountSchema(BaseModel):
    key: str
    count: int


class QuestionStatsSchema(BaseModel):
    question: QuestionOutSchema
    submission_stats: list[CountSchema]
    language_stats: list[CountSchema]
