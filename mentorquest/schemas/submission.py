"""Pydantic schemas for solution submissions."""
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

Language = Literal["javascript", "python", "java", "cpp"]


class SubmissionCreateSchema(BaseModel):
    code: str = Field(min_length=1)
    language: Language


class SubmissionOutSchema(BaseModel):
    id: int
    question_id: int
    language: str
    status: str
    points_earned: int
    is_question_of_the_day: bool
    submitted_at: datetime

    class Config:
        from_attributes = True


class SubmissionResultSchema(BaseModel):
    status: str
    points_earned: int
    message: str
    submission_id: int
    first_solve: bool = False
    badges_earned: list[str] = []
