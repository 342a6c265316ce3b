"""Pydantic schemas for registration and login."""
from pydantic import BaseModel, Field


class RegisterSchema(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    email: str = Field(min_length=3, max_length=255)
    password: str = Field(min_length=8)


class LoginSchema(BaseModel):
    email: str
    password: str


class UserOutSchema(BaseModel):
    id: int
    name: str
    email: str
    role: str
    avatar: str | None = None

    class Config:
        from_attributes = True


class TokenSchema(BaseModel):
    user: UserOutSchema
    token: str
