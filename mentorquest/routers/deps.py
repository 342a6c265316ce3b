"""Shared dependencies: current user, role guards, clock and grader."""
from typing import Annotated

from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session

from mentorquest.core.config import Settings, get_settings
from mentorquest.core.security import verify_session_token
from mentorquest.db.session import get_db
from mentorquest.models.user import User


def _token_from_request(request: Request, settings: Settings) -> str | None:
    header = request.headers.get("Authorization", "")
    if header.lower().startswith("bearer "):
        return header[7:].strip()
    return request.cookies.get(settings.auth_cookie_name)


def get_current_user_optional(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> User | None:
    """Return current user if the session token is valid; else None."""
    user_id = verify_session_token(_token_from_request(request, settings))
    if user_id is None:
        return None
    return db.get(User, user_id)


def get_current_user(
    user: Annotated[User | None, Depends(get_current_user_optional)],
) -> User:
    if user is None:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return user


def require_student(user: Annotated[User, Depends(get_current_user)]) -> User:
    if not user.is_student:
        raise HTTPException(status_code=403, detail="Students only")
    return user


def require_admin(user: Annotated[User, Depends(get_current_user)]) -> User:
    if not user.is_admin:
        raise HTTPException(status_code=403, detail="Admin access required")
    return user
