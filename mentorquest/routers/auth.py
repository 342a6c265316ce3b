"""Auth routes: register, login, logout. Signed session token in a cookie or bearer header."""
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy import select
from sqlalchemy.orm import Session

from mentorquest.core.config import Settings, get_settings
from mentorquest.core.security import create_session_token, hash_password, verify_password
from mentorquest.db.session import get_db
from mentorquest.models.user import ROLE_STUDENT, User
from mentorquest.schemas.auth import LoginSchema, RegisterSchema, TokenSchema, UserOutSchema
from mentorquest.services.users import EMAIL_RE, normalize_email

router = APIRouter(prefix="/auth", tags=["auth"])


def _issue(response: Response, user: User, settings: Settings) -> TokenSchema:
    token = create_session_token(user.id)
    response.set_cookie(
        key=settings.auth_cookie_name,
        value=token,
        max_age=settings.auth_cookie_max_age,
        httponly=True,
        samesite="lax",
        path="/",
    )
    return TokenSchema(user=UserOutSchema.model_validate(user), token=token)


@router.post("/register", response_model=TokenSchema, status_code=201)
def register(
    body: RegisterSchema,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
):
    """Create a student account and log it in."""
    email = normalize_email(body.email)
    if not EMAIL_RE.match(email):
        raise HTTPException(status_code=422, detail=[{"loc": ["body", "email"], "msg": "invalid email"}])
    # bcrypt hard limit: 72 bytes (UTF-8)
    if len(body.password.encode("utf-8")) > 72:
        raise HTTPException(status_code=422, detail=[{"loc": ["body", "password"], "msg": "too long"}])
    if db.scalar(select(User.id).where(User.email == email)) is not None:
        raise HTTPException(status_code=400, detail="User already exists")

    user = User(
        name=body.name.strip(),
        email=email,
        hashed_password=hash_password(body.password),
        role=ROLE_STUDENT,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return _issue(response, user, settings)


@router.post("/login", response_model=TokenSchema)
def login(
    body: LoginSchema,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
):
    user = db.scalar(select(User).where(User.email == normalize_email(body.email)))
    if not user or not user.hashed_password or not verify_password(body.password, user.hashed_password):
        raise HTTPException(status_code=401, detail="Invalid email or password")
    return _issue(response, user, settings)


@router.post("/logout")
def logout(response: Response, settings: Annotated[Settings, Depends(get_settings)]):
    # path must match the one used in set_cookie()
    response.delete_cookie(settings.auth_cookie_name, path="/")
    return {"message": "Logged out"}
