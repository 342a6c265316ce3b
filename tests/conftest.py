from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from mentorquest.core.clock import FixedClock
from mentorquest.db.base import Base
from mentorquest.db.session import make_engine
from mentorquest.models.badge import Badge
from mentorquest.models.question import Question
from mentorquest.models.user import ROLE_ADMIN, ROLE_STUDENT, User

START = datetime(2024, 3, 10, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def engine():
    engine = make_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def file_session_factory(tmp_path):
    """Sessions on a real database file, for tests that need separate connections."""
    engine = make_engine(f"sqlite:///{tmp_path / 'mentorquest.db'}")
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(bind=engine, autoflush=True, expire_on_commit=False)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=True, expire_on_commit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def clock():
    return FixedClock(START)


@pytest.fixture
def make_student(db):
    def _make(name="Student", role=ROLE_STUDENT, **fields):
        user = User(name=name, email=f"{name.lower().replace(' ', '.')}@example.com", role=role, **fields)
        db.add(user)
        db.commit()
        return user

    return _make


@pytest.fixture
def student(make_student):
    return make_student("Sam")


@pytest.fixture
def admin(make_student):
    return make_student("Ada Admin", role=ROLE_ADMIN)


@pytest.fixture
def make_question(db):
    """Questions get strictly increasing created_at so 'oldest first' is deterministic."""
    counter = {"n": 0}

    def _make(title=None, difficulty="cakewalk", tags=("arrays",), points=10, is_active=True):
        counter["n"] += 1
        question = Question(
            title=title or f"Question {counter['n']}",
            description="Solve it.",
            difficulty=difficulty,
            points=points,
            is_active=is_active,
            created_at=START - timedelta(days=30) + timedelta(minutes=counter["n"]),
        )
        question.tags = list(tags)
        db.add(question)
        db.commit()
        return question

    return _make


@pytest.fixture
def make_badge(db):
    def _make(name, criteria_type="problems_solved", value=1, points=50, is_active=True, timeframe="all_time"):
        badge = Badge(
            name=name,
            description=f"{name} badge",
            criteria_type=criteria_type,
            criteria_value=value,
            criteria_timeframe=timeframe,
            points=points,
            is_active=is_active,
        )
        db.add(badge)
        db.commit()
        return badge

    return _make
