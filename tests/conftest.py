"""Pytest configuration and shared fixtures.

This module provides fixtures and configuration used across all tests.
"""

import os
from pathlib import Path
from typing import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

# Set required environment variables for tests BEFORE importing app modules
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET_KEY", "test_secret_key_for_testing_only")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

from survey_service.models.database import Base, build_engine, configure_engine, get_session_factory
from survey_service.models.survey import Survey
from survey_service.models.user import User, utcnow
from survey_service.schemas.question import Question
from survey_service.services.security import hash_password


@pytest.fixture(scope="function")
async def db_engine(tmp_path):
    """Create a test engine on a fresh SQLite file.

    A file (not :memory:) so that concurrently opened connections share
    one database. The engine is installed as the service's global engine,
    so API requests made during the test use it too.
    """
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    configure_engine(engine)

    yield engine

    await engine.dispose()


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Session factory bound to the test engine."""
    return get_session_factory()


@pytest.fixture(scope="function")
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session.

    Note:
        Tests must commit their own writes; an open write transaction
        here would block the sessions used by API requests.
    """
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture(scope="function")
async def client(db_engine) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client calling the app in-process."""
    from survey_service.main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as http:
        yield http


@pytest.fixture
def make_user(db_session):
    """Factory creating a committed user.

    Returns:
        async callable(email=..., password=..., name=...) -> User
    """
    async def _make_user(
        email: str = "owner@example.com",
        password: str = "secret123",
        name: str = "Survey Owner",
    ) -> User:
        user = User(email=email, password_hash=hash_password(password), name=name)
        db_session.add(user)
        await db_session.commit()
        await db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def yes_no_questions() -> list[Question]:
    """One required single-choice question with options Yes/No."""
    return [
        Question(id="q1", type="single-choice", question="Do you like it?", options=["Yes", "No"], required=True)
    ]


@pytest.fixture
def make_survey(db_session):
    """Factory creating a committed survey.

    Returns:
        async callable(user, questions, status="active") -> Survey
    """
    async def _make_survey(user: User, questions: list[Question], status: str = "active", title: str = "Feedback") -> Survey:
        survey = Survey(
            user_id=user.id,
            title=title,
            description="Tell us what you think",
            status=status,
            responses_count=0,
            published_at=utcnow() if status == "active" else None,
        )
        survey.set_questions(questions)
        db_session.add(survey)
        await db_session.commit()
        await db_session.refresh(survey)
        return survey

    return _make_survey


@pytest.fixture
def shipped_templates_dir() -> Path:
    """Directory holding the built-in template YAML files."""
    return Path(__file__).parent.parent / "templates"
