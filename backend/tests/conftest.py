"""
Pytest configuration and fixtures for AEOlytics tests.
"""
import uuid
from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import AsyncClient, ASGITransport
from sqlalchemy import JSON
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

# IMPORTANT: Patch PostgreSQL types for SQLite compatibility
# Must be done before importing any models
import sqlalchemy.dialects.postgresql as pg_dialect
from sqlalchemy.types import TypeDecorator, CHAR
import uuid as uuid_module


# Custom UUID type that works with SQLite
class SQLiteUUID(TypeDecorator):
    """SQLite-compatible UUID type."""
    impl = CHAR(36)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is not None:
            return str(value)
        return value

    def process_result_value(self, value, dialect):
        if value is not None:
            return uuid_module.UUID(value)
        return value


pg_dialect.JSONB = JSON
pg_dialect.UUID = SQLiteUUID

from aeolytics.database import get_db
from aeolytics.models.base import Base
from aeolytics.models.citation import Citation
from aeolytics.models.domain import Domain, DomainStatus
from aeolytics.models.query import Query, QueryStatus
from aeolytics.models.user import Plan, User
from aeolytics.integrations.pipeline import PipelineResult

# Use SQLite for testing (in-memory)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

FREE_USER_ID = uuid.UUID("00000000-0000-0000-0000-000000000001")
PRO_USER_ID = uuid.UUID("00000000-0000-0000-0000-000000000002")
AGENCY_USER_ID = uuid.UUID("00000000-0000-0000-0000-000000000003")


# ============================================================================
# Database Fixtures
# ============================================================================

@pytest_asyncio.fixture(scope="function")
async def test_engine():
    """Create a test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture(scope="function")
def session_maker(test_engine):
    return async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture(scope="function")
async def db_session(session_maker) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async with session_maker() as session:
        yield session
        await session.rollback()


async def _make_user(db: AsyncSession, user_id: uuid.UUID, plan: Plan) -> User:
    user = User(
        id=user_id,
        email=f"{plan.value}@example.com",
        full_name=f"{plan.value.capitalize()} User",
        plan=plan.value,
    )
    db.add(user)
    await db.flush()
    await db.refresh(user)
    return user


@pytest_asyncio.fixture
async def free_user(db_session: AsyncSession) -> User:
    return await _make_user(db_session, FREE_USER_ID, Plan.FREE)


@pytest_asyncio.fixture
async def pro_user(db_session: AsyncSession) -> User:
    return await _make_user(db_session, PRO_USER_ID, Plan.PRO)


@pytest_asyncio.fixture
async def agency_user(db_session: AsyncSession) -> User:
    return await _make_user(db_session, AGENCY_USER_ID, Plan.AGENCY)


# ============================================================================
# Record Factories
# ============================================================================

@pytest.fixture
def make_domain(db_session: AsyncSession):
    """Insert a domain directly, bypassing quota checks."""

    async def _make(owner: User, hostname: str = "example.com") -> Domain:
        domain = Domain(user_id=owner.id, domain=hostname, status=DomainStatus.ACTIVE)
        db_session.add(domain)
        await db_session.flush()
        await db_session.refresh(domain)
        return domain

    return _make


@pytest.fixture
def make_query(db_session: AsyncSession):
    """Insert a query directly, bypassing quota checks."""

    async def _make(
        owner: User,
        text: str = "best crm for startups",
        status: QueryStatus = QueryStatus.ACTIVE,
        **kwargs,
    ) -> Query:
        kwargs.setdefault("engines", ["ChatGPT"])
        kwargs.setdefault("intent_tags", [])
        query = Query(user_id=owner.id, query_text=text, status=status, **kwargs)
        db_session.add(query)
        await db_session.flush()
        await db_session.refresh(query)
        return query

    return _make


@pytest.fixture
def make_citation(db_session: AsyncSession):
    """Insert a citation record as the processing pipeline would."""

    async def _make(
        query: Query,
        engine: str = "ChatGPT",
        cited: bool = True,
        days_ago: int = 0,
        **kwargs,
    ) -> Citation:
        kwargs.setdefault("response_text", f"{engine} answer")
        kwargs.setdefault("confidence_score", 0.8 if cited else 0.1)
        kwargs.setdefault("position", "top" if cited else None)
        citation = Citation(
            user_id=query.user_id,
            query_id=query.id,
            engine=engine,
            cited=cited,
            run_date=datetime.now(timezone.utc) - timedelta(days=days_ago),
            **kwargs,
        )
        db_session.add(citation)
        await db_session.flush()
        await db_session.refresh(citation)
        return citation

    return _make


# ============================================================================
# Mock Fixtures
# ============================================================================

@pytest.fixture
def mock_pipeline():
    """Mock query-processing pipeline client."""
    mock = MagicMock()
    mock.submit_batch = AsyncMock(
        return_value=PipelineResult(success=True, processed_count=1, failed_count=0)
    )
    return mock


@pytest.fixture
def mock_llm_client():
    """Mock LLM client for brief generation."""
    mock = MagicMock()
    mock.chat = AsyncMock()
    mock.close = AsyncMock()
    return mock


@pytest.fixture
def mock_notifier():
    """Mock e-mail notification service."""
    from aeolytics.schemas.notification import NotificationResult

    mock = MagicMock()
    mock.send_weekly_summary = AsyncMock(
        return_value=NotificationResult(success=True, recipients=["pro@example.com"])
    )
    mock.send_citation_alert = AsyncMock(
        return_value=NotificationResult(success=True, recipients=["pro@example.com"])
    )
    return mock


# ============================================================================
# FastAPI App Fixtures
# ============================================================================

@pytest.fixture(scope="function")
def app(db_session: AsyncSession, mock_pipeline, mock_llm_client, mock_notifier) -> FastAPI:
    """Create test FastAPI application."""
    from aeolytics.core.deps import (
        get_brief_generator,
        get_notification_service,
        get_pipeline_client,
    )
    from aeolytics.main import app as main_app
    from aeolytics.services.brief_generator import BriefGenerator

    async def override_get_db():
        yield db_session

    async def override_get_brief_generator():
        yield BriefGenerator(client=mock_llm_client)

    main_app.dependency_overrides[get_db] = override_get_db
    main_app.dependency_overrides[get_pipeline_client] = lambda: mock_pipeline
    main_app.dependency_overrides[get_brief_generator] = override_get_brief_generator
    main_app.dependency_overrides[get_notification_service] = lambda: mock_notifier

    yield main_app

    main_app.dependency_overrides.clear()


@pytest_asyncio.fixture(scope="function")
async def async_client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create async test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


# ============================================================================
# Authentication Fixtures
# ============================================================================

def _headers_for(user_id: uuid.UUID, email: str) -> dict:
    from aeolytics.core.security import create_access_token

    token = create_access_token(data={"sub": str(user_id), "email": email})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def free_headers(free_user: User) -> dict:
    return _headers_for(free_user.id, free_user.email)


@pytest.fixture
def pro_headers(pro_user: User) -> dict:
    return _headers_for(pro_user.id, pro_user.email)


@pytest.fixture
def agency_headers(agency_user: User) -> dict:
    return _headers_for(agency_user.id, agency_user.email)
