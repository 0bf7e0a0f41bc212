import os

# Must be set before the app is imported: settings and logging read them once
os.environ["ENVIRONMENT"] = "testing"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET_KEY"] = "test-jwt-secret-key-for-hs256-signing-0123456789"
os.environ["SERVICE_ROLE_KEY"] = "test-service-role-key"
os.environ["STORAGE_PUBLIC_BASE_URL"] = ""

from datetime import date, datetime, timezone
from typing import AsyncGenerator, Generator

import httpx
import pytest
import pytest_asyncio
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.db.db import create_tables
from app.db.models import (
    Application,
    ApplicationType,
    Profile,
    University,
    UniversityRequirement,
    UserRole,
)
from app.db.session import get_sync_session
from app.main import app
from app.services.storage_service import StorageService, get_storage_service

from tests.fakes import FakeMinio
from tests.factories import link, make_profile, make_university, make_application


# Test database setup
@pytest.fixture
def test_engine():
    """In-memory SQLite shared by every connection of one test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )
    create_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(test_engine) -> sessionmaker:
    return sessionmaker(bind=test_engine, class_=Session, expire_on_commit=False)


@pytest.fixture
def db_session(session_factory) -> Generator[Session, None, None]:
    """Session used by fixtures and service-level tests."""
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def fake_minio() -> FakeMinio:
    return FakeMinio()


@pytest.fixture
def storage_service(fake_minio) -> StorageService:
    return StorageService(fake_minio, bucket_name="student-files")


@pytest.fixture
def test_app(session_factory, storage_service):
    """The application with its database and object storage swapped for test doubles."""

    def override_get_sync_session():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_sync_session] = override_get_sync_session
    app.dependency_overrides[get_storage_service] = lambda: storage_service
    yield app
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(test_app) -> AsyncGenerator[httpx.AsyncClient, None]:
    transport = httpx.ASGITransport(app=test_app)
    async with httpx.AsyncClient(
        transport=transport, base_url="http://testserver"
    ) as http_client:
        yield http_client


@pytest.fixture
def student(db_session) -> Profile:
    return make_profile(
        db_session, UserRole.STUDENT, "alex@example.com", "Alex", "Kim"
    )


@pytest.fixture
def other_student(db_session) -> Profile:
    return make_profile(
        db_session, UserRole.STUDENT, "sam@example.com", "Sam", "Lee"
    )


@pytest.fixture
def parent(db_session) -> Profile:
    return make_profile(
        db_session, UserRole.PARENT, "jordan@example.com", "Jordan", "Kim"
    )


@pytest.fixture
def other_parent(db_session) -> Profile:
    return make_profile(
        db_session, UserRole.PARENT, "riley@example.com", "Riley", "Park"
    )


@pytest.fixture
def linked_parent(db_session, parent, student) -> Profile:
    """`parent` linked to `student`."""
    link(db_session, parent, student)
    return parent


@pytest.fixture
def university(db_session) -> University:
    return make_university(
        db_session,
        "Stanford University",
        city="Stanford",
        state="CA",
        country="USA",
        us_news_ranking=3,
        acceptance_rate=3.9,
        tuition_in_state=62484,
        tuition_out_state=62484,
        application_fee=90,
        application_system="Common App",
        deadlines={"regular": "2025-01-02", "early_action": "2024-11-01"},
        programs=["Computer Science", "Economics"],
    )


@pytest.fixture
def second_university(db_session) -> University:
    return make_university(
        db_session,
        "University of Toronto",
        city="Toronto",
        state="ON",
        country="Canada",
        us_news_ranking=21,
        acceptance_rate=43.0,
        tuition_in_state=6100,
        tuition_out_state=45690,
        application_fee=180,
        application_system="OUAC",
        programs=["Engineering", "Computer Science"],
    )


@pytest.fixture
def requirements(db_session, university) -> list:
    """Three checklist items for `university`, deliberately inserted out of order."""
    items = [
        UniversityRequirement(
            university_id=university.id,
            requirement_type="essay",
            requirement_name="Personal Essay",
            order_index=2,
        ),
        UniversityRequirement(
            university_id=university.id,
            requirement_type="test",
            requirement_name="SAT or ACT Scores",
            is_required=False,
            order_index=3,
        ),
        UniversityRequirement(
            university_id=university.id,
            requirement_type="transcript",
            requirement_name="Official Transcript",
            order_index=1,
        ),
    ]
    db_session.add_all(items)
    db_session.commit()
    return sorted(items, key=lambda r: r.order_index)


@pytest.fixture
def application(db_session, student, university) -> Application:
    return make_application(
        db_session,
        student,
        university,
        deadline=date(2025, 1, 2),
        application_type=ApplicationType.REGULAR_DECISION,
    )


@pytest.fixture
def fixed_today() -> date:
    return date(2025, 3, 1)


@pytest.fixture
def utc_midnight():
    def _at(day: date, hour: int = 0) -> datetime:
        return datetime(day.year, day.month, day.day, hour, tzinfo=timezone.utc)

    return _at
