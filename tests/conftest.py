import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")

from datetime import date
from types import SimpleNamespace
from typing import AsyncGenerator, Dict

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from portal.auth.models import User
from portal.auth.security import create_access_token, hash_password
from portal.core.models import Course, CourseAssignment, Semester, SemesterAdvisor
from portal.db.session import Base, get_db
from portal.main import app


TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
TEST_PASSWORD = "StrongPass123"

_password_hash = None


def _test_password_hash() -> str:
    # bcrypt is slow on purpose; hash once per run
    global _password_hash
    if _password_hash is None:
        _password_hash = hash_password(TEST_PASSWORD)
    return _password_hash


@pytest.fixture()
async def engine():
    """One in-memory SQLite database per test, shared by every session through StaticPool."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        future=True,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    @event.listens_for(engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture()
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Provide a database session for a test and override the FastAPI dependency."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with session_factory() as session:
        yield session
    app.dependency_overrides.clear()


@pytest.fixture()
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client bound to the FastAPI app."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


def _user(name: str, email: str, role: str, employee_id: str = None) -> User:
    return User(
        name=name,
        email=email,
        password_hash=_test_password_hash(),
        role=role,
        employee_id=employee_id,
        status="ACTIVE",
    )


@pytest.fixture()
async def world(db_session: AsyncSession) -> SimpleNamespace:
    """
    A semester with every reviewer seat filled, a year-2 course, and two
    teachers each assigned to it.
    """
    admin = _user("Admin", "admin@example.com", "admin")
    advisor = _user("Year 2 Advisor", "advisor@example.com", "class_advisor", "T-100")
    coordinator = _user("UG Coordinator", "coordinator@example.com", "ug_coordinator", "T-101")
    co_chairman = _user("Co-Chairman", "cochair@example.com", "co_chairman", "T-102")
    chairman = _user("Chairman", "chair@example.com", "chairman", "T-103")
    teacher = _user("Rahima Khatun", "rahima@example.com", "teacher", "T-200")
    teacher2 = _user("Arif Hossain", "arif@example.com", "teacher", "T-201")
    student = _user("Student One", "student@example.com", "student")
    db_session.add_all([admin, advisor, coordinator, co_chairman, chairman, teacher, teacher2, student])
    await db_session.flush()

    semester = Semester(
        name="Fall 2026",
        academic_year="2026-2027",
        type="fall",
        start_date=date(2026, 9, 1),
        end_date=date(2026, 12, 20),
        status="outline_submission",
        ug_coordinator_id=coordinator.id,
        co_chairman_id=co_chairman.id,
        chairman_id=chairman.id,
    )
    course = Course(course_code="CSE201", course_name="Data Structures", year=2, semester=1, credits=3)
    db_session.add_all([semester, course])
    await db_session.flush()
    db_session.add(SemesterAdvisor(semester_id=semester.id, year=2, user_id=advisor.id))

    assignment = CourseAssignment(
        semester_id=semester.id, teacher_id=teacher.id, course_id=course.id, year=2, section="A"
    )
    assignment2 = CourseAssignment(
        semester_id=semester.id, teacher_id=teacher2.id, course_id=course.id, year=2, section="B"
    )
    db_session.add_all([assignment, assignment2])
    await db_session.commit()

    return SimpleNamespace(
        admin=admin,
        advisor=advisor,
        coordinator=coordinator,
        co_chairman=co_chairman,
        chairman=chairman,
        teacher=teacher,
        teacher2=teacher2,
        student=student,
        semester=semester,
        course=course,
        assignment=assignment,
        assignment2=assignment2,
    )


def auth_headers(user: User) -> Dict[str, str]:
    token = create_access_token(subject={"sub": str(user.id), "role": user.role})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def headers_for():
    return auth_headers


@pytest.fixture()
async def cross_sections(db_session: AsyncSession, world: SimpleNamespace) -> SimpleNamespace:
    """
    A second year-2 course taught with the sections swapped: teacher in B,
    teacher2 in A. Lets one teacher meet two sections, and two teachers meet
    one section, each under a real assignment.
    """
    course = Course(course_code="CSE203", course_name="Discrete Mathematics", year=2, semester=1, credits=3)
    db_session.add(course)
    await db_session.flush()

    teacher_in_b = CourseAssignment(
        semester_id=world.semester.id, teacher_id=world.teacher.id, course_id=course.id, year=2, section="B"
    )
    teacher2_in_a = CourseAssignment(
        semester_id=world.semester.id, teacher_id=world.teacher2.id, course_id=course.id, year=2, section="A"
    )
    db_session.add_all([teacher_in_b, teacher2_in_a])
    await db_session.commit()
    return SimpleNamespace(course=course, teacher_in_b=teacher_in_b, teacher2_in_a=teacher2_in_a)
