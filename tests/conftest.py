"""
Campus Events - Test Configuration and Fixtures
"""
import os
from typing import AsyncGenerator, Callable
import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from faker import Faker

# Set testing environment before the app reads its settings
os.environ['ENVIRONMENT'] = 'testing'
os.environ['DATABASE_URL'] = 'sqlite+aiosqlite:///./test.db'
os.environ['JWT_SECRET_KEY'] = 'test-jwt-secret-key-for-testing'
os.environ['RATE_LIMIT_ENABLED'] = 'false'
os.environ['BCRYPT_ROUNDS'] = '4'
os.environ['FACULTY_PASSWORD_MODE'] = 'bcrypt'
os.environ['LOG_FILE'] = ''
os.environ['LOG_LEVEL'] = 'WARNING'

from campus_events.main import app
from campus_events.core.config import settings
from campus_events.core.database import build_engine, create_session_factory, get_db, init_db
from campus_events.core.security import get_password_hash, create_access_token
from campus_events.models.principal import Student, Faculty, PrincipalRole

fake = Faker()

FACULTY_PASSWORD = 'faculty-pass-123'


@pytest.fixture
async def engine(tmp_path):
    """Fresh SQLite file database per test"""
    test_engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await init_db(test_engine)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker:
    return create_session_factory(engine)


@pytest.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture(autouse=True)
def certificates_dir(tmp_path, monkeypatch):
    path = tmp_path / "certificates"
    monkeypatch.setattr(settings, "CERTIFICATES_PATH", str(path))
    return path


@pytest.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """Test client; every request gets its own session like production"""
    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                if session.new or session.dirty or session.deleted:
                    await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url='http://test') as ac:
        yield ac

    app.dependency_overrides.clear()


# ============================================
# Principals
# ============================================

@pytest.fixture
def make_student(db_session: AsyncSession) -> Callable:
    async def _make(department: str = "CSE", **kwargs) -> Student:
        student = Student(
            roll_number=kwargs.pop("roll_number", fake.unique.bothify(text="21??####").upper()),
            registration_number=kwargs.pop("registration_number", fake.unique.bothify(text="REG########")),
            name=kwargs.pop("name", fake.name()),
            birth_date=kwargs.pop("birth_date", fake.date_of_birth(minimum_age=18, maximum_age=24).isoformat()),
            department=department,
            email=kwargs.pop("email", fake.unique.email()),
            phone=kwargs.pop("phone", fake.numerify("98########")),
            nationality=kwargs.pop("nationality", "Indian"),
            **kwargs,
        )
        db_session.add(student)
        await db_session.commit()
        return student
    return _make


@pytest.fixture
def make_faculty(db_session: AsyncSession) -> Callable:
    async def _make(department: str = "CSE", role: PrincipalRole = PrincipalRole.FACULTY,
                    password: str = FACULTY_PASSWORD, **kwargs) -> Faculty:
        faculty = Faculty(
            faculty_id=kwargs.pop("faculty_id", fake.unique.bothify(text="FAC-####")),
            name=kwargs.pop("name", fake.name()),
            department=department,
            email=kwargs.pop("email", fake.unique.email()),
            phone=kwargs.pop("phone", fake.numerify("98########")),
            designation=kwargs.pop("designation", "Assistant Professor"),
            password=get_password_hash(password),
            role=role,
            **kwargs,
        )
        db_session.add(faculty)
        await db_session.commit()
        return faculty
    return _make


def auth_headers_for(principal) -> dict:
    """Bearer header for a Student or Faculty record"""
    token = create_access_token(principal.id, principal.role.value)
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
async def student(make_student) -> Student:
    return await make_student(department="CSE")


@pytest.fixture
async def faculty(make_faculty) -> Faculty:
    return await make_faculty(department="CSE")


@pytest.fixture
async def admin(make_faculty) -> Faculty:
    return await make_faculty(department="Administration", role=PrincipalRole.ADMIN)


@pytest.fixture
def student_headers(student: Student) -> dict:
    return auth_headers_for(student)


@pytest.fixture
def faculty_headers(faculty: Faculty) -> dict:
    return auth_headers_for(faculty)


@pytest.fixture
def admin_headers(admin: Faculty) -> dict:
    return auth_headers_for(admin)


@pytest.fixture
def event_data() -> dict:
    return {
        "title": "Tech Fest",
        "description": "Annual technical festival",
        "date": "2025-03-14",
        "time": "10:00",
        "venue": "Main Auditorium",
        "organizer": "CSE Department",
        "category": "technical",
        "registrationOpen": True,
    }


@pytest.fixture
async def event(client: AsyncClient, faculty_headers: dict, event_data: dict) -> dict:
    """Event created over the API by `faculty`"""
    response = await client.post("/api/events", json=event_data, headers=faculty_headers)
    assert response.status_code == 201
    return response.json()
