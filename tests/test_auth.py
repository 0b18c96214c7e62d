import pytest
from httpx import AsyncClient

from campus_events.core.config import settings
from campus_events.models.principal import PrincipalRole
from tests.conftest import FACULTY_PASSWORD, auth_headers_for


@pytest.mark.asyncio
async def test_student_login_success(client: AsyncClient, student):
    """Student logs in with roll number + birth date"""
    response = await client.post(
        "/api/auth/login/student",
        json={"username": student.roll_number, "password": student.birth_date}
    )

    assert response.status_code == 200
    data = response.json()
    assert data["role"] == "student"
    assert data["username"] == student.roll_number
    assert data["name"] == student.name
    assert data["token"]


@pytest.mark.asyncio
async def test_student_login_wrong_birth_date(client: AsyncClient, student):
    response = await client.post(
        "/api/auth/login/student",
        json={"username": student.roll_number, "password": "1900-01-01"}
    )

    assert response.status_code == 400
    assert response.json() == {"message": "Invalid credentials"}


@pytest.mark.asyncio
async def test_unknown_and_wrong_secret_are_indistinguishable(client: AsyncClient, student, faculty):
    """Unknown identifier and wrong secret produce the same response"""
    unknown_student = await client.post(
        "/api/auth/login/student", json={"username": "NOPE999", "password": "2000-01-01"}
    )
    wrong_student = await client.post(
        "/api/auth/login/student", json={"username": student.roll_number, "password": "2000-01-01"}
    )
    unknown_faculty = await client.post(
        "/api/auth/login/faculty", json={"username": "FAC-NOPE", "password": "whatever"}
    )
    wrong_faculty = await client.post(
        "/api/auth/login/faculty", json={"username": faculty.faculty_id, "password": "whatever"}
    )

    responses = [unknown_student, wrong_student, unknown_faculty, wrong_faculty]
    assert {r.status_code for r in responses} == {400}
    assert all(r.json() == {"message": "Invalid credentials"} for r in responses)


@pytest.mark.asyncio
async def test_faculty_login_success(client: AsyncClient, faculty):
    """Faculty password is checked against the stored bcrypt hash"""
    response = await client.post(
        "/api/auth/login/faculty",
        json={"username": faculty.faculty_id, "password": FACULTY_PASSWORD}
    )

    assert response.status_code == 200
    data = response.json()
    assert data["role"] == "faculty"
    assert data["username"] == faculty.faculty_id
    assert data["name"] == faculty.name


@pytest.mark.asyncio
async def test_admin_login_reports_admin_role(client: AsyncClient, admin):
    response = await client.post(
        "/api/auth/login/faculty",
        json={"username": admin.faculty_id, "password": FACULTY_PASSWORD}
    )

    assert response.status_code == 200
    assert response.json()["role"] == "admin"


@pytest.mark.asyncio
async def test_faculty_cannot_use_student_login(client: AsyncClient, faculty):
    response = await client.post(
        "/api/auth/login/student",
        json={"username": faculty.faculty_id, "password": FACULTY_PASSWORD}
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Invalid credentials"


@pytest.mark.asyncio
async def test_plaintext_faculty_password_mode(client: AsyncClient, make_faculty, db_session, monkeypatch):
    """Legacy mode compares the stored value directly"""
    monkeypatch.setattr(settings, "FACULTY_PASSWORD_MODE", "plaintext")
    faculty = await make_faculty()
    faculty.password = "legacy-secret"
    await db_session.commit()

    ok = await client.post(
        "/api/auth/login/faculty", json={"username": faculty.faculty_id, "password": "legacy-secret"}
    )
    bad = await client.post(
        "/api/auth/login/faculty", json={"username": faculty.faculty_id, "password": "legacy"}
    )

    assert ok.status_code == 200
    assert bad.status_code == 400


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [{}, {"username": "21CS001"}, {"password": "x"}, {"username": "", "password": ""}])
async def test_login_missing_fields(client: AsyncClient, body):
    response = await client.post("/api/auth/login/student", json=body)

    assert response.status_code == 400
    assert response.json() == {"message": "Please provide username and password"}


@pytest.mark.asyncio
async def test_me_returns_student_profile(client: AsyncClient, student, student_headers):
    response = await client.get("/api/auth/me", headers=student_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["id"] == student.id
    assert data["role"] == "student"
    assert data["username"] == student.roll_number
    assert data["department"] == "CSE"
    assert data["registrationNumber"] == student.registration_number


@pytest.mark.asyncio
async def test_me_returns_faculty_profile(client: AsyncClient, faculty, faculty_headers):
    response = await client.get("/api/auth/me", headers=faculty_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["role"] == "faculty"
    assert data["username"] == faculty.faculty_id
    assert data["designation"] == faculty.designation


@pytest.mark.asyncio
async def test_me_without_token(client: AsyncClient):
    response = await client.get("/api/auth/me")

    assert response.status_code == 401
    assert response.json() == {"message": "No token, authorization denied"}


@pytest.mark.asyncio
async def test_token_for_deleted_principal_is_rejected(client: AsyncClient, student, db_session):
    headers = auth_headers_for(student)
    await db_session.delete(student)
    await db_session.commit()

    response = await client.get("/api/auth/me", headers=headers)

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_login_token_authenticates_follow_up_requests(client: AsyncClient, student):
    login = await client.post(
        "/api/auth/login/student",
        json={"username": student.roll_number, "password": student.birth_date}
    )
    token = login.json()["token"]

    response = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 200
    assert response.json()["role"] == PrincipalRole.STUDENT.value
