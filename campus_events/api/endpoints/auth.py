from fastapi import APIRouter, Depends, Request
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from campus_events.core.database import get_db
from campus_events.core.exceptions import AuthenticationError
from campus_events.core.rate_limiter import login_rate_limit
from campus_events.core.security import create_access_token
from campus_events.models.principal import Faculty, PrincipalRole, Student
from campus_events.modules.auth import Actor, CredentialVerifier, get_current_actor
from campus_events.schemas.auth import LoginRequest, LoginResponse, ProfileResponse

router = APIRouter()


async def _login(request: Request, credentials: LoginRequest, variant: PrincipalRole,
                 db: AsyncSession) -> LoginResponse:
    client_ip = request.client.host if request.client else "unknown"
    principal = await CredentialVerifier(db).verify(
        credentials.username, credentials.password, variant, client_ip=client_ip
    )

    role = principal.role.value
    return LoginResponse(
        token=create_access_token(principal.id, role),
        role=role,
        username=principal.username,
        name=principal.name,
    )


@router.post("/login/student", response_model=LoginResponse)
@login_rate_limit()
async def login_student(
    request: Request,
    credentials: LoginRequest,
    db: AsyncSession = Depends(get_db)
):
    """Student login: roll number + birth date"""
    return await _login(request, credentials, PrincipalRole.STUDENT, db)


@router.post("/login/faculty", response_model=LoginResponse)
@login_rate_limit()
async def login_faculty(
    request: Request,
    credentials: LoginRequest,
    db: AsyncSession = Depends(get_db)
):
    """Faculty/admin login: faculty id + password"""
    return await _login(request, credentials, PrincipalRole.FACULTY, db)


@router.get("/me", response_model=ProfileResponse, response_model_by_alias=True)
async def get_current_principal_info(
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db)
):
    """Get current principal's profile"""
    if actor.is_student:
        result = await db.execute(select(Student).where(Student.id == actor.principal_id))
        student = result.scalar_one_or_none()
        if not student:
            raise AuthenticationError("Principal not found")
        return ProfileResponse(
            id=student.id,
            role=actor.role.value,
            username=student.username,
            name=student.name,
            department=student.department,
            email=student.email,
            phone=student.phone,
            registration_number=student.registration_number,
        )

    result = await db.execute(select(Faculty).where(Faculty.id == actor.principal_id))
    faculty = result.scalar_one_or_none()
    if not faculty:
        raise AuthenticationError("Principal not found")
    return ProfileResponse(
        id=faculty.id,
        role=actor.role.value,
        username=faculty.username,
        name=faculty.name,
        department=faculty.department,
        email=faculty.email,
        phone=faculty.phone,
        designation=faculty.designation,
    )
