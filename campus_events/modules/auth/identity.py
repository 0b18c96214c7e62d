from dataclasses import dataclass
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from campus_events.core.exceptions import AuthenticationError
from campus_events.core.security import TokenIdentity
from campus_events.models.principal import Faculty, PrincipalRole, Student


@dataclass(frozen=True)
class Actor:
    """Resolved caller passed explicitly into every registry operation"""
    principal_id: str
    role: PrincipalRole
    name: str
    department: Optional[str] = None
    roll_number: Optional[str] = None

    @property
    def is_student(self) -> bool:
        return self.role == PrincipalRole.STUDENT

    @classmethod
    def from_student(cls, student: Student) -> "Actor":
        return cls(
            principal_id=student.id,
            role=PrincipalRole.STUDENT,
            name=student.name,
            department=student.department,
            roll_number=student.roll_number,
        )

    @classmethod
    def from_faculty(cls, faculty: Faculty) -> "Actor":
        return cls(
            principal_id=faculty.id,
            role=faculty.role,
            name=faculty.name,
            department=faculty.department,
        )


async def load_actor(db: AsyncSession, identity: TokenIdentity) -> Actor:
    """Resolve token claims against the principal store"""
    if identity.role == PrincipalRole.STUDENT.value:
        result = await db.execute(select(Student).where(Student.id == identity.principal_id))
        student = result.scalar_one_or_none()
        if student:
            return Actor.from_student(student)
    elif identity.role in (PrincipalRole.FACULTY.value, PrincipalRole.ADMIN.value):
        result = await db.execute(select(Faculty).where(Faculty.id == identity.principal_id))
        faculty = result.scalar_one_or_none()
        if faculty:
            return Actor.from_faculty(faculty)

    raise AuthenticationError("Principal not found")
