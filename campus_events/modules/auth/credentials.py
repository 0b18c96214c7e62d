"""
Credential verification for the two principal variants.

Students authenticate with roll number + birth date (exact string match),
faculty/admin with faculty id + password. Both failure causes (unknown
identifier, wrong secret) surface as the same InvalidCredentialsError.
"""

from functools import lru_cache
from typing import Optional, Union

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from campus_events.core.config import settings
from campus_events.core.exceptions import InvalidCredentialsError, ValidationError
from campus_events.core.logging_config import logger
from campus_events.core.security import get_password_hash, secrets_equal, verify_password
from campus_events.models.principal import Faculty, PrincipalRole, Student

Principal = Union[Student, Faculty]


@lru_cache(maxsize=1)
def _dummy_password_hash() -> str:
    return get_password_hash("campus-events-dummy-password")


class CredentialVerifier:
    """Validates a login attempt against the principal store"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def verify(self, identifier: Optional[str], secret: Optional[str],
                     variant: PrincipalRole, client_ip: str = "unknown") -> Principal:
        if not identifier or not secret:
            raise ValidationError("Please provide username and password")

        if variant == PrincipalRole.STUDENT:
            principal, reason = await self._verify_student(identifier, secret)
        else:
            principal, reason = await self._verify_faculty(identifier, secret)

        if principal is None:
            logger.log_auth_event(
                event=f"login_{variant.value}",
                success=False,
                username=identifier,
                reason=reason,
                client_ip=client_ip,
            )
            raise InvalidCredentialsError()

        logger.log_auth_event(
            event=f"login_{variant.value}",
            success=True,
            username=identifier,
            client_ip=client_ip,
            role=principal.role.value,
        )
        return principal

    async def _verify_student(self, roll_number: str, birth_date: str):
        result = await self.db.execute(
            select(Student).where(Student.roll_number == roll_number)
        )
        student = result.scalar_one_or_none()

        if student is None:
            secrets_equal(birth_date, birth_date)
            return None, "unknown roll number"
        if not secrets_equal(birth_date, student.birth_date):
            return None, "birth date mismatch"
        return student, None

    async def _verify_faculty(self, faculty_id: str, password: str):
        result = await self.db.execute(
            select(Faculty).where(Faculty.faculty_id == faculty_id)
        )
        faculty = result.scalar_one_or_none()
        hashed = settings.uses_hashed_faculty_passwords()

        if faculty is None:
            # Spend the same work as a real check
            if hashed:
                verify_password(password, _dummy_password_hash())
            return None, "unknown faculty id"

        if hashed:
            matched = verify_password(password, faculty.password)
        else:
            matched = secrets_equal(password, faculty.password)

        if not matched:
            return None, "password mismatch"
        return faculty, None
