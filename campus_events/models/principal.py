from sqlalchemy import Column, String, DateTime, Enum as SQLEnum
from datetime import datetime
import enum

from campus_events.core.database import Base
from campus_events.models.base import ID_TYPE, new_id


class PrincipalRole(str, enum.Enum):
    """Roles carried in the session token"""
    STUDENT = "student"
    FACULTY = "faculty"
    ADMIN = "admin"


class Student(Base):
    """Student principal. Logs in with roll number + birth date."""
    __tablename__ = "students"

    id = Column(ID_TYPE, primary_key=True, default=new_id)
    roll_number = Column(String(50), unique=True, index=True, nullable=False)
    registration_number = Column(String(50), unique=True, nullable=True)
    name = Column(String(255), nullable=False)
    birth_date = Column(String(20), nullable=False)  # compared as entered, e.g. "2003-05-14"
    department = Column(String(100), nullable=False)
    email = Column(String(255), nullable=True)
    phone = Column(String(20), nullable=True)
    nationality = Column(String(100), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    @property
    def role(self) -> PrincipalRole:
        return PrincipalRole.STUDENT

    @property
    def username(self) -> str:
        return self.roll_number

    def __repr__(self):
        return f"<Student {self.roll_number}>"


class Faculty(Base):
    """Faculty or admin principal. Logs in with faculty id + password."""
    __tablename__ = "faculty"

    id = Column(ID_TYPE, primary_key=True, default=new_id)
    faculty_id = Column(String(50), unique=True, index=True, nullable=False)
    name = Column(String(255), nullable=False)
    department = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    phone = Column(String(20), nullable=True)
    designation = Column(String(100), nullable=True)
    password = Column(String(255), nullable=False)  # bcrypt hash, or legacy plaintext

    role = Column(SQLEnum(PrincipalRole), default=PrincipalRole.FACULTY, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    @property
    def username(self) -> str:
        return self.faculty_id

    def __repr__(self):
        return f"<Faculty {self.faculty_id}>"
