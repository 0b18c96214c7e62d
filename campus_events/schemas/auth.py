from pydantic import BaseModel
from typing import Optional

from campus_events.schemas.common import CamelModel


class LoginRequest(BaseModel):
    # Optional so that a missing field reports the login-specific message
    username: Optional[str] = None  # roll number (students) / faculty id (faculty)
    password: Optional[str] = None  # birth date (students) / password (faculty)


class LoginResponse(BaseModel):
    token: str
    role: str
    username: str
    name: str


class ProfileResponse(CamelModel):
    id: str
    role: str
    username: str
    name: str
    department: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    designation: Optional[str] = None
    registration_number: Optional[str] = None
