from typing import List, Optional
from datetime import datetime

from campus_events.models.certificate import Certificate, CertificateType
from campus_events.schemas.common import CamelModel


class CertificateResponse(CamelModel):
    id: str
    title: str
    event_name: str
    issue_date: str
    type: CertificateType
    student_id: str
    student_name: str
    student_email: Optional[str] = None
    department: Optional[str] = None
    registration_number: Optional[str] = None
    has_artifact: bool = False
    created_at: datetime

    @classmethod
    def from_certificate(cls, certificate: Certificate) -> "CertificateResponse":
        return cls(
            id=certificate.id,
            title=certificate.title,
            event_name=certificate.event_name,
            issue_date=certificate.issue_date,
            type=certificate.type,
            student_id=certificate.student_identifier,
            student_name=certificate.student_name,
            student_email=certificate.student_email,
            department=certificate.department,
            registration_number=certificate.registration_number,
            has_artifact=bool(certificate.artifact_path),
            created_at=certificate.created_at,
        )


class CertificateIssueResponse(CamelModel):
    message: str
    issued: int
    certificates: List[CertificateResponse]
