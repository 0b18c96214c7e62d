# Re-export all models for convenient imports
from campus_events.models.principal import Student, Faculty, PrincipalRole
from campus_events.models.event import Event, EventRegistration, EventCategory
from campus_events.models.on_duty import OnDutyRequest, OnDutyReason, OnDutyStatus
from campus_events.models.certificate import Certificate, CertificateType

__all__ = [
    # Principals
    "Student",
    "Faculty",
    "PrincipalRole",
    # Events
    "Event",
    "EventRegistration",
    "EventCategory",
    # On-duty requests
    "OnDutyRequest",
    "OnDutyReason",
    "OnDutyStatus",
    # Certificates
    "Certificate",
    "CertificateType",
]
