from campus_events.services.event_service import EventService
from campus_events.services.on_duty_service import OnDutyService
from campus_events.services.certificate_service import CertificateService

__all__ = ["EventService", "OnDutyService", "CertificateService"]
