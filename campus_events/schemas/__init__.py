from campus_events.schemas.common import CamelModel, MessageResponse
from campus_events.schemas.auth import LoginRequest, LoginResponse, ProfileResponse
from campus_events.schemas.event import (
    EventCreate,
    EventUpdate,
    EventResponse,
    EventDetailResponse,
    CreatorSummary,
    RegisteredStudent,
)
from campus_events.schemas.on_duty import OnDutyRequestCreate, OnDutyRequestResponse, ResolveRequest
from campus_events.schemas.certificate import CertificateResponse, CertificateIssueResponse
