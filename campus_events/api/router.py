from fastapi import APIRouter

from campus_events.api.endpoints import auth, events, on_duty, certificates

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(events.router, prefix="/events", tags=["Events"])
api_router.include_router(on_duty.router, prefix="/on-duty-requests", tags=["On-Duty Requests"])
api_router.include_router(certificates.router, prefix="/certificates", tags=["Certificates"])
