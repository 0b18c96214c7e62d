from fastapi import APIRouter, Depends, File, Query, UploadFile, status
from fastapi.responses import FileResponse
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from campus_events.core.config import settings
from campus_events.core.database import get_db
from campus_events.core.exceptions import ValidationError
from campus_events.modules.auth import Actor, get_current_actor
from campus_events.schemas.certificate import CertificateIssueResponse, CertificateResponse
from campus_events.services.certificate_service import CertificateService

router = APIRouter()

UPLOAD_CHUNK_SIZE = 1024 * 1024


async def _read_upload(upload: UploadFile, field: str) -> bytes:
    """Read an upload, stopping as soon as it passes MAX_UPLOAD_SIZE"""
    buffer = bytearray()
    while True:
        chunk = await upload.read(UPLOAD_CHUNK_SIZE)
        if not chunk:
            break
        buffer.extend(chunk)
        if len(buffer) > settings.MAX_UPLOAD_SIZE:
            raise ValidationError(
                f"{field} too large. Maximum size is {settings.MAX_UPLOAD_SIZE // (1024 * 1024)}MB",
                field=field,
            )
    return bytes(buffer)


@router.post("", response_model=CertificateIssueResponse, status_code=status.HTTP_201_CREATED)
async def issue_certificates(
    roster: UploadFile = File(..., description="Roster CSV: id, name, email, event, type"),
    bundle: UploadFile = File(..., description="ZIP of certificate files named by student id"),
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db)
):
    """Bulk-issue certificates (faculty/admin). All rows succeed or none do."""
    roster_content = await _read_upload(roster, "roster")
    bundle_content = await _read_upload(bundle, "bundle")

    certificates = await CertificateService(db).issue(roster_content, bundle_content, actor)
    return CertificateIssueResponse(
        message=f"{len(certificates)} certificates issued successfully",
        issued=len(certificates),
        certificates=[CertificateResponse.from_certificate(c) for c in certificates],
    )


@router.get("", response_model=List[CertificateResponse])
async def list_certificates(
    event: Optional[str] = Query(None, description="Filter by event name"),
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db)
):
    certificates = await CertificateService(db).list_visible(actor, event)
    return [CertificateResponse.from_certificate(c) for c in certificates]


@router.get("/{certificate_id}", response_model=CertificateResponse)
async def get_certificate(
    certificate_id: str,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db)
):
    certificate = await CertificateService(db).get_visible(certificate_id, actor)
    return CertificateResponse.from_certificate(certificate)


@router.get("/{certificate_id}/download")
async def download_certificate(
    certificate_id: str,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db)
):
    """Download the issued certificate file"""
    path = await CertificateService(db).get_artifact(certificate_id, actor)
    return FileResponse(path, filename=path.name)
