"""
Certificate Service - bulk issuance from a roster CSV plus an artifact ZIP

Roster columns (header match is case-insensitive):
    id, name, email, event, type            required
    department, registrationNumber          optional

Every roster row needs a file in the bundle whose stem equals the row's
student id (e.g. 21CS001.pdf). Validation covers the whole upload before
anything is written, so an issuance either fully succeeds or leaves no
trace.
"""

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path, PurePosixPath
from typing import Dict, List, Optional
import io
import uuid
import zipfile

import aiofiles
import pandas as pd
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from campus_events.core.config import settings
from campus_events.core.exceptions import (
    CertificateNotFoundError,
    ForbiddenError,
    ValidationError,
)
from campus_events.core.logging_config import logger
from campus_events.models.certificate import Certificate, CertificateType
from campus_events.models.principal import Student
from campus_events.modules.auth.identity import Actor
from campus_events.modules.auth.permissions import Action, Scope, require_permission

REQUIRED_COLUMNS = ("id", "name", "email", "event", "type")
REQUIRED_CELLS = ("id", "name", "event", "type")
OPTIONAL_COLUMNS = {"department": "department", "registrationnumber": "registration_number"}


@dataclass
class RosterRow:
    line: int
    student_id: str
    name: str
    email: Optional[str]
    event: str
    type: CertificateType
    department: Optional[str] = None
    registration_number: Optional[str] = None


@dataclass
class Artifact:
    filename: str
    content: bytes

    @property
    def suffix(self) -> str:
        return PurePosixPath(self.filename).suffix.lower()


def generate_certificate_id() -> str:
    """CERT-YYYYMMDD-XXXXXXXX"""
    timestamp = datetime.utcnow().strftime("%Y%m%d")
    unique_part = uuid.uuid4().hex[:8].upper()
    return f"CERT-{timestamp}-{unique_part}"


def parse_roster(content: bytes) -> List[RosterRow]:
    """Parse and validate the roster CSV. Raises ValidationError on any problem."""
    if not content or not content.strip():
        raise ValidationError("Roster is empty", field="roster")

    try:
        df = pd.read_csv(
            io.BytesIO(content),
            dtype=str,
            keep_default_na=False,
            encoding="utf-8",
            skipinitialspace=True,
        )
    except UnicodeDecodeError:
        raise ValidationError("Roster must be UTF-8 encoded CSV", field="roster")
    except (pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        raise ValidationError(f"Failed to parse roster: {e}", field="roster")

    columns = {str(col).strip().lower(): col for col in df.columns}
    missing = [col for col in REQUIRED_COLUMNS if col not in columns]
    if missing:
        raise ValidationError(
            f"Roster is missing required columns: {', '.join(missing)}", field="roster"
        )
    if df.empty:
        raise ValidationError("Roster has no rows", field="roster")

    rows: List[RosterRow] = []
    for index, record in enumerate(df.to_dict(orient="records")):
        line = index + 2  # header is line 1
        values = {key: str(record[col]).strip() for key, col in columns.items()}

        blank = [col for col in REQUIRED_CELLS if not values.get(col)]
        if blank:
            raise ValidationError(
                f"Roster line {line}: missing value for {', '.join(blank)}", field="roster"
            )

        try:
            cert_type = CertificateType(values["type"].lower())
        except ValueError:
            raise ValidationError(
                f"Roster line {line}: type must be participation or achievement", field="roster"
            )

        row = RosterRow(
            line=line,
            student_id=values["id"],
            name=values["name"],
            email=values["email"] or None,
            event=values["event"],
            type=cert_type,
        )
        for key, attr in OPTIONAL_COLUMNS.items():
            if values.get(key):
                setattr(row, attr, values[key])
        rows.append(row)

    return rows


def read_bundle(content: bytes) -> Dict[str, Artifact]:
    """Map file stem -> artifact for every regular file in the ZIP"""
    if not content:
        raise ValidationError("Certificate bundle is empty", field="bundle")

    artifacts: Dict[str, Artifact] = {}
    try:
        with zipfile.ZipFile(io.BytesIO(content), "r") as zf:
            entries = []
            for info in zf.infolist():
                if info.is_dir():
                    continue
                path = PurePosixPath(info.filename)
                # Skip macOS metadata and hidden files
                if "__MACOSX" in path.parts or path.name.startswith("."):
                    continue
                entries.append((info, path))

            # Uncompressed sizes come from the central directory; check before inflating
            total_size = sum(info.file_size for info, _ in entries)
            if total_size > settings.MAX_UPLOAD_SIZE:
                raise ValidationError(
                    f"Certificate bundle expands beyond {settings.MAX_UPLOAD_SIZE // (1024 * 1024)}MB",
                    field="bundle",
                )

            for info, path in entries:
                if path.stem in artifacts:
                    raise ValidationError(
                        f"Bundle contains more than one artifact for {path.stem}", field="bundle"
                    )
                artifacts[path.stem] = Artifact(filename=path.name, content=zf.read(info))
    except zipfile.BadZipFile:
        raise ValidationError("Certificate bundle is not a valid ZIP file", field="bundle")

    return artifacts


class CertificateService:
    """Issue and read certificates"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def issue(self, roster: bytes, bundle: bytes, actor: Actor) -> List[Certificate]:
        require_permission(actor.role, Action.CERTIFICATE_ISSUE, "Not authorized to issue certificates")

        rows = parse_roster(roster)
        artifacts = read_bundle(bundle)

        missing = sorted({row.student_id for row in rows if row.student_id not in artifacts})
        if missing:
            raise ValidationError(
                f"Bundle has no artifact for: {', '.join(missing)}", field="bundle"
            )

        students = await self._students_by_roll_number({row.student_id for row in rows})
        issue_date = datetime.utcnow().date().isoformat()
        certificates_dir = settings.CERTIFICATES_DIR

        certificates: List[Certificate] = []
        written: List[Path] = []
        try:
            for row in rows:
                student = students.get(row.student_id)
                artifact = artifacts[row.student_id]
                certificate_id = generate_certificate_id()

                target = certificates_dir / f"{certificate_id}{artifact.suffix}"
                async with aiofiles.open(target, "wb") as f:
                    await f.write(artifact.content)
                written.append(target)

                certificates.append(Certificate(
                    id=certificate_id,
                    title=row.type.title,
                    event_name=row.event,
                    issue_date=issue_date,
                    type=row.type,
                    student_identifier=row.student_id,
                    student_name=row.name,
                    student_email=row.email or (student.email if student else None),
                    department=row.department or (student.department if student else None),
                    registration_number=row.registration_number or (
                        student.registration_number if student else None
                    ),
                    artifact_path=str(target),
                    issued_by_id=actor.principal_id,
                ))

            self.db.add_all(certificates)
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            for path in written:
                path.unlink(missing_ok=True)
            logger.log_error_with_context(e, context="certificate_issue", rows=len(rows))
            raise

        logger.log_transition(
            "certificate_batch", certificates[0].id, "issued", actor.principal_id,
            count=len(certificates),
        )
        return certificates

    async def list_visible(self, actor: Actor, event: Optional[str] = None) -> List[Certificate]:
        """Students see certificates issued to their roll number, staff see all"""
        scope = require_permission(actor.role, Action.CERTIFICATE_READ)

        query = select(Certificate).order_by(Certificate.created_at.desc())
        if scope == Scope.OWN:
            query = query.where(Certificate.student_identifier == actor.roll_number)
        if event:
            query = query.where(Certificate.event_name == event)

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_visible(self, certificate_id: str, actor: Actor) -> Certificate:
        scope = require_permission(actor.role, Action.CERTIFICATE_READ)

        result = await self.db.execute(select(Certificate).where(Certificate.id == certificate_id))
        certificate = result.scalar_one_or_none()
        if not certificate:
            raise CertificateNotFoundError(certificate_id)
        if scope == Scope.OWN and certificate.student_identifier != actor.roll_number:
            raise ForbiddenError("Not authorized to view this certificate")
        return certificate

    async def get_artifact(self, certificate_id: str, actor: Actor) -> Path:
        certificate = await self.get_visible(certificate_id, actor)
        if not certificate.artifact_path or not Path(certificate.artifact_path).is_file():
            raise CertificateNotFoundError(certificate_id)
        return Path(certificate.artifact_path)

    async def _students_by_roll_number(self, roll_numbers) -> Dict[str, Student]:
        result = await self.db.execute(select(Student).where(Student.roll_number.in_(roll_numbers)))
        return {student.roll_number: student for student in result.scalars().all()}
