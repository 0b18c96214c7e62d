"""Column helpers shared by the registry tables"""
import uuid

from sqlalchemy import String

# Identifiers are opaque strings; a garbled id simply matches nothing
ID_TYPE = String(36)


def new_id() -> str:
    return str(uuid.uuid4())
