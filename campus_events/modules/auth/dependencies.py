from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from campus_events.core.database import get_db
from campus_events.core.exceptions import MissingTokenError
from campus_events.core.logging_config import bind_principal
from campus_events.core.security import decode_token
from campus_events.modules.auth.identity import Actor, load_actor

# auto_error=False: a missing header must become our 401, not FastAPI's default
security = HTTPBearer(auto_error=False)


async def get_current_actor(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db)
) -> Actor:
    """Get current authenticated principal"""
    if credentials is None or not credentials.credentials:
        raise MissingTokenError()

    identity = decode_token(credentials.credentials)
    actor = await load_actor(db, identity)
    bind_principal(actor.principal_id)
    return actor


async def get_optional_actor(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db)
) -> Optional[Actor]:
    """Anonymous when no token is sent; a presented token must still be valid"""
    if credentials is None or not credentials.credentials:
        return None
    return await get_current_actor(credentials, db)

