from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional
import hmac

from jose import JWTError, ExpiredSignatureError, jwt
import bcrypt

from campus_events.core.config import settings
from campus_events.core.exceptions import (
    TokenExpiredError,
    TokenMalformedError,
    TokenSignatureError,
)


@dataclass(frozen=True)
class TokenIdentity:
    """The only claims a session token carries"""
    principal_id: str
    role: str


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password against a bcrypt hash"""
    # Bcrypt has a 72 byte limit - truncate password if necessary
    password_bytes = plain_password.encode('utf-8')[:72]
    try:
        return bcrypt.checkpw(password_bytes, hashed_password.encode('utf-8'))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def get_password_hash(password: str) -> str:
    """Hash password with configurable rounds (BCRYPT_ROUNDS in .env)"""
    password_bytes = password.encode('utf-8')[:72]
    hashed = bcrypt.hashpw(password_bytes, bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS))
    return hashed.decode('utf-8')


def secrets_equal(given: str, stored: str) -> bool:
    """Constant-time string equality"""
    return hmac.compare_digest(given.encode('utf-8'), stored.encode('utf-8'))


def create_access_token(principal_id: str, role: str, expires_delta: Optional[timedelta] = None) -> str:
    """Create a signed, expiring JWT carrying {sub, role} only"""
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    now = datetime.utcnow()
    to_encode = {
        "sub": str(principal_id),
        "role": role,
        "type": "access",
        "iat": now,
        "exp": now + expires_delta,
    }
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> TokenIdentity:
    """
    Verify and decode an access token.

    Raises TokenMalformedError when the token cannot be parsed or lacks the
    identity claims, TokenExpiredError past `exp`, and TokenSignatureError
    when the signature does not verify.
    """
    try:
        jwt.get_unverified_claims(token)
    except JWTError:
        raise TokenMalformedError()

    try:
        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except ExpiredSignatureError:
        raise TokenExpiredError()
    except JWTError:
        raise TokenSignatureError()

    principal_id = payload.get("sub")
    role = payload.get("role")
    if payload.get("type") != "access" or not principal_id or not role:
        raise TokenMalformedError()

    return TokenIdentity(principal_id=principal_id, role=role)
