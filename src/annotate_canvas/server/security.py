"""Password hashing, session tokens and the bearer-token dependency."""

import binascii
import hashlib
import logging
import os
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .config import Settings

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)

_PBKDF2_ROUNDS = 100000


def hash_password(password: str) -> str:
    """Hash a password for storing (64 hex chars of salt + pbkdf2 digest)."""
    salt = hashlib.sha256(os.urandom(60)).hexdigest().encode("ascii")
    pwdhash = hashlib.pbkdf2_hmac("sha512", password.encode("utf-8"), salt, _PBKDF2_ROUNDS)
    return (salt + binascii.hexlify(pwdhash)).decode("ascii")


def verify_password(stored_password: str, provided_password: str) -> bool:
    """Verify a stored password against one provided by user"""
    salt = stored_password[:64]
    stored_hash = stored_password[64:]
    pwdhash = hashlib.pbkdf2_hmac(
        "sha512", provided_password.encode("utf-8"), salt.encode("ascii"), _PBKDF2_ROUNDS
    )
    return binascii.hexlify(pwdhash).decode("ascii") == stored_hash


def create_token(user_id: str, settings: Settings) -> str:
    now = datetime.now(tz=timezone.utc)
    payload = {
        "sub": user_id,
        "iat": now,
        "exp": now + timedelta(hours=settings.jwt_expire_hours),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_token(token: str, settings: Settings) -> Optional[dict]:
    """Decoded payload, or None when the token is invalid or expired."""
    try:
        return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except jwt.PyJWTError as e:
        logger.info("Rejected token: %s", e)
        return None


def _unauthorized(msg: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=msg,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def require_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> str:
    """Dependency: id of the authenticated user, 401 otherwise."""
    if not credentials or not credentials.credentials:
        raise _unauthorized("No token, authorization denied")
    payload = decode_token(credentials.credentials, request.app.state.settings)
    if not payload or "sub" not in payload:
        raise _unauthorized("Token is not valid")
    user_id = payload["sub"]
    if request.app.state.users.get_by_id(user_id) is None:
        raise _unauthorized("Token is not valid")
    return user_id
