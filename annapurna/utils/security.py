"""
# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# Created Date: Wed Jul 09 2025
# SPDX-License-Identifier: MIT
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from annapurna.config import settings
from annapurna.schemas import schemas

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def get_password_hash(password: str) -> str:
    """
    Hashes a plain password.
    """
    return pwd_context.hash(password)


def verify_password(plain_password: str, password: str) -> bool:
    """
    Verifies a plain password against a hashed password.
    """
    return pwd_context.verify(plain_password, password)


def create_access_token(
    user_id: str,
    session_id: str,
    role: Optional[str],
    role_set_at: Optional[datetime] = None,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Creates a JWT access token. The role claim is the client's cached copy of the
    user's role, stamped with the moment it was written.
    """
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.access_token_expire_minutes))
    to_encode = {
        "sub": user_id,
        "sid": session_id,
        "role": role,
        "role_set_at": int((role_set_at or now).timestamp()),
        "exp": expire,
    }
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def decode_access_token(token: str) -> Optional[schemas.TokenData]:
    """
    Returns the token data, or None when the token is invalid or expired.
    """
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        return None
    user_id = payload.get("sub")
    if user_id is None:
        return None
    role_set_at = payload.get("role_set_at")
    return schemas.TokenData(
        user_id=user_id,
        session_id=payload.get("sid"),
        role=payload.get("role"),
        role_set_at=datetime.fromtimestamp(role_set_at, tz=timezone.utc) if role_set_at else None,
    )
