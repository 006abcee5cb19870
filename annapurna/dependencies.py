"""
# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# Created Date: Tue Jul 08 2025
# SPDX-License-Identifier: MIT
"""

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from annapurna.crud import crud_session, crud_user
from annapurna.db.database import get_db
from annapurna.db.models import AuthSession, User, as_utc, utcnow
from annapurna.exceptions import AuthorizationError
from annapurna.schemas import schemas
from annapurna.services.role_resolver import RoleResolver
from annapurna.utils.security import decode_access_token

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="api/auth/login")


def _credentials_exception() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_token_data(token: str = Depends(oauth2_scheme)) -> schemas.TokenData:
    """
    FastAPI dependency decoding the bearer token.
    """
    token_data = decode_access_token(token)
    if token_data is None:
        raise _credentials_exception()
    return token_data


def get_current_session(
    token_data: schemas.TokenData = Depends(get_token_data), db: Session = Depends(get_db)
) -> AuthSession:
    """
    FastAPI dependency returning the live login session behind the token.
    Logged-out or expired sessions are rejected.
    """
    if not token_data.session_id:
        raise _credentials_exception()
    auth_session = crud_session.get_session(db, token_data.session_id)
    if auth_session is None or auth_session.user_id != token_data.user_id:
        raise _credentials_exception()
    if as_utc(auth_session.expire) <= utcnow():
        raise _credentials_exception()
    return auth_session


def get_current_user(
    token_data: schemas.TokenData = Depends(get_token_data),
    auth_session: AuthSession = Depends(get_current_session),
    db: Session = Depends(get_db),
) -> User:
    """
    FastAPI dependency to get the current authenticated user.
    """
    user = crud_user.get_user(db, user_id=token_data.user_id)
    if user is None:
        raise _credentials_exception()
    return user


def get_current_admin(current_user: User = Depends(get_current_user)) -> User:
    """
    FastAPI dependency to get the current authenticated admin.
    """
    if current_user.role != "admin":
        raise AuthorizationError("Admin access required")
    return current_user


def get_current_role(
    current_user: User = Depends(get_current_user),
    auth_session: AuthSession = Depends(get_current_session),
    db: Session = Depends(get_db),
) -> str:
    """
    FastAPI dependency returning the caller's reconciled role.
    """
    return RoleResolver(db).resolve(current_user, auth_session)
