"""
# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# Created Date: Wed Jul 09 2025
# SPDX-License-Identifier: MIT
"""

from datetime import datetime, timedelta
from typing import Optional, Tuple

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from annapurna.config import settings
from annapurna.crud import crud_session
from annapurna.db import models
from annapurna.exceptions import AuthorizationError, PersistenceError, ValidationError

logger = structlog.get_logger(__name__)

VALID_ROLES = ("donor", "ngo", "volunteer", "admin")
SELF_SERVICE_ROLES = ("donor", "ngo", "volunteer")
DEFAULT_ROLE = "donor"


def _valid(role: Optional[str]) -> Optional[str]:
    return role if role in VALID_ROLES else None


class RoleResolver:
    """
    Produces one role per user. The profile row (users.role) is authoritative;
    the session metadata and the role claim in the access token are caches of it.
    """

    def __init__(self, db: Session):
        self.db = db

    def resolve(self, user: models.User, auth_session: Optional[models.AuthSession] = None) -> str:
        """
        Reconciles the profile role with the session copy and returns it.
        Profile wins on disagreement; a session-only role is copied into the
        profile; with neither the default role is written to both.
        """
        profile_role = _valid(user.role)
        session_role = _valid(crud_session.get_session_role(auth_session))
        role = profile_role or session_role or DEFAULT_ROLE

        try:
            if profile_role is None:
                user.role = role
                logger.info(
                    "Profile role filled in",
                    user_id=user.id,
                    role=role,
                    source="session" if session_role else "default",
                )
            if auth_session is not None and session_role != role:
                crud_session.set_session_role(self.db, auth_session, role, commit=False)
                logger.info("Session role repaired", user_id=user.id, stale_role=session_role, role=role)
            if self.db.dirty:
                self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Role reconciliation failed", user_id=user.id, error=str(e))
            raise PersistenceError("Failed to store role", operation="role.resolve") from e
        return role

    def switch_role(
        self, user: models.User, new_role: str, auth_session: Optional[models.AuthSession] = None
    ) -> models.User:
        """
        Writes the profile role, then the session cache to match.
        """
        if new_role not in VALID_ROLES:
            raise ValidationError(f"Invalid role: {new_role}", field="role")
        try:
            user.role = new_role
            self.db.commit()
            if auth_session is not None:
                crud_session.set_session_role(self.db, auth_session, new_role)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Role switch failed", user_id=user.id, role=new_role, error=str(e))
            raise PersistenceError("Failed to switch role", operation="role.switch") from e
        self.db.refresh(user)
        logger.info("Role switched", user_id=user.id, role=new_role)
        return user

    def effective_role(
        self,
        user: models.User,
        auth_session: Optional[models.AuthSession] = None,
        override: Optional[str] = None,
        cached_role: Optional[str] = None,
        cached_at: Optional[datetime] = None,
        now: Optional[datetime] = None,
    ) -> Tuple[str, str]:
        """
        Returns (role, source) using, in order: an explicit override, a fresh
        client-cached role, the profile, the session copy, the default.
        """
        if override is not None:
            if override not in VALID_ROLES:
                raise ValidationError(f"Invalid role: {override}", field="role")
            if override == "admin" and user.role != "admin":
                raise AuthorizationError("Admin access required")
            return override, "override"

        now = now or models.utcnow()
        if _valid(cached_role) and cached_at is not None:
            fresh = now - models.as_utc(cached_at) <= timedelta(minutes=settings.role_cache_freshness_minutes)
            # a cached admin claim is only trusted while the profile agrees
            if fresh and (cached_role != "admin" or user.role == "admin"):
                return cached_role, "cached"

        if _valid(user.role):
            source = "profile"
        elif _valid(crud_session.get_session_role(auth_session)):
            source = "session"
        else:
            source = "default"
        return self.resolve(user, auth_session), source
