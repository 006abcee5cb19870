# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# SPDX-License-Identifier: MIT
#

from datetime import datetime, timedelta, timezone
from typing import Optional

from sqlalchemy.orm import Session

from annapurna.db import models


def create_session(db: Session, user: models.User, expires_delta: timedelta):
    db_session = models.AuthSession(
        user_id=user.id,
        sess={"role": user.role},
        expire=datetime.now(timezone.utc) + expires_delta,
    )
    db.add(db_session)
    db.commit()
    db.refresh(db_session)
    return db_session


def get_session(db: Session, sid: str):
    return db.query(models.AuthSession).filter(models.AuthSession.sid == sid).first()


def get_session_role(db_session: Optional[models.AuthSession]) -> Optional[str]:
    if db_session is None or not db_session.sess:
        return None
    return db_session.sess.get("role")


def set_session_role(db: Session, db_session: models.AuthSession, role: str, commit: bool = True):
    # JSON columns are not mutation-tracked; assign a new dict
    db_session.sess = {**(db_session.sess or {}), "role": role}
    if commit:
        db.commit()
        db.refresh(db_session)
    return db_session


def delete_session(db: Session, sid: str) -> bool:
    deleted = db.query(models.AuthSession).filter(models.AuthSession.sid == sid).delete()
    db.commit()
    return bool(deleted)
