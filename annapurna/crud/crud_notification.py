# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# SPDX-License-Identifier: MIT
#

from sqlalchemy.orm import Session

from annapurna.db import models


def get_notification(db: Session, notification_id: str):
    return db.query(models.Notification).filter(models.Notification.id == notification_id).first()


def get_notifications_for_user(db: Session, user_id: str, unread_only: bool = False, limit: int = 100):
    query = db.query(models.Notification).filter(models.Notification.user_id == user_id)
    if unread_only:
        query = query.filter(models.Notification.read.is_(False))
    return query.order_by(models.Notification.created_at.desc()).limit(limit).all()


def mark_read(db: Session, db_notification: models.Notification):
    db_notification.read = True
    db.commit()
    db.refresh(db_notification)
    return db_notification


def mark_all_read(db: Session, user_id: str) -> int:
    updated = (
        db.query(models.Notification)
        .filter(models.Notification.user_id == user_id, models.Notification.read.is_(False))
        .update({"read": True}, synchronize_session=False)
    )
    db.commit()
    return updated


def delete_notification(db: Session, db_notification: models.Notification) -> bool:
    db.delete(db_notification)
    db.commit()
    return True
