# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# SPDX-License-Identifier: MIT
#

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from annapurna.crud import crud_notification
from annapurna.db import models
from annapurna.db.database import get_db
from annapurna.dependencies import get_current_user
from annapurna.exceptions import AuthorizationError, NotFoundError
from annapurna.schemas import schemas

router = APIRouter(
    prefix="/notifications",
    tags=["Notifications"],
    responses={404: {"description": "Not found"}},
)


def _owned_notification(db: Session, notification_id: str, user: models.User) -> models.Notification:
    db_notification = crud_notification.get_notification(db, notification_id)
    if db_notification is None:
        raise NotFoundError("Notification", notification_id)
    if db_notification.user_id != user.id:
        raise AuthorizationError("Access denied")
    return db_notification


@router.get("", response_model=List[schemas.Notification])
def read_notifications(
    unread_only: bool = False,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return crud_notification.get_notifications_for_user(db, current_user.id, unread_only=unread_only)


@router.patch("/{notification_id}/read", response_model=schemas.Notification)
def mark_notification_read(
    notification_id: str, current_user: models.User = Depends(get_current_user), db: Session = Depends(get_db)
):
    return crud_notification.mark_read(db, _owned_notification(db, notification_id, current_user))


@router.post("/read-all")
def mark_all_notifications_read(current_user: models.User = Depends(get_current_user), db: Session = Depends(get_db)):
    updated = crud_notification.mark_all_read(db, current_user.id)
    return {"updated": updated}


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_notification(
    notification_id: str, current_user: models.User = Depends(get_current_user), db: Session = Depends(get_db)
):
    crud_notification.delete_notification(db, _owned_notification(db, notification_id, current_user))
