# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# SPDX-License-Identifier: MIT
#

from typing import List

import structlog
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from annapurna.crud import crud_stats, crud_user
from annapurna.db.database import get_db
from annapurna.db.models import User
from annapurna.dependencies import get_current_admin
from annapurna.exceptions import NotFoundError, ValidationError
from annapurna.schemas import schemas
from annapurna.services.role_resolver import VALID_ROLES

logger = structlog.get_logger(__name__)

router = APIRouter(
    prefix="/admin",
    tags=["Admin"],
    responses={404: {"description": "Not found"}},
)


@router.get("/users", response_model=List[schemas.User])
def read_users(
    role: str = "ngo",
    skip: int = 0,
    limit: int = 100,
    current_admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    """
    Lists users with the given role. (Admin access required)
    """
    if role not in VALID_ROLES:
        raise ValidationError(f"Invalid role: {role}", field="role")
    return crud_user.get_users_by_role(db, role, skip=skip, limit=limit)


@router.patch("/users/{user_id}/verify", response_model=schemas.User)
def verify_user(
    user_id: str,
    verification: schemas.VerificationUpdate,
    current_admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    """
    Sets a user's verified flag. (Admin access required)
    """
    db_user = crud_user.update_user_verification(db, user_id, verification.verified)
    if db_user is None:
        raise NotFoundError("User", user_id)
    logger.info("User verification updated", user_id=user_id, verified=verification.verified, admin_id=current_admin.id)
    return db_user


@router.get("/stats", response_model=schemas.PlatformStats)
def read_stats(current_admin: User = Depends(get_current_admin), db: Session = Depends(get_db)):
    return crud_stats.get_platform_stats(db)
