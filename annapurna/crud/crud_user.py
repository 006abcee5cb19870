# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# SPDX-License-Identifier: MIT
#

from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from annapurna.db import models
from annapurna.schemas import schemas
from annapurna.utils.security import get_password_hash


def get_user(db: Session, user_id: str):
    return db.query(models.User).filter(models.User.id == user_id).first()


def get_user_by_email(db: Session, email: str):
    return db.query(models.User).filter(models.User.email == email).first()


def get_users_by_role(db: Session, role: str, skip: int = 0, limit: int = 100):
    return (
        db.query(models.User)
        .filter(models.User.role == role)
        .order_by(models.User.created_at.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )


def get_unverified_users(db: Session, limit: int = 100):
    return (
        db.query(models.User)
        .filter(models.User.verified.is_(False))
        .order_by(models.User.created_at.desc())
        .limit(limit)
        .all()
    )


def create_user(db: Session, user: schemas.UserCreate, role: Optional[str] = None):
    db_user = models.User(
        email=user.email,
        password=get_password_hash(user.password),
        first_name=user.first_name,
        last_name=user.last_name,
        role=role or user.role or "donor",
        organization_name=user.organization_name,
        phone=user.phone,
        address=user.address,
        latitude=user.latitude,
        longitude=user.longitude,
        profile_image_url=user.profile_image_url,
        verified=False,
    )
    try:
        db.add(db_user)
        db.commit()
        db.refresh(db_user)
        return db_user
    except IntegrityError:
        db.rollback()
        return None  # Indicate that creation failed, likely due to duplicate email


def update_user_verification(db: Session, user_id: str, verified: bool):
    db_user = get_user(db, user_id)
    if db_user:
        db_user.verified = verified
        db.commit()
        db.refresh(db_user)
    return db_user


def update_user_location(db: Session, db_user: models.User, latitude: float, longitude: float, address: Optional[str]):
    db_user.latitude = latitude
    db_user.longitude = longitude
    if address:
        db_user.address = address
    db.commit()
    db.refresh(db_user)
    return db_user
