"""
# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# Created Date: Tue Jul 08 2025
# SPDX-License-Identifier: MIT
"""

from datetime import timedelta

import structlog
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.concurrency import run_in_threadpool
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from annapurna.config import settings
from annapurna.crud import crud_session, crud_user
from annapurna.db import models
from annapurna.db.database import get_db
from annapurna.dependencies import get_current_session, get_current_user
from annapurna.exceptions import ValidationError
from annapurna.schemas import schemas
from annapurna.services.geocoding_service import GeocodingService, get_geocoding_service
from annapurna.services.role_resolver import RoleResolver
from annapurna.utils.security import create_access_token, verify_password

logger = structlog.get_logger(__name__)

router = APIRouter(
    prefix="/auth",
    tags=["Authentication"],
    responses={404: {"description": "Not found"}},
)


@router.post("/register", response_model=schemas.User, status_code=status.HTTP_201_CREATED)
def register_user(user: schemas.UserCreate, db: Session = Depends(get_db)):
    """
    Registers a new user. The role defaults to donor.
    """
    if crud_user.get_user_by_email(db, email=user.email):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email already registered")

    db_user = crud_user.create_user(db, user)
    if db_user is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email already registered")
    logger.info("User registered", user_id=db_user.id, role=db_user.role)
    return db_user


@router.post("/login", response_model=schemas.Token)
def login_for_access_token(form_data: OAuth2PasswordRequestForm = Depends(), db: Session = Depends(get_db)):
    """
    Authenticates a user, opens a session and returns an access token.
    """
    user = crud_user.get_user_by_email(db, email=form_data.username)
    if not user or not verify_password(form_data.password, user.password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    role = RoleResolver(db).resolve(user)
    expires_delta = timedelta(minutes=settings.access_token_expire_minutes)
    auth_session = crud_session.create_session(db, user, expires_delta)
    access_token = create_access_token(user.id, auth_session.sid, role, expires_delta=expires_delta)
    logger.info("User logged in", user_id=user.id, session_id=auth_session.sid)
    return {"access_token": access_token, "token_type": "bearer"}


@router.post("/logout")
def logout(auth_session: models.AuthSession = Depends(get_current_session), db: Session = Depends(get_db)):
    crud_session.delete_session(db, auth_session.sid)
    return {"message": "Logged out"}


@router.get("/user", response_model=schemas.User)
def read_current_user(
    current_user: models.User = Depends(get_current_user),
    auth_session: models.AuthSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    """
    Retrieves the current user's profile, repairing the cached role if it drifted.
    """
    RoleResolver(db).resolve(current_user, auth_session)
    return current_user


@router.patch("/user/role", response_model=schemas.RoleSwitchResponse)
def update_role(
    role_update: schemas.RoleUpdate,
    current_user: models.User = Depends(get_current_user),
    auth_session: models.AuthSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    """
    Switches the caller's role and returns a token carrying the new role.
    """
    user = RoleResolver(db).switch_role(current_user, role_update.role, auth_session)
    access_token = create_access_token(user.id, auth_session.sid, user.role)
    return schemas.RoleSwitchResponse(user=schemas.User.model_validate(user), access_token=access_token)


@router.patch("/user/location", response_model=schemas.User)
async def update_location(
    location: schemas.LocationUpdate,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
    geocoder: GeocodingService = Depends(get_geocoding_service),
):
    """
    Stores the caller's coordinates and, when the lookup succeeds, a display address.
    """
    if not (-90 <= location.latitude <= 90):
        raise ValidationError("Latitude must be between -90 and 90", field="latitude")
    if not (-180 <= location.longitude <= 180):
        raise ValidationError("Longitude must be between -180 and 180", field="longitude")

    address = await geocoder.reverse(location.latitude, location.longitude)
    return await run_in_threadpool(
        crud_user.update_user_location, db, current_user, location.latitude, location.longitude, address
    )
