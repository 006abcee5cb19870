# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# SPDX-License-Identifier: MIT
#

from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from annapurna.db import models
from annapurna.db.database import get_db
from annapurna.dependencies import get_current_session, get_current_user, get_token_data
from annapurna.schemas import schemas
from annapurna.services.dashboard_router import dashboard_for
from annapurna.services.proximity import origin_from_params

router = APIRouter(
    prefix="/dashboard",
    tags=["Dashboard"],
)


@router.get("", response_model=schemas.DashboardResponse)
def read_dashboard(
    role: Optional[str] = None,
    lat: Optional[float] = None,
    lng: Optional[float] = None,
    radius_km: Optional[float] = None,
    token_data: schemas.TokenData = Depends(get_token_data),
    current_user: models.User = Depends(get_current_user),
    auth_session: models.AuthSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    """
    Returns the dashboard for the caller's role. `role` overrides it for this request only.
    """
    origin = origin_from_params(lat, lng)
    return dashboard_for(
        db,
        current_user,
        auth_session,
        override=role,
        cached_role=token_data.role,
        cached_at=token_data.role_set_at,
        origin=origin,
        radius_km=radius_km if origin is not None else None,
    )
