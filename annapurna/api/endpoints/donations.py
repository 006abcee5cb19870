# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# SPDX-License-Identifier: MIT
#

from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, status
from sqlalchemy.orm import Session

from annapurna.db.database import get_db
from annapurna.db.models import User
from annapurna.dependencies import get_current_role, get_current_user
from annapurna.exceptions import AuthorizationError, ValidationError
from annapurna.schemas import schemas
from annapurna.services.donation_service import DonationService
from annapurna.services.proximity import origin_from_params

router = APIRouter(
    prefix="/donations",
    tags=["Donations"],
    responses={404: {"description": "Not found"}},
)


def _search_origin(user: User, lat: Optional[float], lng: Optional[float], radius_km: Optional[float]):
    """
    Explicit lat/lng win; otherwise the caller's stored location is used for radius searches.
    """
    origin = origin_from_params(lat, lng)
    if origin is None and radius_km is not None:
        if user.latitude is None or user.longitude is None:
            raise ValidationError("A location is required for a proximity search", field="lat")
        origin = (user.latitude, user.longitude)
    return origin


@router.post("", response_model=schemas.Donation, status_code=status.HTTP_201_CREATED)
def create_donation(
    donation: schemas.DonationCreate,
    current_user: User = Depends(get_current_user),
    role: str = Depends(get_current_role),
    db: Session = Depends(get_db),
):
    """
    Creates a donation for the authenticated donor.
    """
    if role != "donor":
        raise AuthorizationError("Only donors can create donations")
    return DonationService(db).create_donation(current_user, donation)


@router.get("", response_model=List[schemas.Donation])
def read_donations(
    lat: Optional[float] = None,
    lng: Optional[float] = None,
    radius_km: Optional[float] = None,
    current_user: User = Depends(get_current_user),
    role: str = Depends(get_current_role),
    db: Session = Depends(get_db),
):
    """
    Donors see their own donations, everyone else the donations open to their role.
    """
    origin = _search_origin(current_user, lat, lng, radius_km)
    service = DonationService(db)
    if role == "donor":
        return service.list_for_donor(current_user.id, origin, radius_km)
    return service.list_available(role, origin, radius_km)


@router.get("/{donation_id}", response_model=schemas.Donation)
def read_donation(donation_id: str, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return DonationService(db).get(donation_id)


@router.patch("/{donation_id}/cancel", response_model=schemas.Donation)
def cancel_donation(
    donation_id: str,
    background_tasks: BackgroundTasks,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Cancels a submitted or claimed donation. Donor only.
    """
    return DonationService(db).cancel_donation(donation_id, current_user.id, background_tasks)


@router.delete("/{donation_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_donation(donation_id: str, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """
    Deletes a donation nobody has claimed yet. Donor only.
    """
    DonationService(db).delete_donation(donation_id, current_user.id)
