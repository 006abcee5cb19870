# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# SPDX-License-Identifier: MIT
#

from typing import List

from fastapi import APIRouter, BackgroundTasks, Depends, status
from sqlalchemy.orm import Session

from annapurna.crud import crud_claim
from annapurna.db.database import get_db
from annapurna.db.models import User
from annapurna.dependencies import get_current_role, get_current_user
from annapurna.exceptions import NotFoundError
from annapurna.schemas import schemas
from annapurna.services.claim_service import ClaimService
from annapurna.services.donation_service import DonationService

router = APIRouter(
    prefix="/claims",
    tags=["Claims"],
    responses={404: {"description": "Not found"}},
)


@router.post("", response_model=schemas.Claim, status_code=status.HTTP_201_CREATED)
def create_claim(
    claim: schemas.ClaimCreate,
    background_tasks: BackgroundTasks,
    current_user: User = Depends(get_current_user),
    role: str = Depends(get_current_role),
    db: Session = Depends(get_db),
):
    """
    Claims a donation for the authenticated NGO or volunteer.
    """
    return ClaimService(db).claim(claim.donation_id, current_user, claim.notes, background_tasks, role=role)


@router.patch("/{claim_id}/status", response_model=schemas.Claim)
def update_claim_status(
    claim_id: str,
    status_update: schemas.ClaimStatusUpdate,
    background_tasks: BackgroundTasks,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Advances the claimed donation to picked_up or delivered. Claimant only.
    """
    db_claim = crud_claim.get_claim(db, claim_id)
    if db_claim is None:
        raise NotFoundError("Claim", claim_id)
    return DonationService(db).advance_status(
        db_claim.donation_id, status_update.status, current_user.id, background_tasks
    )


@router.get("", response_model=List[schemas.Claim])
def read_claims(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return ClaimService(db).list_for_user(current_user.id)
