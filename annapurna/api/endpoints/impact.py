# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# SPDX-License-Identifier: MIT
#

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from annapurna.db.database import get_db
from annapurna.db.models import User
from annapurna.dependencies import get_current_user
from annapurna.schemas import schemas
from annapurna.services.impact_ledger import ImpactLedger

router = APIRouter(
    prefix="/impact",
    tags=["Impact"],
)


@router.get("", response_model=schemas.Impact)
def read_impact(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """
    Retrieves the caller's impact counters, all zero until the first contribution.
    """
    return ImpactLedger(db).get_or_create(current_user.id)
