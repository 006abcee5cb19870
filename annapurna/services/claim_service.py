# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# SPDX-License-Identifier: MIT
#

from typing import List, Optional

import structlog
from fastapi import BackgroundTasks
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from annapurna.config import settings
from annapurna.crud import crud_claim, crud_donation
from annapurna.db import models
from annapurna.events import notification_handlers
from annapurna.exceptions import AlreadyClaimedError, AuthorizationError, NotFoundError, PersistenceError

logger = structlog.get_logger(__name__)

CLAIMANT_ROLES = ("ngo", "volunteer")


class ClaimService:
    """
    Hands out claims on submitted donations. The status flip
    submitted -> claimed is a conditional update, so of two concurrent
    claimants exactly one wins and the other gets AlreadyClaimedError.
    """

    def __init__(self, db: Session):
        self.db = db

    def claim(
        self,
        donation_id: str,
        claimant: models.User,
        notes: Optional[str] = None,
        background_tasks: Optional[BackgroundTasks] = None,
        role: Optional[str] = None,
    ) -> models.Claim:
        """
        `role` is the caller's reconciled role; the profile role is used when it is not given.
        """
        role = role or claimant.role
        if role not in CLAIMANT_ROLES:
            raise AuthorizationError("Only NGOs and volunteers can claim donations")
        donation = crud_donation.get_donation(self.db, donation_id)
        if donation is None:
            raise NotFoundError("Donation", donation_id)

        try:
            if crud_donation.compare_and_set_status(self.db, donation_id, ["submitted"], "claimed"):
                db_claim = models.Claim(
                    donation_id=donation_id,
                    ngo_id=claimant.id if role == "ngo" else None,
                    volunteer_id=claimant.id if role == "volunteer" else None,
                    status="claimed",
                    notes=notes,
                )
                self.db.add(db_claim)
                self.db.commit()
            elif self._can_join(role) and crud_claim.attach_volunteer(self.db, donation_id, claimant.id):
                self.db.commit()
            else:
                self.db.rollback()
                logger.info("Claim lost", donation_id=donation_id, user_id=claimant.id)
                raise AlreadyClaimedError(donation_id)
        except IntegrityError as e:
            self.db.rollback()
            logger.info("Claim lost on unique constraint", donation_id=donation_id, user_id=claimant.id)
            raise AlreadyClaimedError(donation_id) from e
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Claim failed", donation_id=donation_id, user_id=claimant.id, error=str(e))
            raise PersistenceError("Failed to claim donation", operation="claim.create") from e

        db_claim = crud_claim.get_claim_by_donation(self.db, donation_id)
        logger.info("Donation claimed", donation_id=donation_id, claim_id=db_claim.id, user_id=claimant.id, role=role)
        if background_tasks is not None:
            background_tasks.add_task(notification_handlers.notify_status_change, donation_id, "claimed", claimant.id)
        return db_claim

    def list_for_user(self, user_id: str) -> List[models.Claim]:
        return crud_claim.get_claims_by_user(self.db, user_id)

    @staticmethod
    def _can_join(role: str) -> bool:
        return role == "volunteer" and settings.volunteers_can_join_ngo_claims
