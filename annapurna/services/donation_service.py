# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# SPDX-License-Identifier: MIT
#

import math
from datetime import datetime
from typing import List, Optional, Tuple

import structlog
from fastapi import BackgroundTasks
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from annapurna.config import settings
from annapurna.crud import crud_claim, crud_donation
from annapurna.db import models
from annapurna.events import notification_handlers
from annapurna.exceptions import (
    AuthorizationError,
    InvalidTransitionError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from annapurna.schemas import schemas
from annapurna.services.impact_ledger import ImpactDelta, ImpactLedger
from annapurna.services.proximity import filter_by_proximity, parse_coordinates

logger = structlog.get_logger(__name__)

# new status -> the only status it may be reached from
PREVIOUS_STATUS = {"picked_up": "claimed", "delivered": "picked_up"}
CANCELLABLE_STATUSES = ("submitted", "claimed")


def hours_remaining(donation: models.Donation, now: Optional[datetime] = None) -> int:
    """
    Whole hours left before the donation expires, never negative.
    """
    expires_at = donation.expires_at
    if expires_at is None:
        return 0
    now = now or models.utcnow()
    return max(0, math.floor((expires_at - now).total_seconds() / 3600))


def validate_donation(donation: schemas.DonationCreate) -> Tuple[Optional[float], Optional[float]]:
    """
    Checks the required fields and returns the coordinates to store.
    """
    if not donation.food_type or not donation.food_type.strip():
        raise ValidationError("Food type is required", field="food_type")
    if donation.quantity is None or donation.quantity < 1:
        raise ValidationError("Quantity must be at least 1", field="quantity")
    if donation.expiry_hours is None or donation.expiry_hours < 1:
        raise ValidationError("Expiry hours must be at least 1", field="expiry_hours")
    if not donation.location or not donation.location.strip():
        raise ValidationError("Location is required", field="location")

    latitude, longitude = donation.latitude, donation.longitude
    if latitude is None and longitude is None:
        parsed = parse_coordinates(donation.location)
        if parsed:
            latitude, longitude = parsed
    elif latitude is None or longitude is None:
        raise ValidationError("Latitude and longitude must be given together", field="latitude")
    if latitude is not None and not (-90 <= latitude <= 90 and -180 <= longitude <= 180):
        raise ValidationError("Coordinates are out of range", field="latitude")
    return latitude, longitude


class DonationService:
    def __init__(self, db: Session):
        self.db = db
        self.ledger = ImpactLedger(db)

    def get(self, donation_id: str) -> models.Donation:
        donation = crud_donation.get_donation(self.db, donation_id)
        if donation is None:
            raise NotFoundError("Donation", donation_id)
        return donation

    def create_donation(self, donor: models.User, donation: schemas.DonationCreate) -> models.Donation:
        """
        Persists a submitted donation and credits the donor's impact in the same transaction.
        """
        latitude, longitude = validate_donation(donation)
        db_donation = models.Donation(
            donor_id=donor.id,
            food_type=donation.food_type.strip(),
            quantity=donation.quantity,
            unit=donation.unit or "servings",
            expiry_hours=donation.expiry_hours,
            location=donation.location.strip(),
            latitude=latitude,
            longitude=longitude,
            image_url=donation.image_url,
            description=donation.description,
            dietary_info=donation.dietary_info,
            pickup_instructions=donation.pickup_instructions,
            contact_phone=donation.contact_phone,
            status="submitted",
        )
        try:
            self.db.add(db_donation)
            self.db.flush()
            self.ledger.increment(
                donor.id,
                ImpactDelta(
                    meals_donated=donation.quantity,
                    points=donation.quantity * settings.donation_points_per_meal,
                ),
                commit=False,
            )
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Donation creation failed", donor_id=donor.id, error=str(e))
            raise PersistenceError("Failed to create donation", operation="donation.create") from e

        self.db.refresh(db_donation)
        logger.info("Donation created", donation_id=db_donation.id, donor_id=donor.id, quantity=db_donation.quantity)
        return db_donation

    def list_for_donor(self, donor_id: str, origin=None, radius_km: Optional[float] = None) -> List[models.Donation]:
        donations = crud_donation.get_donations_by_donor(self.db, donor_id)
        if origin is not None and radius_km is not None:
            donations = filter_by_proximity(donations, origin, radius_km)
        return donations

    def list_available(self, for_role: Optional[str], origin=None, radius_km: Optional[float] = None) -> List[models.Donation]:
        """
        Donations open to the given role: volunteers also see claimed donations awaiting pickup.
        """
        statuses = ("submitted", "claimed") if for_role == "volunteer" else ("submitted",)
        donations = crud_donation.get_donations_by_status(self.db, statuses)
        if origin is not None and radius_km is not None:
            donations = filter_by_proximity(donations, origin, radius_km)
        return donations

    def advance_status(
        self,
        donation_id: str,
        new_status: str,
        acting_user_id: str,
        background_tasks: Optional[BackgroundTasks] = None,
    ) -> models.Claim:
        """
        Moves a claimed donation forward (claimed -> picked_up -> delivered).
        Only the user holding the claim may do this.
        """
        donation = self.get(donation_id)
        claim = crud_claim.get_claim_by_donation(self.db, donation_id)
        if claim is None or claim.claimant_id != acting_user_id:
            raise AuthorizationError("Only the claimant can update this donation")

        expected = PREVIOUS_STATUS.get(new_status)
        if expected is None:
            raise InvalidTransitionError(donation.status, new_status)

        quantity = donation.quantity
        try:
            if not crud_donation.compare_and_set_status(self.db, donation_id, [expected], new_status):
                self.db.rollback()
                raise InvalidTransitionError(self.get(donation_id).status, new_status)

            now = models.utcnow()
            claim.status = new_status
            if new_status == "picked_up":
                claim.picked_up_at = now
            else:
                claim.delivered_at = now
                self.ledger.increment(
                    acting_user_id,
                    ImpactDelta(deliveries_completed=1, points=settings.delivery_points),
                    commit=False,
                )
                if claim.ngo_id:
                    self.ledger.increment(claim.ngo_id, ImpactDelta(meals_distributed=quantity), commit=False)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Status update failed", donation_id=donation_id, status=new_status, error=str(e))
            raise PersistenceError("Failed to update donation status", operation="donation.advance") from e

        self.db.refresh(claim)
        logger.info("Donation status advanced", donation_id=donation_id, status=new_status, user_id=acting_user_id)
        if background_tasks is not None:
            background_tasks.add_task(notification_handlers.notify_status_change, donation_id, new_status, acting_user_id)
        return claim

    def cancel_donation(
        self, donation_id: str, acting_user_id: str, background_tasks: Optional[BackgroundTasks] = None
    ) -> models.Donation:
        donation = self.get(donation_id)
        if donation.donor_id != acting_user_id:
            raise AuthorizationError("Only the donor can cancel this donation")
        try:
            if not crud_donation.compare_and_set_status(self.db, donation_id, CANCELLABLE_STATUSES, "cancelled"):
                self.db.rollback()
                raise InvalidTransitionError(self.get(donation_id).status, "cancelled")
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise PersistenceError("Failed to cancel donation", operation="donation.cancel") from e

        self.db.refresh(donation)
        logger.info("Donation cancelled", donation_id=donation_id)
        if background_tasks is not None:
            background_tasks.add_task(notification_handlers.notify_status_change, donation_id, "cancelled", acting_user_id)
        return donation

    def delete_donation(self, donation_id: str, acting_user_id: str) -> bool:
        donation = self.get(donation_id)
        if donation.donor_id != acting_user_id:
            raise AuthorizationError("Only the donor can delete this donation")
        try:
            if not crud_donation.delete_donation(self.db, donation_id, ["submitted"]):
                self.db.rollback()
                raise InvalidTransitionError(self.get(donation_id).status, "deleted")
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise PersistenceError("Failed to delete donation", operation="donation.delete") from e

        logger.info("Donation deleted", donation_id=donation_id)
        return True
