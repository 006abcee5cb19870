"""
# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# SPDX-License-Identifier: MIT
"""

from sqlalchemy import exists, or_
from sqlalchemy.orm import Session

from annapurna.db import models


def get_claim(db: Session, claim_id: str):
    return db.query(models.Claim).filter(models.Claim.id == claim_id).first()


def get_claim_by_donation(db: Session, donation_id: str):
    """
    Retrieves the claim attached to a donation, if any.
    """
    return db.query(models.Claim).filter(models.Claim.donation_id == donation_id).first()


def get_claims_by_user(db: Session, user_id: str):
    """
    Retrieves every claim where the user is the NGO or the volunteer, newest first.
    """
    return (
        db.query(models.Claim)
        .filter(or_(models.Claim.ngo_id == user_id, models.Claim.volunteer_id == user_id))
        .order_by(models.Claim.claimed_at.desc())
        .all()
    )


def attach_volunteer(db: Session, donation_id: str, volunteer_id: str) -> bool:
    """
    Attaches a volunteer to an NGO claim that has none yet, as long as the
    donation itself is still claimed. Does not commit.
    """
    donation_still_claimed = exists().where(
        models.Donation.id == donation_id,
        models.Donation.status == "claimed",
    )
    updated = (
        db.query(models.Claim)
        .filter(
            models.Claim.donation_id == donation_id,
            models.Claim.volunteer_id.is_(None),
            models.Claim.status == "claimed",
            donation_still_claimed,
        )
        .update({"volunteer_id": volunteer_id}, synchronize_session=False)
    )
    return updated == 1
