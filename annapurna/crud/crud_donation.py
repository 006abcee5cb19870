# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# SPDX-License-Identifier: MIT
#

from typing import Iterable

from sqlalchemy.orm import Session

from annapurna.db import models


def get_donation(db: Session, donation_id: str):
    return db.query(models.Donation).filter(models.Donation.id == donation_id).first()


def get_donations_by_donor(db: Session, donor_id: str, skip: int = 0, limit: int = 100):
    return (
        db.query(models.Donation)
        .filter(models.Donation.donor_id == donor_id)
        .order_by(models.Donation.created_at.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )


def get_donations_by_status(db: Session, statuses: Iterable[str]):
    return (
        db.query(models.Donation)
        .filter(models.Donation.status.in_(list(statuses)))
        .order_by(models.Donation.created_at.desc())
        .all()
    )


def compare_and_set_status(db: Session, donation_id: str, expected: Iterable[str], new_status: str) -> bool:
    """
    Moves a donation to new_status only if its current status is one of `expected`.
    Does not commit; returns False when no row matched.
    """
    updated = (
        db.query(models.Donation)
        .filter(models.Donation.id == donation_id, models.Donation.status.in_(list(expected)))
        .update({"status": new_status, "updated_at": models.utcnow()}, synchronize_session=False)
    )
    return updated == 1


def delete_donation(db: Session, donation_id: str, expected: Iterable[str]) -> bool:
    """
    Deletes a donation only if its current status is one of `expected`.
    Does not commit; returns False when no row matched.
    """
    deleted = (
        db.query(models.Donation)
        .filter(models.Donation.id == donation_id, models.Donation.status.in_(list(expected)))
        .delete(synchronize_session="fetch")
    )
    return deleted == 1
