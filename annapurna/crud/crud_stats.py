# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# SPDX-License-Identifier: MIT
#

from sqlalchemy import func
from sqlalchemy.orm import Session

from annapurna.db import models


def get_platform_stats(db: Session) -> dict:
    """
    Aggregate counters for the admin dashboard.
    Meals count only donations that reached the delivered state.
    """
    total_users = db.query(func.count(models.User.id)).scalar() or 0
    total_donations = db.query(func.count(models.Donation.id)).scalar() or 0
    total_meals = (
        db.query(func.coalesce(func.sum(models.Donation.quantity), 0))
        .filter(models.Donation.status == "delivered")
        .scalar()
    )
    pending_verifications = (
        db.query(func.count(models.User.id)).filter(models.User.verified.is_(False)).scalar() or 0
    )
    active_donations = (
        db.query(func.count(models.Donation.id)).filter(models.Donation.status == "submitted").scalar() or 0
    )
    total_impact_points = db.query(func.coalesce(func.sum(models.Impact.points), 0)).scalar()

    return {
        "total_users": total_users,
        "total_donations": total_donations,
        "total_meals": int(total_meals or 0),
        "pending_verifications": pending_verifications,
        "active_donations": active_donations,
        "total_impact_points": int(total_impact_points or 0),
    }
