"""
# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# SPDX-License-Identifier: MIT
"""

from dataclasses import dataclass
from typing import Optional

import structlog
from sqlalchemy.orm import Session

from annapurna.db import models

logger = structlog.get_logger(__name__)


@dataclass
class NotificationMessage:
    title: str
    description: str
    type: str


def _amount(donation: models.Donation) -> str:
    return f"{donation.quantity} {donation.unit} of {donation.food_type}"


def donor_message(kind: str, donation: models.Donation, actor: Optional[models.User] = None) -> Optional[NotificationMessage]:
    """
    Builds the donor-facing message for a status change, or None for kinds donors are not told about.
    """
    amount = _amount(donation)
    if kind == "claimed":
        by = f" by {actor.organization_name}" if actor is not None and actor.organization_name else ""
        purpose = " for pickup" if actor is not None and actor.role == "volunteer" else ""
        return NotificationMessage(
            "Your donation has been claimed",
            f"Your donation of {amount} has been claimed{by}{purpose}",
            "info",
        )
    if kind == "picked_up":
        by = f" by {actor.first_name}" if actor is not None and actor.first_name else ""
        return NotificationMessage(
            "Your donation has been picked up",
            f"Your donation of {amount} has been picked up{by}",
            "info",
        )
    if kind == "delivered":
        return NotificationMessage(
            "Your donation has been delivered",
            f"Your donation of {amount} has been successfully delivered to those in need",
            "success",
        )
    if kind == "cancelled":
        return NotificationMessage(
            "Donation cancelled",
            f"Your donation of {amount} has been cancelled",
            "error",
        )
    return None


def ngo_message(kind: str, donation: models.Donation, actor: Optional[models.User] = None) -> Optional[NotificationMessage]:
    """
    Builds the message for the NGO holding the claim when a volunteer moves the donation.
    """
    amount = _amount(donation)
    who = actor.first_name if actor is not None and actor.first_name else "A volunteer"
    if kind == "picked_up":
        return NotificationMessage("Donation has been picked up", f"{who} has picked up {amount}", "info")
    if kind == "delivered":
        return NotificationMessage(
            "Donation has been delivered",
            f"{who} has successfully delivered the donation of {amount}",
            "success",
        )
    if kind == "cancelled":
        return NotificationMessage("Donation cancelled", f"The donation of {amount} you claimed has been cancelled", "warning")
    return None


class NotificationEmitter:
    """
    Best-effort notification writer. A failure here is logged and swallowed;
    it never reaches the status change that triggered it.
    """

    def __init__(self, db: Session):
        self.db = db

    def notify(
        self,
        target_user_id: str,
        kind: str,
        donation: models.Donation,
        actor: Optional[models.User] = None,
        audience: str = "donor",
    ) -> Optional[models.Notification]:
        try:
            build = ngo_message if audience == "ngo" else donor_message
            message = build(kind, donation, actor)
            if message is None:
                return None

            notification = models.Notification(
                user_id=target_user_id,
                title=message.title,
                description=message.description,
                type=message.type,
                read=False,
                related_entity_id=donation.id,
                related_entity_type="donation",
                action_url=f"/donation/{donation.id}",
            )
            self.db.add(notification)
            self.db.commit()
            self.db.refresh(notification)
            logger.info("Notification created", user_id=target_user_id, kind=kind, donation_id=donation.id)
            return notification
        except Exception as e:
            self.db.rollback()
            logger.error(
                "Notification failed",
                user_id=target_user_id,
                kind=kind,
                donation_id=getattr(donation, "id", None),
                error=str(e),
            )
            return None
