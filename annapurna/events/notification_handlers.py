"""
# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# Created Date: Tue Jul 15 2025
# SPDX-License-Identifier: MIT
"""

from typing import Optional

import structlog

from annapurna.crud import crud_claim, crud_donation, crud_user
from annapurna.db.database import session_scope
from annapurna.services.email_service import EmailService
from annapurna.services.notification_service import NotificationEmitter

logger = structlog.get_logger(__name__)


def _recipients(donation, claim, status: str, actor_id: Optional[str]):
    """
    Yields (user_id, audience) pairs for a status change.
    """
    yield donation.donor_id, "donor"
    if claim is None:
        return
    if status in ("picked_up", "delivered"):
        if claim.ngo_id and claim.ngo_id != actor_id:
            yield claim.ngo_id, "ngo"
    elif status == "cancelled":
        for claimant_id in {claim.ngo_id, claim.volunteer_id} - {None, actor_id}:
            yield claimant_id, "ngo"


def notify_status_change(donation_id: str, status: str, actor_id: Optional[str] = None):
    """
    Writes the notifications describing a donation status change.
    Runs as a background task after the status change has been committed.
    """
    try:
        with session_scope() as db:
            donation = crud_donation.get_donation(db, donation_id)
            if donation is None:
                logger.warning("Notification skipped, donation not found", donation_id=donation_id, status=status)
                return
            actor = crud_user.get_user(db, actor_id) if actor_id else None
            claim = crud_claim.get_claim_by_donation(db, donation_id)

            emitter = NotificationEmitter(db)
            email_service = EmailService() if EmailService.is_configured() else None
            for user_id, audience in _recipients(donation, claim, status, actor_id):
                notification = emitter.notify(user_id, status, donation, actor=actor, audience=audience)
                if notification is not None and email_service is not None:
                    recipient = crud_user.get_user(db, user_id)
                    if recipient is not None:
                        email_service.send_notification_email(recipient, notification)
    except Exception as e:
        logger.error("Status change notification failed", donation_id=donation_id, status=status, error=str(e))
