# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# SPDX-License-Identifier: MIT
#

from datetime import datetime
from typing import Optional, Tuple

import structlog
from sqlalchemy.orm import Session

from annapurna.crud import crud_stats, crud_user
from annapurna.db import models
from annapurna.exceptions import PersistenceError
from annapurna.schemas import schemas
from annapurna.services.claim_service import ClaimService
from annapurna.services.donation_service import DonationService
from annapurna.services.impact_ledger import ImpactLedger
from annapurna.services.role_resolver import SELF_SERVICE_ROLES, RoleResolver

logger = structlog.get_logger(__name__)

ROLE_SELECTION_MESSAGE = "We could not determine your role. Choose how you want to use Annapurna."


def _impact(db: Session, user: models.User) -> schemas.Impact:
    return schemas.Impact.model_validate(ImpactLedger(db).get_or_create(user.id))


def _donations(items) -> list:
    return [schemas.Donation.model_validate(d) for d in items]


def _claims(items) -> list:
    return [schemas.Claim.model_validate(c) for c in items]


def donor_view(db: Session, user: models.User, origin=None, radius_km=None) -> schemas.DonorDashboard:
    donations = DonationService(db).list_for_donor(user.id, origin, radius_km)
    return schemas.DonorDashboard(donations=_donations(donations), impact=_impact(db, user))


def ngo_view(db: Session, user: models.User, origin=None, radius_km=None) -> schemas.NGODashboard:
    available = DonationService(db).list_available("ngo", origin, radius_km)
    return schemas.NGODashboard(
        available_donations=_donations(available),
        claims=_claims(ClaimService(db).list_for_user(user.id)),
        impact=_impact(db, user),
    )


def volunteer_view(db: Session, user: models.User, origin=None, radius_km=None) -> schemas.VolunteerDashboard:
    available = DonationService(db).list_available("volunteer", origin, radius_km)
    return schemas.VolunteerDashboard(
        available_pickups=_donations(available),
        claims=_claims(ClaimService(db).list_for_user(user.id)),
        impact=_impact(db, user),
    )


def admin_view(db: Session, user: models.User, origin=None, radius_km=None) -> schemas.AdminDashboard:
    return schemas.AdminDashboard(
        stats=schemas.PlatformStats(**crud_stats.get_platform_stats(db)),
        pending_users=[schemas.User.model_validate(u) for u in crud_user.get_unverified_users(db)],
    )


def role_selection() -> schemas.RoleSelection:
    return schemas.RoleSelection(available_roles=list(SELF_SERVICE_ROLES), message=ROLE_SELECTION_MESSAGE)


VIEWS = {
    "donor": donor_view,
    "ngo": ngo_view,
    "volunteer": volunteer_view,
    "admin": admin_view,
}


def build_dashboard(db: Session, user: models.User, role: Optional[str], origin=None, radius_km=None):
    """
    Dispatches once on the resolved role. Unknown or missing roles get the role selection view.
    """
    view = VIEWS.get(role)
    if view is None:
        return role_selection()
    return view(db, user, origin, radius_km)


def dashboard_for(
    db: Session,
    user: models.User,
    auth_session: Optional[models.AuthSession] = None,
    override: Optional[str] = None,
    cached_role: Optional[str] = None,
    cached_at: Optional[datetime] = None,
    origin: Optional[Tuple[float, float]] = None,
    radius_km: Optional[float] = None,
) -> schemas.DashboardResponse:
    role, source = None, None
    try:
        role, source = RoleResolver(db).effective_role(
            user, auth_session, override=override, cached_role=cached_role, cached_at=cached_at
        )
    except PersistenceError as e:
        logger.warning("Role could not be resolved, offering role selection", user_id=user.id, error=e.message)

    return schemas.DashboardResponse(
        role=role,
        role_source=source,
        dashboard=build_dashboard(db, user, role, origin, radius_km),
    )
