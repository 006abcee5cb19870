# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# SPDX-License-Identifier: MIT
#

import pytest
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from annapurna.db import models
from annapurna.exceptions import PersistenceError, ValidationError
from annapurna.services.impact_ledger import ImpactDelta, ImpactLedger


def test_get_or_create_starts_at_zero(db_session: Session, donor):
    impact = ImpactLedger(db_session).get_or_create(donor.id)

    assert impact.meals_donated == 0
    assert impact.meals_distributed == 0
    assert impact.deliveries_completed == 0
    assert impact.points == 0
    assert impact.carbon_footprint_reduced == 0.0


def test_get_or_create_is_idempotent(db_session: Session, donor):
    ledger = ImpactLedger(db_session)

    first = ledger.get_or_create(donor.id)
    second = ledger.get_or_create(donor.id)

    assert first.id == second.id
    assert db_session.query(models.Impact).count() == 1


def test_increment_accumulates(db_session: Session, volunteer):
    ledger = ImpactLedger(db_session)

    ledger.increment(volunteer.id, ImpactDelta(deliveries_completed=1, points=10))
    impact = ledger.increment(volunteer.id, ImpactDelta(deliveries_completed=1, points=10))

    assert impact.deliveries_completed == 2
    assert impact.points == 20
    assert impact.meals_donated == 0


def test_increment_rejects_negative_deltas(db_session: Session, donor):
    ledger = ImpactLedger(db_session)
    ledger.increment(donor.id, ImpactDelta(points=5))

    with pytest.raises(ValidationError) as exc_info:
        ledger.increment(donor.id, ImpactDelta(points=-5))

    assert exc_info.value.details["field"] == "points"
    assert ledger.get(donor.id).points == 5


def test_uncommitted_increment_rolls_back_with_caller(db_session: Session, donor):
    ledger = ImpactLedger(db_session)
    ledger.get_or_create(donor.id)

    ledger.increment(donor.id, ImpactDelta(meals_donated=3), commit=False)
    db_session.rollback()

    assert ledger.get(donor.id).meals_donated == 0


def test_increment_commit_failure_raises_persistence_error(db_session: Session, donor, mocker):
    ledger = ImpactLedger(db_session)
    ledger.get_or_create(donor.id)
    mocker.patch.object(db_session, "commit", side_effect=SQLAlchemyError("locked"))

    with pytest.raises(PersistenceError):
        ledger.increment(donor.id, ImpactDelta(points=1))
