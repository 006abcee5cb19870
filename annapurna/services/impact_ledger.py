# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# SPDX-License-Identifier: MIT
#

from dataclasses import dataclass, fields

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from annapurna.db import models
from annapurna.exceptions import PersistenceError, ValidationError

logger = structlog.get_logger(__name__)


@dataclass
class ImpactDelta:
    meals_donated: int = 0
    meals_distributed: int = 0
    deliveries_completed: int = 0
    points: int = 0
    carbon_footprint_reduced: float = 0.0

    def items(self):
        return [(f.name, getattr(self, f.name)) for f in fields(self)]


class ImpactLedger:
    """
    Additive per-user counters. Rows are created lazily and never decremented.
    """

    def __init__(self, db: Session):
        self.db = db

    def get(self, user_id: str):
        return self.db.query(models.Impact).filter(models.Impact.user_id == user_id).first()

    def get_or_create(self, user_id: str, commit: bool = True) -> models.Impact:
        impact = self.get(user_id)
        if impact is not None:
            return impact
        impact = models.Impact(
            user_id=user_id,
            meals_donated=0,
            meals_distributed=0,
            deliveries_completed=0,
            points=0,
            carbon_footprint_reduced=0.0,
        )
        self.db.add(impact)
        if commit:
            try:
                self.db.commit()
            except SQLAlchemyError as e:
                self.db.rollback()
                logger.error("Impact row creation failed", user_id=user_id, error=str(e))
                raise PersistenceError("Failed to create impact record", operation="impact.create") from e
            self.db.refresh(impact)
        else:
            self.db.flush()
        return impact

    def increment(self, user_id: str, deltas: ImpactDelta, commit: bool = True) -> models.Impact:
        """
        Applies non-negative deltas as SQL-side increments. With commit=False the
        change joins the caller's transaction.
        """
        changes = {name: value for name, value in deltas.items() if value}
        negative = [name for name, value in changes.items() if value < 0]
        if negative:
            raise ValidationError(f"Impact deltas must be non-negative: {', '.join(negative)}", field=negative[0])

        impact = self.get_or_create(user_id, commit=False)
        if changes:
            values = {getattr(models.Impact, name): getattr(models.Impact, name) + value for name, value in changes.items()}
            values[models.Impact.updated_at] = models.utcnow()
            self.db.query(models.Impact).filter(models.Impact.id == impact.id).update(
                values, synchronize_session=False
            )
        if commit:
            try:
                self.db.commit()
            except SQLAlchemyError as e:
                self.db.rollback()
                logger.error("Impact update failed", user_id=user_id, error=str(e))
                raise PersistenceError("Failed to update impact", operation="impact.increment") from e
        self.db.refresh(impact)
        logger.debug("Impact incremented", user_id=user_id, **changes)
        return impact
