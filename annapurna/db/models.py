# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# SPDX-License-Identifier: MIT
#

import uuid
from datetime import datetime, timedelta, timezone

from sqlalchemy import JSON, Boolean, Column, DateTime, Enum, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from annapurna.db.database import Base

USER_ROLES = ("donor", "ngo", "volunteer", "admin")
DONATION_STATUSES = ("submitted", "claimed", "picked_up", "delivered", "cancelled")
CLAIM_STATUSES = ("claimed", "picked_up", "delivered")
NOTIFICATION_TYPES = ("info", "success", "warning", "error")


def generate_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value):
    # SQLite hands back naive datetimes for timezone-aware columns
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=generate_id)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password = Column(String(255), nullable=False)
    first_name = Column(String(255), nullable=True)
    last_name = Column(String(255), nullable=True)
    role = Column(Enum(*USER_ROLES, name="user_role"), nullable=True, default="donor")
    verified = Column(Boolean, default=False, nullable=False)
    organization_name = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    address = Column(Text, nullable=True)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    profile_image_url = Column(String(500), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    donations = relationship("Donation", back_populates="donor", cascade="all, delete-orphan")
    impact = relationship("Impact", back_populates="user", uselist=False, cascade="all, delete-orphan")
    sessions = relationship("AuthSession", back_populates="user", cascade="all, delete-orphan")


class AuthSession(Base):
    """Login session; `sess` is the identity metadata blob and caches the user's role."""

    __tablename__ = "sessions"

    sid = Column(String(36), primary_key=True, default=generate_id)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    sess = Column(JSON, nullable=False, default=dict)
    expire = Column(DateTime(timezone=True), nullable=False, index=True)

    user = relationship("User", back_populates="sessions")


class Donation(Base):
    __tablename__ = "donations"

    id = Column(String(36), primary_key=True, default=generate_id)
    donor_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    food_type = Column(Text, nullable=False)
    quantity = Column(Integer, nullable=False)
    unit = Column(String(50), nullable=False, default="servings")
    expiry_hours = Column(Integer, nullable=False)
    location = Column(Text, nullable=False)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    image_url = Column(Text, nullable=True)
    description = Column(Text, nullable=True)
    dietary_info = Column(JSON, nullable=True)
    pickup_instructions = Column(Text, nullable=True)
    contact_phone = Column(String(50), nullable=True)
    status = Column(Enum(*DONATION_STATUSES, name="donation_status"), nullable=False, default="submitted", index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, index=True)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    donor = relationship("User", back_populates="donations")
    claim = relationship("Claim", back_populates="donation", uselist=False)

    @property
    def expires_at(self):
        if self.created_at is None or self.expiry_hours is None:
            return None
        return as_utc(self.created_at) + timedelta(hours=self.expiry_hours)


class Claim(Base):
    __tablename__ = "claims"

    id = Column(String(36), primary_key=True, default=generate_id)
    # unique: a donation carries at most one claim
    donation_id = Column(String(36), ForeignKey("donations.id"), nullable=False, unique=True)
    ngo_id = Column(String(36), ForeignKey("users.id"), nullable=True, index=True)
    volunteer_id = Column(String(36), ForeignKey("users.id"), nullable=True, index=True)
    status = Column(Enum(*CLAIM_STATUSES, name="claim_status"), nullable=False, default="claimed")
    claimed_at = Column(DateTime(timezone=True), default=utcnow)
    picked_up_at = Column(DateTime(timezone=True), nullable=True)
    delivered_at = Column(DateTime(timezone=True), nullable=True)
    notes = Column(Text, nullable=True)

    donation = relationship("Donation", back_populates="claim")
    ngo = relationship("User", foreign_keys=[ngo_id])
    volunteer = relationship("User", foreign_keys=[volunteer_id])

    @property
    def claimant_id(self):
        """The user currently responsible for moving the donation forward."""
        return self.volunteer_id or self.ngo_id


class Impact(Base):
    __tablename__ = "impact"

    id = Column(String(36), primary_key=True, default=generate_id)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, unique=True)
    meals_donated = Column(Integer, nullable=False, default=0)
    meals_distributed = Column(Integer, nullable=False, default=0)
    deliveries_completed = Column(Integer, nullable=False, default=0)
    points = Column(Integer, nullable=False, default=0)
    carbon_footprint_reduced = Column(Float, nullable=False, default=0.0)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    user = relationship("User", back_populates="impact")


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(String(36), primary_key=True, default=generate_id)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    type = Column(Enum(*NOTIFICATION_TYPES, name="notification_type"), nullable=False, default="info")
    read = Column(Boolean, nullable=False, default=False)
    related_entity_id = Column(String(36), nullable=True)
    related_entity_type = Column(String(50), nullable=True)
    action_url = Column(String(500), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, index=True)
