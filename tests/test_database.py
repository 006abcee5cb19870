# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# SPDX-License-Identifier: MIT
#

import pytest
from unittest.mock import MagicMock
from datetime import datetime, timedelta

from annapurna.config import Settings
from annapurna.db import database, models
from annapurna.db.database import get_db, session_scope


def test_get_db_closes_session(mocker):
    """
    Tests that the database session is properly closed by the get_db dependency,
    even if an exception occurs.
    """
    mock_db_session = MagicMock()

    mocker.patch('annapurna.db.database.SessionLocal', return_value=mock_db_session)

    db_generator = get_db()

    db = next(db_generator)

    assert db is mock_db_session

    with pytest.raises(ValueError):
        db_generator.throw(ValueError("Simulated error during dependency usage"))

    mock_db_session.close.assert_called_once()


def test_session_scope_rolls_back_on_error(mocker):
    mock_db_session = MagicMock()
    mocker.patch("annapurna.db.database.SessionLocal", return_value=mock_db_session)

    with pytest.raises(RuntimeError):
        with session_scope() as db:
            assert db is mock_db_session
            raise RuntimeError("background task failed")

    mock_db_session.rollback.assert_called_once()
    mock_db_session.close.assert_called_once()


def test_testing_mode_uses_in_memory_database():
    """Tests never touch the configured database."""
    assert database.SQLALCHEMY_DATABASE_URL == "sqlite:///:memory:"


def test_settings_defaults(monkeypatch):
    monkeypatch.setenv("SECRET_KEY", "s3cret")
    monkeypatch.delenv("ROLE_CACHE_FRESHNESS_MINUTES", raising=False)

    config = Settings(_env_file=None)

    assert config.role_cache_freshness_minutes == 10
    assert config.donation_points_per_meal == 2
    assert config.delivery_points == 10
    assert config.volunteers_can_join_ngo_claims is True
    assert config.geocoding_timeout_seconds == 10.0


def test_settings_read_environment(monkeypatch):
    monkeypatch.setenv("SECRET_KEY", "s3cret")
    monkeypatch.setenv("VOLUNTEERS_CAN_JOIN_NGO_CLAIMS", "false")
    monkeypatch.setenv("DELIVERY_POINTS", "25")

    config = Settings(_env_file=None)

    assert config.volunteers_can_join_ngo_claims is False
    assert config.delivery_points == 25


def test_as_utc_marks_naive_datetimes():
    naive = datetime(2025, 7, 1, 12, 0)

    assert models.as_utc(naive).utcoffset() == timedelta(0)
    assert models.as_utc(None) is None


def test_claimant_prefers_volunteer():
    assert models.Claim(ngo_id="n", volunteer_id=None).claimant_id == "n"
    assert models.Claim(ngo_id="n", volunteer_id="v").claimant_id == "v"
    assert models.Claim(ngo_id=None, volunteer_id=None).claimant_id is None


def test_donation_without_timestamp_has_no_expiry():
    assert models.Donation(expiry_hours=4).expires_at is None
