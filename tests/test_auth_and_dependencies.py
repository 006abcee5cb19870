'''
# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# Created Date: Thu Jul 17 2025
# SPDX-License-Identifier: MIT
'''

import pytest
from datetime import datetime, timedelta, timezone
from fastapi import HTTPException
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy.orm import Session

from annapurna.config import settings
from annapurna.crud import crud_session
from annapurna.dependencies import get_current_admin, get_current_session, get_current_user, get_token_data
from annapurna.exceptions import AuthorizationError
from annapurna.schemas import schemas
from annapurna.utils.security import (
    create_access_token,
    decode_access_token,
    get_password_hash,
    verify_password,
)
from tests.test_helpers import create_user


def test_password_hashing():
    hashed = get_password_hash("s3cret-pass")

    assert hashed != "s3cret-pass"
    assert verify_password("s3cret-pass", hashed)
    assert not verify_password("wrong-pass", hashed)


def test_access_token_carries_role_claims():
    role_set_at = datetime(2025, 7, 1, 12, 0, tzinfo=timezone.utc)

    token = create_access_token("user-1", "session-1", "ngo", role_set_at=role_set_at)
    token_data = decode_access_token(token)

    assert token_data.user_id == "user-1"
    assert token_data.session_id == "session-1"
    assert token_data.role == "ngo"
    assert token_data.role_set_at == role_set_at


def test_create_access_token_with_custom_expiry():
    token = create_access_token("user-1", "session-1", "donor", expires_delta=timedelta(minutes=5))

    payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    remaining = payload["exp"] - datetime.now(timezone.utc).timestamp()
    assert 0 < remaining <= 5 * 60


def test_expired_token_is_rejected():
    token = create_access_token("user-1", "session-1", "donor", expires_delta=timedelta(minutes=-1))

    assert decode_access_token(token) is None


def test_token_signed_with_other_key_is_rejected():
    token = jwt.encode({"sub": "user-1"}, "not-the-secret", algorithm=settings.algorithm)

    assert decode_access_token(token) is None


def test_token_without_subject_is_rejected():
    token = jwt.encode({"sid": "session-1"}, settings.secret_key, algorithm=settings.algorithm)

    assert decode_access_token(token) is None


def test_get_token_data_rejects_garbage():
    with pytest.raises(HTTPException) as exc_info:
        get_token_data("not-a-token")

    assert exc_info.value.status_code == 401
    assert exc_info.value.headers == {"WWW-Authenticate": "Bearer"}


def test_get_current_session_requires_session_id(db_session: Session):
    with pytest.raises(HTTPException):
        get_current_session(schemas.TokenData(user_id="user-1"), db_session)


def test_get_current_session_rejects_expired_session(db_session: Session, donor):
    auth_session = crud_session.create_session(db_session, donor, timedelta(minutes=-5))
    token_data = schemas.TokenData(user_id=donor.id, session_id=auth_session.sid)

    with pytest.raises(HTTPException) as exc_info:
        get_current_session(token_data, db_session)

    assert exc_info.value.status_code == 401


def test_get_current_session_rejects_other_users_session(db_session: Session, donor, ngo):
    auth_session = crud_session.create_session(db_session, ngo, timedelta(minutes=30))
    token_data = schemas.TokenData(user_id=donor.id, session_id=auth_session.sid)

    with pytest.raises(HTTPException):
        get_current_session(token_data, db_session)


def test_get_current_user_requires_existing_user(db_session: Session, donor):
    auth_session = crud_session.create_session(db_session, donor, timedelta(minutes=30))
    token_data = schemas.TokenData(user_id="missing-user", session_id=auth_session.sid)

    with pytest.raises(HTTPException):
        get_current_user(token_data, auth_session, db_session)


def test_get_current_admin(db_session: Session, donor, admin):
    assert get_current_admin(admin) is admin

    with pytest.raises(AuthorizationError):
        get_current_admin(donor)


def test_logged_out_token_is_rejected(client: TestClient, donor_headers):
    assert client.post("/api/auth/logout", headers=donor_headers).status_code == 200

    response = client.get("/api/auth/user", headers=donor_headers)

    assert response.status_code == 401
    assert response.json()["message"] == "Could not validate credentials"


def test_login_unknown_email(client: TestClient):
    response = client.post("/api/auth/login", data={"username": "nobody@example.com", "password": "whatever"})

    assert response.status_code == 401


def test_session_caches_role_at_login(db_session: Session):
    user = create_user(db_session, "sessions@example.com", "volunteer")

    auth_session = crud_session.create_session(db_session, user, timedelta(minutes=30))

    assert crud_session.get_session_role(auth_session) == "volunteer"
    crud_session.set_session_role(db_session, auth_session, "ngo")
    assert crud_session.get_session_role(crud_session.get_session(db_session, auth_session.sid)) == "ngo"
    assert crud_session.get_session_role(None) is None
