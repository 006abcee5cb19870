"""
# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# Created Date: Tue Jul 08 2025
# SPDX-License-Identifier: MIT
"""

import httpx
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from annapurna.app import app
from annapurna.crud import crud_user
from annapurna.db import models
from annapurna.services.geocoding_service import GeocodingService, get_geocoding_service
from annapurna.utils.security import decode_access_token
from tests.test_helpers import auth_headers, register_and_login


def test_register_defaults_to_donor(client: TestClient):
    response = client.post("/api/auth/register", json={"email": "new@example.com", "password": "secret"})

    assert response.status_code == 201
    body = response.json()
    assert body["role"] == "donor"
    assert body["verified"] is False
    assert "password" not in body


def test_register_duplicate_email(client: TestClient):
    client.post("/api/auth/register", json={"email": "dup@example.com", "password": "secret"})

    response = client.post("/api/auth/register", json={"email": "dup@example.com", "password": "secret"})

    assert response.status_code == 400
    assert response.json()["message"] == "Email already registered"


def test_register_cannot_self_assign_admin(client: TestClient):
    response = client.post(
        "/api/auth/register", json={"email": "sneaky@example.com", "password": "secret", "role": "admin"}
    )

    assert response.status_code == 422


def test_login_wrong_password(client: TestClient):
    client.post("/api/auth/register", json={"email": "user@example.com", "password": "secret"})

    response = client.post("/api/auth/login", data={"username": "user@example.com", "password": "wrong"})

    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"


def test_login_token_carries_session_and_role(client: TestClient):
    token = register_and_login(client, "claims@example.com", "ngo")

    token_data = decode_access_token(token)
    assert token_data.role == "ngo"
    assert token_data.session_id is not None
    assert token_data.role_set_at is not None


def test_protected_route_requires_token(client: TestClient):
    assert client.get("/api/auth/user").status_code == 401
    assert client.get("/api/auth/user", headers=auth_headers("not-a-token")).status_code == 401


def test_read_current_user(client: TestClient, volunteer_headers):
    response = client.get("/api/auth/user", headers=volunteer_headers)

    assert response.status_code == 200
    assert response.json()["email"] == "api_volunteer@example.com"
    assert response.json()["role"] == "volunteer"


def test_read_current_user_repairs_session_role(client: TestClient, db_session: Session, ngo_headers):
    auth_session = db_session.query(models.AuthSession).one()
    auth_session.sess = {"role": "donor"}
    db_session.commit()

    response = client.get("/api/auth/user", headers=ngo_headers)

    assert response.json()["role"] == "ngo"
    db_session.refresh(auth_session)
    assert auth_session.sess["role"] == "ngo"


def test_switch_role_returns_fresh_token(client: TestClient, db_session: Session, donor_headers):
    response = client.patch("/api/auth/user/role", json={"role": "volunteer"}, headers=donor_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["user"]["role"] == "volunteer"
    assert decode_access_token(body["access_token"]).role == "volunteer"

    new_headers = auth_headers(body["access_token"])
    assert client.get("/api/auth/user", headers=new_headers).json()["role"] == "volunteer"
    assert db_session.query(models.AuthSession).one().sess["role"] == "volunteer"


def test_switch_role_rejects_admin(client: TestClient, donor_headers):
    response = client.patch("/api/auth/user/role", json={"role": "admin"}, headers=donor_headers)

    assert response.status_code == 422


def test_logout_ends_session(client: TestClient, donor_headers):
    assert client.post("/api/auth/logout", headers=donor_headers).status_code == 200

    assert client.get("/api/auth/user", headers=donor_headers).status_code == 401


def test_update_location_stores_geocoded_address(client: TestClient, donor_headers):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"display_name": "MG Road, Bengaluru"})

    app.dependency_overrides[get_geocoding_service] = lambda: GeocodingService(transport=httpx.MockTransport(handler))

    response = client.patch(
        "/api/auth/user/location", json={"latitude": 12.97, "longitude": 77.59}, headers=donor_headers
    )

    assert response.status_code == 200
    body = response.json()
    assert body["latitude"] == 12.97
    assert body["longitude"] == 77.59
    assert body["address"] == "MG Road, Bengaluru"


def test_update_location_writes_off_the_event_loop(client: TestClient, donor_headers, mocker):
    app.dependency_overrides[get_geocoding_service] = lambda: GeocodingService(
        transport=httpx.MockTransport(lambda request: httpx.Response(200, json={"display_name": "Park Street"}))
    )
    offloaded = []

    async def recording_threadpool(func, *args, **kwargs):
        offloaded.append(func)
        return func(*args, **kwargs)

    mocker.patch("annapurna.api.endpoints.auth.run_in_threadpool", new=recording_threadpool)

    response = client.patch(
        "/api/auth/user/location", json={"latitude": 22.55, "longitude": 88.35}, headers=donor_headers
    )

    assert response.status_code == 200
    assert offloaded == [crud_user.update_user_location]


def test_update_location_ignores_geocoding_failure(client: TestClient, donor_headers):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503)

    app.dependency_overrides[get_geocoding_service] = lambda: GeocodingService(transport=httpx.MockTransport(handler))

    response = client.patch(
        "/api/auth/user/location", json={"latitude": 12.97, "longitude": 77.59}, headers=donor_headers
    )

    assert response.status_code == 200
    assert response.json()["address"] is None


def test_update_location_validates_range(client: TestClient, donor_headers):
    response = client.patch(
        "/api/auth/user/location", json={"latitude": 120, "longitude": 77.59}, headers=donor_headers
    )

    assert response.status_code == 400
    assert response.json()["details"] == {"field": "latitude"}
