# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# SPDX-License-Identifier: MIT
#

import pytest
from fastapi import FastAPI, HTTPException
from fastapi.testclient import TestClient
from pydantic import BaseModel
from sqlalchemy.exc import OperationalError

from annapurna.error_handlers import register_error_handlers
from annapurna.exceptions import (
    AlreadyClaimedError,
    AuthenticationError,
    AuthorizationError,
    InvalidTransitionError,
    NotFoundError,
    PersistenceError,
    ValidationError,
    create_error_response,
)


class Payload(BaseModel):
    quantity: int


def _build_app() -> FastAPI:
    error_app = FastAPI()
    register_error_handlers(error_app)

    @error_app.get("/domain/{kind}")
    def raise_domain_error(kind: str):
        errors = {
            "validation": ValidationError("Quantity must be at least 1", field="quantity"),
            "authentication": AuthenticationError(),
            "authorization": AuthorizationError("Access denied"),
            "not_found": NotFoundError("Donation", "d-1"),
            "claimed": AlreadyClaimedError("d-1"),
            "transition": InvalidTransitionError("delivered", "picked_up"),
            "persistence": PersistenceError(),
        }
        raise errors[kind]

    @error_app.get("/http")
    def raise_http_exception():
        raise HTTPException(status_code=418, detail="I'm a teapot", headers={"X-Reason": "tea"})

    @error_app.get("/database")
    def raise_database_error():
        raise OperationalError("SELECT 1", {}, Exception("database is locked"))

    @error_app.get("/boom")
    def raise_unexpected():
        raise RuntimeError("boom")

    @error_app.post("/payload")
    def accept_payload(payload: Payload):
        return payload

    return error_app


@pytest.fixture(name="error_client")
def error_client_fixture():
    return TestClient(_build_app(), raise_server_exceptions=False)


@pytest.mark.parametrize(
    "kind,status_code,error_type",
    [
        ("validation", 400, "ValidationError"),
        ("authentication", 401, "AuthenticationError"),
        ("authorization", 403, "AuthorizationError"),
        ("not_found", 404, "NotFoundError"),
        ("claimed", 409, "AlreadyClaimedError"),
        ("transition", 409, "InvalidTransitionError"),
        ("persistence", 500, "PersistenceError"),
    ],
)
def test_domain_errors_map_to_status_codes(error_client: TestClient, kind, status_code, error_type):
    response = error_client.get(f"/domain/{kind}")

    assert response.status_code == status_code
    assert response.json()["error_type"] == error_type
    assert response.json()["message"]


def test_domain_error_details(error_client: TestClient):
    body = error_client.get("/domain/transition").json()

    assert body == {
        "message": "Cannot move donation from delivered to picked_up",
        "error_type": "InvalidTransitionError",
        "details": {"current_status": "delivered", "requested_status": "picked_up"},
    }


def test_http_exception_keeps_headers(error_client: TestClient):
    response = error_client.get("/http")

    assert response.status_code == 418
    assert response.json() == {"message": "I'm a teapot", "error_type": "HTTPException"}
    assert response.headers["x-reason"] == "tea"


def test_request_validation_error(error_client: TestClient):
    response = error_client.post("/payload", json={"quantity": "many"})

    assert response.status_code == 422
    body = response.json()
    assert body["error_type"] == "ValidationError"
    assert body["details"]["validation_errors"][0]["field"] == "body -> quantity"


def test_database_error_is_generic(error_client: TestClient):
    response = error_client.get("/database")

    assert response.status_code == 500
    assert response.json() == {"message": "Database operation failed", "error_type": "PersistenceError"}


def test_unexpected_error(error_client: TestClient):
    response = error_client.get("/boom")

    assert response.status_code == 500
    assert response.json() == {"message": "Internal server error", "error_type": "InternalError"}


def test_create_error_response_omits_empty_details():
    assert create_error_response(AuthorizationError("Access denied")) == {
        "message": "Access denied",
        "error_type": "AuthorizationError",
    }
