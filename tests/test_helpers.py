# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# SPDX-License-Identifier: MIT
#

from annapurna.db import models
from annapurna.schemas import schemas

DEFAULT_PASSWORD = "testpassword"


class MockBackgroundTasks:
    """Collects background tasks so tests decide when (and whether) they run."""

    def __init__(self):
        self.tasks = []

    def add_task(self, func, *args, **kwargs):
        self.tasks.append((func, args, kwargs))

    def run(self):
        for func, args, kwargs in self.tasks:
            func(*args, **kwargs)
        self.tasks = []


def create_user(db, email, role, **extra):
    """Inserts a user directly; the password hash is a placeholder."""
    db_user = models.User(email=email, password="not-a-real-hash", role=role, **extra)
    db.add(db_user)
    db.commit()
    if role is None and db_user.role is not None:
        # the column default fills in donor on insert
        db_user.role = None
        db.commit()
    db.refresh(db_user)
    return db_user


def donation_payload(**overrides):
    payload = {
        "food_type": "Rice",
        "quantity": 10,
        "expiry_hours": 4,
        "location": "X",
    }
    payload.update(overrides)
    return payload


def donation_create(**overrides):
    return schemas.DonationCreate(**donation_payload(**overrides))


def register_and_login(client, email, role, password=DEFAULT_PASSWORD, register=True, **extra):
    """Registers (optionally) and logs in through the API, returning the bearer token."""
    if register:
        body = {"email": email, "password": password, **extra}
        if role is not None:
            body["role"] = role
        response = client.post("/api/auth/register", json=body)
        assert response.status_code == 201, response.text

    response = client.post("/api/auth/login", data={"username": email, "password": password})
    assert response.status_code == 200, response.text
    return response.json()["access_token"]


def auth_headers(token):
    return {"Authorization": f"Bearer {token}"}
