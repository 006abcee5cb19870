# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# SPDX-License-Identifier: MIT
#

import os
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

# Safety check to prevent tests from running against production database
if os.getenv("TESTING") != "1":
    os.environ["TESTING"] = "1"
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-annapurna")

# Create test database engine and session
TEST_DATABASE_URL = "sqlite:///:memory:"
test_engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
    echo=False
)
TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)

from annapurna.db.database import Base, get_db
from annapurna.db import models
from annapurna.app import app
from tests.test_helpers import auth_headers, create_user, register_and_login


@pytest.fixture(autouse=True)
def background_sessions(mocker):
    """
    Background tasks open their own session through SessionLocal; point it at the test engine.
    """
    mocker.patch("annapurna.db.database.SessionLocal", TestSessionLocal)


@pytest.fixture(name="db_session", scope="function")
def db_session_fixture():
    """
    Creates a new database session for each test, with all tables created.
    """
    Base.metadata.create_all(bind=test_engine)

    db = TestSessionLocal()

    try:
        yield db
    finally:
        db.close()
        # Drop all tables after the test to ensure a clean slate
        Base.metadata.drop_all(bind=test_engine)


@pytest.fixture(name="client")
def client_fixture(db_session: Session):
    """
    Provides a FastAPI TestClient that overrides the get_db dependency
    to use the test database session.
    """
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def donor(db_session: Session) -> models.User:
    return create_user(db_session, "donor@example.com", "donor", first_name="Dana")


@pytest.fixture
def ngo(db_session: Session) -> models.User:
    return create_user(db_session, "ngo@example.com", "ngo", organization_name="Food Bank")


@pytest.fixture
def volunteer(db_session: Session) -> models.User:
    return create_user(db_session, "volunteer@example.com", "volunteer", first_name="Vik")


@pytest.fixture
def admin(db_session: Session) -> models.User:
    return create_user(db_session, "admin@example.com", "admin", first_name="Ada")


# Helper fixtures registering users through the API and returning auth headers
@pytest.fixture(name="donor_headers")
def donor_headers_fixture(client: TestClient):
    return auth_headers(register_and_login(client, "api_donor@example.com", "donor", first_name="Dana"))


@pytest.fixture(name="ngo_headers")
def ngo_headers_fixture(client: TestClient):
    return auth_headers(
        register_and_login(client, "api_ngo@example.com", "ngo", organization_name="City Food Bank")
    )


@pytest.fixture(name="volunteer_headers")
def volunteer_headers_fixture(client: TestClient):
    return auth_headers(register_and_login(client, "api_volunteer@example.com", "volunteer", first_name="Vik"))


@pytest.fixture(name="admin_headers")
def admin_headers_fixture(client: TestClient, db_session: Session):
    # admin is not a self-service role; promote the account directly
    email = "api_admin@example.com"
    register_and_login(client, email, "donor")
    db_user = db_session.query(models.User).filter(models.User.email == email).first()
    db_user.role = "admin"
    db_session.commit()
    return auth_headers(register_and_login(client, email, None, register=False))
