# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# SPDX-License-Identifier: MIT
#

import os
from contextlib import asynccontextmanager

import structlog
from fastapi import Depends, FastAPI, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from annapurna.api.endpoints import admin, auth, claims, dashboard, donations, impact, notifications
from annapurna.config import settings
from annapurna.db.database import get_db
from annapurna.error_handlers import register_error_handlers
from annapurna.logging_config import configure_logging

configure_logging(settings.log_level, settings.log_json)
logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Annapurna API starting up. Database migrations are managed by Alembic.", env=settings.app_env)
    yield
    logger.info("Annapurna API shutting down.")


app = FastAPI(
    title="Annapurna Backend API",
    description="API for coordinating surplus food donations between donors, NGOs and volunteers.",
    version="0.1.0",
    lifespan=lifespan,
)

# Configure CORS
allowed_origins = os.getenv("ALLOWED_ORIGINS", "http://localhost:3000").split(",")

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
    allow_headers=["*"],
)

register_error_handlers(app)

app.include_router(auth.router, prefix="/api")
app.include_router(donations.router, prefix="/api")
app.include_router(claims.router, prefix="/api")
app.include_router(impact.router, prefix="/api")
app.include_router(notifications.router, prefix="/api")
app.include_router(dashboard.router, prefix="/api")
app.include_router(admin.router, prefix="/api")


@app.get("/")
async def read_root():
    return {"message": "Welcome to Annapurna Backend API!"}


@app.get("/health")
def health_check(db: Session = Depends(get_db)):
    try:
        db.execute(text("SELECT 1"))
        return {"status": "ok", "database_connection": "successful"}
    except SQLAlchemyError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Database connection failed: {e}",
        )
