# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# SPDX-License-Identifier: MIT
#

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    database_url: str = "sqlite:///./annapurna.db"
    secret_key: str
    app_env: str = "development"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 30
    log_level: str = "INFO"
    log_json: bool = False

    # Roles cached on the client are trusted for this long before the profile is consulted.
    role_cache_freshness_minutes: int = 10
    volunteers_can_join_ngo_claims: bool = True

    donation_points_per_meal: int = 2
    delivery_points: int = 10

    geocoding_url: str = "https://nominatim.openstreetmap.org/reverse"
    geocoding_timeout_seconds: float = 10.0
    geocoding_cache_seconds: int = 300
    geocoding_cache_max_entries: int = 1024
    geocoding_user_agent: str = "annapurna-backend"

    sendgrid_api_key: str = ""
    mail_sender_email: str = "no-reply@example.com"
    mail_sender_name: str = "Annapurna Team"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


# Create an instance of Settings to be imported across the application
settings = Settings()
