"""
axioma_access.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for all layers.
- Hide secrets from repr/logging (e.g., JWT secret).
- Offer a cached settings instance for dependency injection.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Env-driven configuration (prefix `AXIOMA_`).
    Defaults are safe for local dev; prod must override the JWT secret.
    """

    model_config = SettingsConfigDict(env_prefix="AXIOMA_", case_sensitive=False)

    # Environment controls toggle behavior like auto-init DB tables.
    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "axioma-access"
    log_level: str = "INFO"

    api_host: str = "0.0.0.0"
    api_port: int = 8080

    # Session tokens
    jwt_alg: str = "HS256"
    jwt_issuer: str = "axioma-auth"
    jwt_audience: str = "axioma-app"
    jwt_secret: str = Field(default="dev-secret-change-me", repr=False)

    # Persistence (profile store)
    database_url: str = "sqlite+aiosqlite:///./axioma.db"

    # Redirect targets handed back to the page/routing layer on denial.
    login_path: str = "/auth"
    dashboard_path: str = "/dashboard"
    upgrade_path: str = "/upgrade"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars for each request dependency.
    return Settings()


# --- Module Notes -----------------------------------------------------------
# Redirect paths live here (not in the engine) so the front end can move its
# login/upgrade screens without touching the decision table.
