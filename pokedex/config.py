"""
Application settings.

All values can be overridden through ``POKEDEX_``-prefixed environment
variables or a local ``.env`` file.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

SEVEN_DAYS = 7 * 24 * 60 * 60


class Settings(BaseSettings):
    """Central configuration for the service."""

    model_config = SettingsConfigDict(
        env_prefix="POKEDEX_",
        extra="ignore",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    # Catalogue source
    pokeapi_base_url: str = Field(default="https://pokeapi.co/api/v2", min_length=8)
    http_timeout_seconds: float = Field(default=10.0, gt=0)
    index_batch_size: int = Field(
        default=1500,
        ge=1,
        le=5000,
        description="Number of index records requested in the single upstream list call.",
    )
    user_agent: str = Field(default="pokedex/1.0 (+https://pokeapi.co)", min_length=1)

    # Optional cache for the full index. 0 disables it.
    cache_ttl_seconds: int = Field(default=0, ge=0)
    cache_max_entries: int = Field(default=16, ge=1)

    # Session gate
    jwt_secret: str = Field(default="pokemon-app-secret-key-change-in-production", min_length=1)
    jwt_algorithm: str = "HS256"
    session_ttl_seconds: int = Field(default=SEVEN_DAYS, gt=0)
    auth_username: str = "admin"
    auth_password: str = "admin"
    auth_cookie_name: str = "pokemon_auth_token"

    log_level: str = "INFO"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
