"""
Centralised settings loader.

Values come from the process environment first, then from a `.env` file in
the working directory.
"""

from __future__ import annotations
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# ------------------------------------------------------------------ #
#  Master settings model
# ------------------------------------------------------------------ #
class _Settings(BaseSettings):
    # ─── runtime ────────────────────────────────────────────────────
    env_name: str = Field("development", validation_alias="ENV_NAME")
    host: str = Field("0.0.0.0", validation_alias="HOST")
    port: int = Field(5000, ge=1, le=65535, validation_alias="PORT")
    log_level: str = Field("INFO", validation_alias="LOG_LEVEL")

    # ─── database ───────────────────────────────────────────────────
    database_url: str = Field(
        "sqlite+aiosqlite:///./recipe_book.db", validation_alias="DATABASE_URL"
    )

    # ─── auth ───────────────────────────────────────────────────────
    jwt_secret: str = Field(
        "dev-secret-key-change-in-production", min_length=16, validation_alias="JWT_SECRET"
    )
    jwt_ttl_minutes: int = Field(60 * 24 * 30, ge=1, validation_alias="JWT_TTL_MINUTES")
    bcrypt_rounds: int = Field(12, ge=4, le=31, validation_alias="BCRYPT_ROUNDS")

    # ─── http ───────────────────────────────────────────────────────
    cors_origins: str = Field("*", validation_alias="CORS_ORIGINS")
    static_dir: str = Field("public", validation_alias="STATIC_DIR")
    default_page_size: int = Field(12, ge=1, validation_alias="DEFAULT_PAGE_SIZE")
    max_page_size: int = Field(100, ge=1, validation_alias="MAX_PAGE_SIZE")

    # allow other teammates’ env-vars without crashing
    model_config = SettingsConfigDict(
        extra="ignore", env_file=".env", env_file_encoding="utf-8"
    )

    @property
    def is_production(self) -> bool:
        return self.env_name.lower() == "production"

    @property
    def cors_origins_list(self) -> list[str]:
        """Split the comma-separated CORS_ORIGINS value."""
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


# ------------------------------------------------------------------ #
#  Cached singleton accessor
# ------------------------------------------------------------------ #
@lru_cache
def _cached() -> _Settings:  # pragma: no cover
    return _Settings()  # type: ignore[call-arg]


settings: _Settings = _cached()
