"""Application settings loaded from environment variables.

Configuration file discovery (in priority order):
1. OS environment variables (always highest priority)
2. BANKSTER_ENV_FILE environment variable (absolute path to .env file)
3. config/.env.dev - local development
4. config/.env - production/Docker

Uses pydantic-settings for automatic type coercion and validation.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Annotated, Any

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


def _find_project_root() -> Path:
    """Find the project root directory."""
    current = Path(__file__).resolve().parent

    for parent in [current, *current.parents]:
        if (parent / "config").is_dir():
            return parent
        if (parent / ".git").is_dir():
            return parent
        if parent == Path("/app"):
            return parent

    return Path(__file__).resolve().parents[4]


def get_config_dir() -> Path:
    """Get the config directory path."""
    return _find_project_root() / "config"


def _resolve_env_file_path() -> Path | None:
    """Resolve the .env file path.

    Priority:
    1. BANKSTER_ENV_FILE env var (full path)
    2. config/.env.dev (local development)
    3. config/.env (production)
    """
    env_file_path = os.environ.get("BANKSTER_ENV_FILE")
    if env_file_path:
        path = Path(env_file_path)
        if not path.is_absolute():
            path = _find_project_root() / path
        if path.exists():
            return path

    config_dir = get_config_dir()

    dev_env = config_dir / ".env.dev"
    if dev_env.exists():
        return dev_env

    prod_env = config_dir / ".env"
    if prod_env.exists():
        return prod_env

    return None


CommaSeparated = Annotated[list[str], NoDecode]


class Settings(BaseSettings):
    """Application configuration loaded from environment variables.

    Values are loaded from:
    1. OS environment variables (highest priority)
    2. .env file (config/.env.dev or config/.env)
    3. Default values
    """

    model_config = SettingsConfigDict(
        env_file=_resolve_env_file_path(),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Fernet key for encrypting persisted FinTS session blobs
    encryption_key: SecretStr

    # Database
    database_url: str = "sqlite+aiosqlite:///bankster.db"

    # Banking (FINTS_ prefix)
    fints_product_id: str = ""
    fints_product_version: str = "1.0"

    # Validity window of a strong authentication and warning threshold.
    # 90/7 match the PSD2 rules of German institutes; other deployments differ.
    fints_auth_validity_days: int = 90
    fints_auth_warning_days: int = 7

    # Remote return codes meaning "dialog no longer valid"
    fints_auth_error_codes: CommaSeparated = ["9010", "9120", "9800"]

    # Institutes rejecting the anonymous dialog used for TAN mode discovery
    fints_no_anonymous_dialog_blz: CommaSeparated = ["50010517"]
    fints_anonymous_dialog_error_markers: CommaSeparated = [
        "anonyme Dialog",
        "anonymous",
    ]

    # Lifetime of in-flight setup wizard state
    fints_setup_ttl_seconds: int = 900

    # Logging (LOG_ prefix)
    log_level: str = "INFO"

    @field_validator(
        "fints_auth_error_codes",
        "fints_no_anonymous_dialog_blz",
        "fints_anonymous_dialog_error_markers",
        mode="before",
    )
    @classmethod
    def _split_comma_separated(cls, v: Any) -> list[str]:
        """Accept both lists and comma-separated strings."""
        if isinstance(v, str):
            return [item.strip() for item in v.split(",") if item.strip()]
        return list(v or [])


@lru_cache()
def get_settings() -> Settings:
    """Return cached application settings.

    The encryption_key must be provided via environment variables or .env file.
    """
    return Settings()  # type: ignore[call-arg]  # pydantic-settings loads from env


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for tests)."""
    get_settings.cache_clear()
