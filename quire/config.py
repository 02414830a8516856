import os
import re
from functools import lru_cache
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env file early so env vars are available for YAML interpolation
load_dotenv(Path.cwd() / ".env")

# Pattern to match $VAR_NAME environment variable references
ENV_VAR_PATTERN = re.compile(r"\$([A-Z_][A-Z0-9_]*)")

CONFIG_FILENAME = "app.yaml"


def interpolate_env_vars(value):
    """Recursively replace $VAR_NAME with os.environ values."""
    if isinstance(value, str):

        def replace(match):
            var = match.group(1)
            val = os.environ.get(var)
            if val is None:
                raise ValueError(f"Environment variable ${var} not set")
            return val

        return ENV_VAR_PATTERN.sub(replace, value)
    elif isinstance(value, dict):
        return {k: interpolate_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [interpolate_env_vars(item) for item in value]
    return value


def get_config_path() -> Path:
    return Path.cwd() / CONFIG_FILENAME


def load_app_config(config_path: Path | None = None) -> dict:
    """Load and parse app.yaml with environment variable interpolation."""
    config_path = config_path or get_config_path()

    if not config_path.exists():
        raise FileNotFoundError(f"{CONFIG_FILENAME} not found at {config_path}")

    with open(config_path, "r") as f:
        config = yaml.safe_load(f) or {}

    return interpolate_env_vars(config)


class DatabaseConfig(BaseModel):
    """Database connection configuration."""

    url: str = "sqlite+aiosqlite:///./quire.db"
    pool_size: int = 5
    pool_overflow: int = 10
    pool_timeout: int = 30
    echo: bool = False
    # Create missing tables on startup instead of running migrations
    create_all: bool = False


class PaginationConfig(BaseModel):
    """Default and maximum page sizes for listings."""

    admin_per_page: int = Field(default=15, ge=1)
    public_per_page: int = Field(default=12, ge=1)
    max_per_page: int = Field(default=100, ge=1)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="QUIRE_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Application
    debug: bool = False
    log_level: str = "INFO"

    # Loaded from app.yaml
    db: DatabaseConfig = DatabaseConfig()
    pagination: PaginationConfig = PaginationConfig()


def build_settings(config_path: Path | None = None) -> Settings:
    """Create settings from the environment, then overlay app.yaml sections."""
    base_settings = Settings()

    try:
        app_config = load_app_config(config_path)
    except FileNotFoundError:
        return base_settings

    updates = {}

    if "db" in app_config:
        updates["db"] = DatabaseConfig(**app_config["db"])

    if "pagination" in app_config:
        updates["pagination"] = PaginationConfig(**app_config["pagination"])

    for key in ("debug", "log_level"):
        if key in app_config:
            updates[key] = app_config[key]

    if updates:
        return base_settings.model_copy(update=updates)

    return base_settings


@lru_cache
def get_settings() -> Settings:
    """Load settings from .env and app.yaml."""
    return build_settings()
