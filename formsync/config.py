"""Configuration utilities for the form service.

This module loads application configuration with the following rules:
- Primary source: `formsync_config.json` at the project root.
- Overrides: environment variables, then optional text files under `config/`.
- Validation: Pydantic models enforce required fields and value constraints.

Only collaborating services read this configuration; the rule engine never
does.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field, ValidationError as PydanticValidationError, field_validator


CONFIG_DIR = Path("config")
ROOT_CONFIG = Path("formsync_config.json")
DEFAULT_AIRTABLE_API_URL = "https://api.airtable.com"
logger = logging.getLogger(__name__)


def _read_config_file(rel_path: str) -> Optional[str]:
    path = CONFIG_DIR / rel_path
    try:
        if path.exists():
            return path.read_text(encoding="utf-8").strip()
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Failed to read override %s: %s", path, e)
        return None
    return None


def _env(key: str, default: Optional[str] = None) -> Optional[str]:
    return os.environ.get(key, default)


class DatabaseConfig(BaseModel):
    dsn: str

    @field_validator("dsn")
    @classmethod
    def dsn_must_be_non_empty(cls, v: str) -> str:
        if not isinstance(v, str) or not v.strip():
            raise ValueError("database.dsn must be a non-empty string")
        return v


class AirtableConfig(BaseModel):
    api_url: str = Field(default=DEFAULT_AIRTABLE_API_URL)
    token: Optional[str] = None
    timeout_seconds: float = Field(default=10.0, gt=0)

    @field_validator("api_url")
    @classmethod
    def api_url_must_be_http(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError("airtable.api_url must be an http(s) URL")
        return v.rstrip("/")


class CorsConfig(BaseModel):
    origins: List[str] = Field(default_factory=lambda: ["http://localhost:5173"])


class AppConfig(BaseModel):
    database: DatabaseConfig
    airtable: AirtableConfig
    cors: CorsConfig


def _read_json_file(path: Path) -> dict:
    try:
        if path.exists():
            return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:  # pragma: no cover - defensive
        logger.error("Failed to read JSON config %s: %s", path, e)
    return {}


def load_config() -> AppConfig:
    """Load configuration with validation.

    Precedence (highest first):
    1) Environment variables
    2) Text files in `config/` (optional)
    3) formsync_config.json at project root (primary base)
    4) Safe defaults for development
    """

    base = _read_json_file(ROOT_CONFIG)

    def _base(path: str, default: Optional[str] = None) -> Optional[str]:
        cur: object = base
        for key in path.split("."):
            if not isinstance(cur, dict) or key not in cur:
                return default
            cur = cur[key]
        if isinstance(cur, list):
            return ",".join(str(x) for x in cur)
        return str(cur) if cur is not None else default

    # Database
    dsn = (
        _env("TEST_DATABASE_URL")
        or _env("DATABASE_URL")
        or _read_config_file("database.url")
        or _base("database.dsn")
        or "sqlite+pysqlite:///:memory:"
    )

    # Airtable
    api_url = _env("AIRTABLE_API_URL") or _read_config_file("airtable.api_url") or _base("airtable.api_url", DEFAULT_AIRTABLE_API_URL)
    token = _env("AIRTABLE_PERSONAL_ACCESS_TOKEN") or _read_config_file("airtable.token") or _base("airtable.token")
    timeout_text = _env("AIRTABLE_TIMEOUT_SECONDS") or _read_config_file("airtable.timeout_seconds") or _base("airtable.timeout_seconds", "10")

    # CORS
    origins_text = _env("CORS_ORIGINS") or _read_config_file("cors.origins") or _base("cors.origins", "http://localhost:5173")
    origins = [o.strip() for o in str(origins_text).split(",") if o.strip()]

    try:
        cfg = AppConfig(
            database=DatabaseConfig(dsn=dsn),
            airtable=AirtableConfig(
                api_url=str(api_url),
                token=token,
                timeout_seconds=float(str(timeout_text).strip()),
            ),
            cors=CorsConfig(origins=origins),
        )
        return cfg
    except (PydanticValidationError, ValueError) as e:
        logger.error("Invalid application configuration: %s", e)
        raise


__all__ = [
    "AppConfig",
    "DatabaseConfig",
    "AirtableConfig",
    "CorsConfig",
    "load_config",
]
