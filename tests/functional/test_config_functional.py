"""Functional tests for configuration loading precedence and validation."""

from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from formsync import config as config_module
from formsync.config import load_config


@pytest.fixture
def isolated_config(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    for key in (
        "TEST_DATABASE_URL",
        "DATABASE_URL",
        "AIRTABLE_API_URL",
        "AIRTABLE_PERSONAL_ACCESS_TOKEN",
        "AIRTABLE_TIMEOUT_SECONDS",
        "CORS_ORIGINS",
    ):
        monkeypatch.delenv(key, raising=False)
    return tmp_path


def test_defaults(isolated_config):
    cfg = load_config()
    assert cfg.database.dsn == "sqlite+pysqlite:///:memory:"
    assert cfg.airtable.api_url == "https://api.airtable.com"
    assert cfg.airtable.token is None
    assert cfg.airtable.timeout_seconds == 10.0
    assert cfg.cors.origins == ["http://localhost:5173"]


def test_json_file_then_text_override_then_env(isolated_config, monkeypatch):
    (isolated_config / config_module.ROOT_CONFIG).write_text(
        json.dumps(
            {
                "database": {"dsn": "sqlite:///from-json.db"},
                "airtable": {"token": "json-token", "timeout_seconds": 3},
                "cors": {"origins": ["https://a.example", "https://b.example"]},
            }
        ),
        encoding="utf-8",
    )
    cfg = load_config()
    assert cfg.database.dsn == "sqlite:///from-json.db"
    assert cfg.airtable.token == "json-token"
    assert cfg.airtable.timeout_seconds == 3.0
    assert cfg.cors.origins == ["https://a.example", "https://b.example"]

    (isolated_config / "config").mkdir()
    (isolated_config / "config" / "airtable.token").write_text("file-token\n", encoding="utf-8")
    assert load_config().airtable.token == "file-token"

    monkeypatch.setenv("AIRTABLE_PERSONAL_ACCESS_TOKEN", "env-token")
    monkeypatch.setenv("AIRTABLE_API_URL", "https://proxy.example/")
    cfg = load_config()
    assert cfg.airtable.token == "env-token"
    assert cfg.airtable.api_url == "https://proxy.example"


def test_invalid_api_url_is_rejected(isolated_config, monkeypatch):
    monkeypatch.setenv("AIRTABLE_API_URL", "ftp://airtable")
    with pytest.raises(ValidationError):
        load_config()


def test_invalid_timeout_is_rejected(isolated_config, monkeypatch):
    monkeypatch.setenv("AIRTABLE_TIMEOUT_SECONDS", "0")
    with pytest.raises(ValidationError):
        load_config()
