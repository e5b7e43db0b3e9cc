from __future__ import annotations

import pytest

from cadastro import config as config_module
from cadastro.config import AppConfig


@pytest.fixture(autouse=True)
def no_dotenv(monkeypatch):
    monkeypatch.setattr(config_module, "load_dotenv", lambda: None)
    for key in (
        "FIREBASE_API_KEY",
        "ENV",
        "REDIS_URL",
        "HTTP_TIMEOUT_MS",
        "SUCCESS_REDIRECT_DELAY_MS",
        "DATABASE_URL",
    ):
        monkeypatch.delenv(key, raising=False)


def test_missing_api_key_raises():
    with pytest.raises(RuntimeError, match="FIREBASE_API_KEY"):
        AppConfig.load_from_env()


def test_defaults(monkeypatch):
    monkeypatch.setenv("FIREBASE_API_KEY", "chave")

    config = AppConfig.load_from_env()

    assert config.firebase_api_key == "chave"
    assert config.env == "dev"
    assert config.users_collection == "usuarios"
    assert config.http_timeout_seconds == 10.0
    assert config.success_redirect_delay_seconds == 2.0
    assert config.auth_success_clear_delay_seconds == 3.0


def test_overrides_and_invalid_env(monkeypatch):
    monkeypatch.setenv("FIREBASE_API_KEY", "chave")
    monkeypatch.setenv("ENV", "staging")
    monkeypatch.setenv("HTTP_TIMEOUT_MS", "2500")
    monkeypatch.setenv("DATABASE_URL", "sqlite:///:memory:")

    config = AppConfig.load_from_env()

    assert config.env == "dev"
    assert config.http_timeout_seconds == 2.5
    assert config.database_url == "sqlite:///:memory:"
