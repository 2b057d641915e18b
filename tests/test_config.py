from __future__ import annotations

from decimal import Decimal

import pytest

from app.core.config import _build_config
from app.core.exceptions import ConfigurationError


@pytest.fixture
def clean_env(monkeypatch):
    for key in (
        "ENV",
        "DEBUG",
        "DATABASE_URL",
        "DB_CONNECTIVITY_REQUIRED",
        "API_PREFIX",
        "LOG_LEVEL",
        "DEFAULT_COMMISSION_RATE",
        "AFFILIATE_BASE_URL",
        "OUTBOX_BATCH_SIZE",
    ):
        monkeypatch.delenv(key, raising=False)
    return monkeypatch


def test_defaults_are_development_friendly(clean_env):
    cfg = _build_config()
    assert cfg.ENV == "development"
    assert cfg.DEBUG is True
    assert cfg.DATABASE_URL.startswith("sqlite")
    assert cfg.DB_CONNECTIVITY_REQUIRED is False
    assert cfg.DEFAULT_COMMISSION_RATE == Decimal("10")
    assert cfg.OUTBOX_BATCH_SIZE == 100


def test_production_disables_debug_and_requires_db(clean_env):
    clean_env.setenv("DEBUG", "true")
    cfg = _build_config("production")
    assert cfg.DEBUG is False
    assert cfg.DB_CONNECTIVITY_REQUIRED is True
    assert cfg.is_production


def test_affiliate_base_url_drops_trailing_slash(clean_env):
    clean_env.setenv("AFFILIATE_BASE_URL", "https://shop.example.com/")
    assert _build_config().AFFILIATE_BASE_URL == "https://shop.example.com"


@pytest.mark.parametrize(
    ("key", "value"),
    [
        ("DATABASE_URL", "mysql://user@host/db"),
        ("API_PREFIX", "api"),
        ("LOG_LEVEL", "chatty"),
        ("DEFAULT_COMMISSION_RATE", "150"),
        ("DEFAULT_COMMISSION_RATE", "ten"),
        ("OUTBOX_BATCH_SIZE", "0"),
    ],
)
def test_invalid_settings_are_rejected(clean_env, key, value):
    clean_env.setenv(key, value)
    with pytest.raises(ConfigurationError):
        _build_config()
