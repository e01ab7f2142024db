"""Tests for Settings defaults and environment overrides."""

import pytest
from pydantic import ValidationError

from cardapio_cache.core.settings import Settings


def test_defaults():
    s = Settings(_env_file=None)
    assert s.debounce_ms == 500
    assert s.refresh_policy == "never"
    assert s.synthetic_categories == ["Drinks", "Specials"]
    assert s.database_url.startswith("sqlite:///")
    assert s.menu_url.endswith("capstone.json")


def test_env_override(monkeypatch):
    monkeypatch.setenv("CC_DEBOUNCE_MS", "150")
    monkeypatch.setenv("CC_REFRESH_POLICY", "ttl")
    monkeypatch.setenv("CC_REFRESH_TTL_S", "3600")
    monkeypatch.setenv("CC_MENU_URL", "https://example.test/menu.json")

    s = Settings(_env_file=None)
    assert s.debounce_ms == 150
    assert s.refresh_policy == "ttl"
    assert s.refresh_ttl_s == 3600
    assert s.menu_url == "https://example.test/menu.json"


def test_synthetic_categories_from_env_json(monkeypatch):
    monkeypatch.setenv("CC_SYNTHETIC_CATEGORIES", '["Drinks", "Specials", "Kids"]')
    assert Settings(_env_file=None).synthetic_categories == ["Drinks", "Specials", "Kids"]


def test_invalid_refresh_policy(monkeypatch):
    monkeypatch.setenv("CC_REFRESH_POLICY", "sometimes")
    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_negative_debounce_rejected():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, debounce_ms=-1)


def test_env_file(tmp_path):
    env = tmp_path / ".env"
    env.write_text("CC_PORT=9090\nCC_FLASK_DEBUG=true\n")
    s = Settings(_env_file=env)
    assert s.port == 9090
    assert s.flask_debug is True
