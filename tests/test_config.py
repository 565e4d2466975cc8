"""Test application configuration."""
import pytest

from core.business.user import ANONYMOUS
from patterns.domain_config import AppConfig, NoAccessBehavior


def test_defaults():
    config = AppConfig.default()
    assert config.api_url == "/api/"
    assert config.database_url == "sqlite+aiosqlite:///:memory:"
    assert config.no_access_behavior is NoAccessBehavior.THROW_ERROR
    assert config.user_reader() is ANONYMOUS
    assert config.locale_reader() == "en"


def test_api_url_gets_trailing_slash():
    assert AppConfig.default(api_url="/services").api_url == "/services/"


def test_from_env(monkeypatch):
    monkeypatch.setenv("BOOKSTORE_API_URL", "/rest")
    monkeypatch.setenv("BOOKSTORE_NO_ACCESS_BEHAVIOR", "show_warning")
    monkeypatch.setenv("BOOKSTORE_DEBUG", "true")
    monkeypatch.setenv("BOOKSTORE_CORS_ORIGINS", "http://a.test, http://b.test")
    config = AppConfig.from_env()
    assert config.api_url == "/rest/"
    assert config.no_access_behavior is NoAccessBehavior.SHOW_WARNING
    assert config.debug is True
    assert config.cors_origins == ("http://a.test", "http://b.test")


def test_from_env_overrides_win(monkeypatch):
    monkeypatch.setenv("BOOKSTORE_DEBUG", "true")
    assert AppConfig.from_env(debug=False).debug is False


def test_from_env_rejects_unknown_behavior(monkeypatch):
    monkeypatch.setenv("BOOKSTORE_NO_ACCESS_BEHAVIOR", "ignore")
    with pytest.raises(ValueError):
        AppConfig.from_env()


def test_config_is_frozen():
    config = AppConfig.default()
    with pytest.raises(AttributeError):
        config.api_url = "/other/"
    assert config.with_overrides(seed_data=False).seed_data is False
