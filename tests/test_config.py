import pytest
from pydantic import ValidationError

from config import ClientConfig, ConfigError, LogLevel
from dashboard.config import DashboardSettings


def test_client_config_defaults():
    config = ClientConfig(env={})
    assert config.api.base_url == "http://localhost:8000"
    assert config.tracker.undo_capacity == 50
    assert config.tracker.timezone == "UTC"
    assert config.logging.level is LogLevel.INFO


def test_client_config_from_env():
    config = ClientConfig(env={
        "DAILYGRID_API_URL": "https://grid.example.com/",
        "DAILYGRID_TIMEOUT": "3.5",
        "UNDO_CAPACITY": "10",
        "TIMEZONE": "Europe/Moscow",
        "LOG_LEVEL": "debug",
        "LOG_TO_FILE": "false",
    })
    assert config.api.base_url == "https://grid.example.com"
    assert config.api.request_timeout == 3.5
    assert config.tracker.undo_capacity == 10
    assert config.logging.level is LogLevel.DEBUG
    assert config.logging.log_to_file is False
    assert config.to_dict()["timezone"] == "Europe/Moscow"


@pytest.mark.parametrize("env", [
    {"TIMEZONE": "Mars/Olympus"},
    {"DAILYGRID_API_URL": "ftp://example.com"},
    {"UNDO_CAPACITY": "many"},
    {"UNDO_CAPACITY": "0"},
    {"DAILYGRID_TIMEOUT": "-1"},
    {"LOG_LEVEL": "LOUD"},
])
def test_client_config_rejects_bad_values(env):
    with pytest.raises(ConfigError):
        ClientConfig(env=env)


def test_dashboard_settings_normalizes_values():
    settings = DashboardSettings(LOG_LEVEL="debug", ENVIRONMENT="Testing", LOGS_DIR=None)
    assert settings.LOG_LEVEL == "DEBUG"
    assert settings.is_testing


def test_dashboard_settings_rejects_bad_port():
    with pytest.raises(ValidationError):
        DashboardSettings(DASHBOARD_PORT=70000)


def test_allowed_origins_from_env(monkeypatch):
    monkeypatch.setenv("ALLOWED_ORIGINS", "http://a, http://b")
    settings = DashboardSettings()
    assert settings.ALLOWED_ORIGINS == ["http://a", "http://b"]


def test_production_disables_debug():
    settings = DashboardSettings(ENVIRONMENT="production", DEBUG=True)
    assert settings.DEBUG is False
    assert settings.is_production
