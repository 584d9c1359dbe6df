"""Tests for settings validation and app startup."""

import pytest

from staffhub.config import Settings
from staffhub.core.exceptions import ConfigurationError
from staffhub.main import create_app


def test_settings_read_environment(monkeypatch):
    monkeypatch.setenv("SUPABASE_URL", "https://env.supabase.co")
    monkeypatch.setenv("SUPABASE_ANON_KEY", "env-anon")
    monkeypatch.setenv("FEATURE_ADMIN_API", "false")

    settings = Settings(_env_file=None)

    assert settings.SUPABASE_URL == "https://env.supabase.co"
    assert settings.backend_configured is True
    assert settings.service_key_configured is False
    assert settings.FEATURE_ADMIN_API is False


def test_missing_fields_are_listed():
    settings = Settings(_env_file=None, SUPABASE_URL="", SUPABASE_ANON_KEY="", SUPABASE_SERVICE_ROLE_KEY="")
    assert settings.missing_server_fields() == [
        "SUPABASE_URL", "SUPABASE_ANON_KEY", "SUPABASE_SERVICE_ROLE_KEY",
    ]

    with pytest.raises(ConfigurationError) as exc_info:
        settings.validate_for_server()
    assert exc_info.value.missing == ["SUPABASE_URL", "SUPABASE_ANON_KEY", "SUPABASE_SERVICE_ROLE_KEY"]


def test_production_refuses_to_start_unconfigured():
    settings = Settings(_env_file=None, DEV_MODE=False, SUPABASE_URL="https://x.supabase.co",
                        SUPABASE_ANON_KEY="anon", SUPABASE_SERVICE_ROLE_KEY="")
    with pytest.raises(ConfigurationError):
        create_app(settings)


def test_dev_mode_starts_unconfigured_and_fails_per_request():
    settings = Settings(_env_file=None, DEV_MODE=True, SUPABASE_URL="", SUPABASE_ANON_KEY="",
                        SUPABASE_SERVICE_ROLE_KEY="")
    app = create_app(settings)
    assert app.state.service_backend is None
    assert app.state.backend.configured is False
