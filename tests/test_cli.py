"""Tests for the admin CLI."""

import json

from click.testing import CliRunner

from staffhub.cli import cli
from staffhub.config import Settings
from staffhub.services.build_info import build_info


def test_build_info_contents(settings):
    info = build_info(settings)
    assert set(info) == {"buildTime", "version", "mode", "supabaseUrl", "googleRedirectUri"}
    assert info["mode"] == "development"
    assert info["supabaseUrl"] == "https://test.supabase.co"
    assert "service-key" not in json.dumps(info)


def test_build_info_command_writes_file(settings, tmp_path):
    output = tmp_path / "build" / "build-info.json"
    result = CliRunner().invoke(cli, ["build-info", "--output", str(output)], obj={"settings": settings})

    assert result.exit_code == 0, result.output
    assert json.loads(output.read_text())["version"] == "1.0.0"


def test_check_config_ok(settings):
    result = CliRunner().invoke(cli, ["check-config"], obj={"settings": settings})
    assert result.exit_code == 0
    assert "complete" in result.output


def test_check_config_reports_missing_service_key():
    settings = Settings(_env_file=None, SUPABASE_URL="https://x.supabase.co", SUPABASE_ANON_KEY="anon",
                        SUPABASE_SERVICE_ROLE_KEY="")
    result = CliRunner().invoke(cli, ["check-config"], obj={"settings": settings})
    assert result.exit_code == 1
    assert "SUPABASE_SERVICE_ROLE_KEY" in result.output


def test_company_stats(settings, data, http_client):
    result = CliRunner().invoke(
        cli, ["company-stats"], obj={"settings": settings, "http_client": http_client}
    )

    assert result.exit_code == 0, result.output
    assert "Copec: 2 employees, 10 sent, 9 read, engagement +0.55 (high)" in result.output
    assert "✓ 3 companies" in result.output


def test_company_stats_backend_down(settings, backend, http_client):
    backend.fail_with = 503
    result = CliRunner().invoke(
        cli, ["company-stats"], obj={"settings": settings, "http_client": http_client}
    )
    assert result.exit_code == 1
    assert "Error" in result.output
