"""CLI tools for StaffHub administration."""

import asyncio
import json

import click

from staffhub.client import BackendClient
from staffhub.config import get_settings
from staffhub.core.exceptions import StaffHubException
from staffhub.core.logging_config import configure_logging
from staffhub.services.build_info import write_build_info
from staffhub.services.company_service import CompanyService


def _settings(ctx: click.Context):
    return (ctx.obj or {}).get("settings") or get_settings()


@click.group()
@click.pass_context
def cli(ctx: click.Context):
    """StaffHub CLI tools."""
    ctx.ensure_object(dict)
    configure_logging(_settings(ctx).LOG_LEVEL)


@cli.command()
@click.option("--output", default="build/build-info.json", show_default=True, help="Where to write the file")
@click.pass_context
def build_info(ctx: click.Context, output: str):
    """Write build-info.json for the deployed build."""
    info = write_build_info(_settings(ctx), output)
    click.echo(f"✓ Build info written to {output}")
    click.echo(f"  Version: {info['version']}")
    click.echo(f"  Mode: {info['mode']}")
    click.echo(f"  Backend URL: {info['supabaseUrl'] or '(not set)'}")


@cli.command()
@click.pass_context
def check_config(ctx: click.Context):
    """
    Report which backend settings are missing.
    Exits with status 1 when a server process would refuse to start.
    """
    settings = _settings(ctx)
    missing = settings.missing_server_fields()
    if not missing:
        click.echo("✓ Backend configuration complete")
        return

    for name in missing:
        click.echo(f"❌ Missing {name}")
    if settings.backend_configured:
        click.echo("→ Browser-level calls will work; admin operations need the service key")
    raise SystemExit(1)


async def _company_stats(settings, http_client=None):
    role = "service" if settings.service_key_configured else "anon"
    client = BackendClient.from_settings(settings, role, http_client)
    try:
        return await CompanyService(client).list_with_stats()
    finally:
        await client.aclose()


@cli.command()
@click.option("--as-json", is_flag=True, help="Print raw JSON")
@click.pass_context
def company_stats(ctx: click.Context, as_json: bool):
    """Print employee and message figures for every company."""
    settings = _settings(ctx)
    try:
        stats = asyncio.run(_company_stats(settings, ctx.obj.get("http_client")))
    except StaffHubException as e:
        click.echo(f"❌ Error: {e.message}")
        raise SystemExit(1)

    if as_json:
        click.echo(json.dumps(stats, indent=2, default=str))
        return

    for company in stats:
        click.echo(
            f"{company['name']}: {company['employee_count']} employees, "
            f"{company['sent_messages']} sent, {company['read_messages']} read, "
            f"engagement {company['sentiment_score']:+.2f} ({company['engagement_band']})"
        )
    click.echo(f"✓ {len(stats)} companies")


@cli.command()
@click.option("--host", default="0.0.0.0", show_default=True)
@click.option("--port", default=8000, show_default=True, type=int)
@click.option("--reload", is_flag=True, help="Restart on code changes")
def serve(host: str, port: int, reload: bool):
    """Run the API with uvicorn."""
    import uvicorn

    uvicorn.run("staffhub.main:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    cli()
