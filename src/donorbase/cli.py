"""``donorbase`` command: run the API server and manage events from a shell."""

import asyncio
import json
from pathlib import Path
from typing import NoReturn

import click

from donorbase.core.config import get_settings
from donorbase.core.logging import configure_logging, get_logger

APP_PATH = "donorbase.infrastructure.api.app:app"


@click.group()
@click.version_option(package_name="donorbase", prog_name="DonorBase")
def cli() -> None:
    """DonorBase - donation tracking for events.

    Settings are read from DONORBASE_* environment variables and .env files.
    """


@cli.command()
@click.option("--host", type=str, default=None, help="Interface to bind (default: DONORBASE_HOST)")
@click.option("--port", type=int, default=None, help="Port to bind (default: DONORBASE_PORT)")
@click.option(
    "--workers",
    type=click.IntRange(min=1),
    default=None,
    help="Worker processes (default: DONORBASE_WORKERS); ignored with --reload",
)
@click.option(
    "--reload/--no-reload",
    default=None,
    help="Restart on code changes (default: on in development)",
)
def serve(host: str | None, port: int | None, workers: int | None, reload: bool | None) -> None:
    """Run the API server with uvicorn."""
    import uvicorn

    settings = get_settings()
    configure_logging(settings)

    options = {
        "host": host or settings.host,
        "port": port or settings.port,
        "reload": settings.is_development if reload is None else reload,
    }
    # uvicorn's reloader runs a single process
    options["workers"] = 1 if options["reload"] else workers or settings.workers

    get_logger(__name__).info("Starting DonorBase server", environment=settings.environment, **options)
    uvicorn.run(APP_PATH, log_level=settings.log_level.lower(), **options)


@cli.command("init-db")
@click.option("--force", is_flag=True, default=False, help="Skip the confirmation prompt")
def init_db(force: bool) -> None:
    """Create the database tables that do not exist yet."""
    from donorbase.infrastructure import close_database, init_database

    settings = get_settings()
    configure_logging(settings)

    if not force:
        click.confirm(
            f"This will create the database tables in {settings.database_url}. Continue?",
            abort=True,
            default=False,
        )

    async def initialize() -> None:
        try:
            await init_database()
        finally:
            await close_database()

    asyncio.run(initialize())
    click.echo("Database initialized.")


@cli.command("list-events")
@click.option("--search", type=str, default=None, help="Filter by event name")
def list_events(search: str | None) -> None:
    """List events with their running totals."""
    from donorbase.domain.services.event_service import EventService
    from donorbase.infrastructure import close_database, get_db_manager

    configure_logging(get_settings())

    async def load():
        try:
            async with get_db_manager().session() as session:
                return await EventService(session).list_events(search)
        finally:
            await close_database()

    events = asyncio.run(load())
    if not events:
        click.echo("No events found.")
        return
    for event in events:
        click.echo(
            f"{event.id}  {event.name}  amount={event.current_amount:g}  donors={event.total_visitors}"
        )


@cli.command()
@click.argument("event_id")
@click.option(
    "--format",
    "export_format",
    type=click.Choice(["csv", "json"]),
    default="csv",
    help="Export format",
)
@click.option(
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Output file (defaults to <event name>_<date>.<format>)",
)
def export(event_id: str, export_format: str, output: Path | None) -> None:
    """Export the donations of an event as CSV or JSON."""
    from donorbase.domain.exceptions import EventNotFoundError
    from donorbase.domain.services import ExportService
    from donorbase.domain.services.donation_service import DonationService
    from donorbase.domain.services.event_service import EventService
    from donorbase.infrastructure import close_database, get_db_manager

    settings = get_settings()
    configure_logging(settings)

    async def load():
        try:
            async with get_db_manager().session() as session:
                event = await EventService(session).get(event_id)
                schema, records = await DonationService(session).list_with_schema(event_id)
                return event, schema, records
        finally:
            await close_database()

    try:
        event, schema, records = asyncio.run(load())
    except EventNotFoundError as e:
        raise click.ClickException(str(e))

    if export_format == "csv":
        content = ExportService.to_csv(schema, records, settings.export_currency_label)
    else:
        content = json.dumps(ExportService.to_json(event, schema, records), indent=2)

    path = output or Path(ExportService.filename(event, export_format))
    path.write_text(content, encoding="utf-8")
    click.echo(f"Exported {len(records)} donations to {path}")


@cli.command()
def info() -> None:
    """Show the effective configuration."""
    from sqlalchemy.engine import make_url

    settings = get_settings()
    sections = {
        "Application": {
            "Environment": settings.environment,
            "Debug": settings.debug,
            "API prefix": settings.api_prefix,
        },
        "Server": {
            "Bind": f"{settings.host}:{settings.port}",
            "Workers": settings.workers,
        },
        "Database": {
            "URL": make_url(settings.database_url).render_as_string(hide_password=True),
            "Echo": settings.db_echo,
        },
        "Donations": {
            "Reject <= 0": settings.reject_non_positive_amounts,
            "Placeholder": settings.projection_placeholder,
            "Currency": settings.export_currency_label,
        },
        "Realtime": {
            "Heartbeat": f"{settings.realtime_heartbeat_seconds:g}s",
            "Max topics": settings.realtime_max_subscriptions,
        },
        "Logging": {
            "Level": settings.log_level,
            "Format": settings.log_format,
        },
    }

    click.echo(f"DonorBase v{settings.app_version}")
    for title, values in sections.items():
        click.echo(f"\n{title}:")
        for key, value in values.items():
            click.echo(f"  {key + ':':<14}{value}")


def main() -> NoReturn:
    cli()
