"""
Command-line interface for seer.

Usage:
    seer serve     # Run the API server (with the periodic fetcher)
    seer init-db   # Create tables and seed built-in sources
    seer fetch     # Run one fetch cycle and print the summary
    seer report    # Generate a report for a window
    seer health    # Check service dependencies
"""

import asyncio
import sys

import click

from seer.config.settings import get_settings
from seer.observability.logging import setup_logging
from seer.observability.metrics import get_metrics


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(debug: bool) -> None:
    """Seer - opportunity discovery for independent developers."""
    if debug:
        import os
        os.environ["LOG_LEVEL"] = "DEBUG"
        get_settings.cache_clear()

    setup_logging()


@main.command()
@click.option("--host", default=None, help="API server host")
@click.option("--port", default=None, type=int, help="API server port")
@click.option("--reload", is_flag=True, help="Enable auto-reload (dev only)")
@click.option("--metrics-port", default=None, type=int, help="Metrics server port")
def serve(host: str | None, port: int | None, reload: bool, metrics_port: int | None) -> None:
    """Start the API server."""
    import uvicorn

    settings = get_settings()
    host = host or settings.api_host
    port = port or settings.api_port
    metrics_port = metrics_port or settings.metrics_port

    get_metrics().start_server(port=metrics_port)

    click.echo(f"Starting API server on {host}:{port}")
    click.echo(f"Metrics available on http://localhost:{metrics_port}/metrics")
    click.echo(f"API docs available on http://localhost:{port}/docs")

    uvicorn.run(
        "seer.api.app:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_level="info",
    )


@main.command("init-db")
def init_db() -> None:
    """Initialize the database schema and seed built-in sources."""
    from seer.services.factory import build_source_registry
    from seer.storage.database import Database
    from seer.storage.schema import create_all_tables

    async def run():
        async with Database() as db:
            await create_all_tables(db)
            seeded = await build_source_registry(db).ensure_seeded()

        click.echo("Database initialized successfully")
        if seeded:
            click.echo(f"Seeded {seeded} built-in sources")

    asyncio.run(run())


@main.command()
def fetch() -> None:
    """Fetch all enabled sources once."""
    from seer.services.factory import build_fetcher
    from seer.storage.database import Database

    async def run():
        async with Database() as db:
            summary = await build_fetcher(db).fetch_all()

        click.echo(f"\nFetch {summary.status}")
        click.echo("-" * 40)
        for result in summary.results:
            if result.success:
                line = (
                    f"  ✓ {result.source_name}: {result.items} items, "
                    f"{result.created} new, {result.duplicates} duplicates"
                )
                click.echo(click.style(line, fg="green"))
            else:
                click.echo(click.style(f"  ✗ {result.source_name}: {result.error}", fg="red"))
        click.echo("-" * 40)
        click.echo(summary.message)

        if summary.status == "failed":
            sys.exit(1)

    asyncio.run(run())


@main.command()
@click.option("--start", default=None, help="Window start, YYYY-MM-DD or ISO-8601")
@click.option("--end", default=None, help="Window end (exclusive), YYYY-MM-DD or ISO-8601")
@click.option("--prompt", "show_prompt", is_flag=True, help="Print the LLM prompt instead")
def report(start: str | None, end: str | None, show_prompt: bool) -> None:
    """Generate and store a report."""
    from seer.errors import ValidationError
    from seer.services.factory import build_report_service
    from seer.storage.database import Database

    async def run():
        async with Database() as db:
            service = build_report_service(db)
            try:
                generated = await service.generate(start=start, end=end)
            finally:
                if service.summarizer is not None:
                    await service.summarizer.close()

        click.echo(generated.content_prompt if show_prompt else generated.content_human)
        click.echo(
            f"Report {generated.id}: {generated.opportunity_count} opportunities",
            err=True,
        )
        if generated.summary:
            click.echo(f"Summary: {generated.summary}", err=True)

    try:
        asyncio.run(run())
    except ValidationError as e:
        raise click.ClickException(e.message) from e


@main.command()
def health() -> None:
    """Check health of all dependencies."""
    import structlog

    from seer.reports.config import SummarizerConfig
    from seer.storage.database import Database

    logger = structlog.get_logger()

    async def check():
        results: dict[str, bool] = {}

        try:
            async with Database() as db:
                results["postgres"] = await db.health_check()
        except Exception as e:
            results["postgres"] = False
            logger.error("Postgres health check failed", error=str(e))

        results["summarizer_configured"] = SummarizerConfig().enabled

        click.echo("\nHealth Check Results:")
        click.echo("-" * 40)
        for name, status in results.items():
            icon = "✓" if status else "✗"
            color = "green" if status else "red"
            click.echo(click.style(f"  {icon} {name}: {status}", fg=color))
        click.echo("-" * 40)

        if results["postgres"]:
            click.echo(click.style("All core services healthy!", fg="green"))
            sys.exit(0)
        else:
            click.echo(click.style("Some services unhealthy!", fg="red"))
            sys.exit(1)

    asyncio.run(check())


if __name__ == "__main__":
    main()
