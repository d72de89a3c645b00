"""CLI entry point for the trade journal core."""

from __future__ import annotations

import asyncio
import json
from typing import Any

import click

from .core.config import Settings, load_settings
from .core.errors import JournalError
from .filters.codec import FilterCodec
from .filters.location import InMemoryLocation
from .journal.analytics import AnalyticsService
from .journal.providers import JsonFileTradeProvider
from .observability.logger import get_logger, setup_logging

logger = get_logger(__name__)


def _settings(config: str | None) -> Settings:
    try:
        settings = load_settings(config_path=config)
    except JournalError as exc:
        raise click.ClickException(str(exc)) from exc
    setup_logging(
        level=settings.observability.log_level,
        format=settings.observability.log_format,
    )
    return settings


def _service(settings: Settings, trades_file: str | None) -> AnalyticsService:
    path = trades_file or settings.trades_file
    if not path:
        raise click.UsageError("No trade file given (--trades or JOURNAL_TRADES_FILE)")
    return AnalyticsService.from_settings(JsonFileTradeProvider(path), settings)


def _echo_json(payload: Any) -> None:
    click.echo(json.dumps(payload, indent=2))


@click.group()
def main() -> None:
    """Trade journal filters and emotional analytics."""


@main.command()
@click.option("--trades", "trades_file", default=None, help="JSON trade export")
@click.option("--query", default="", help="Filter query string, e.g. 'market=crypto&side=Buy'")
@click.option("--config", default=None, help="Config file path")
def analyze(trades_file: str | None, query: str, config: str | None) -> None:
    """Emotion leaning and coupled psychological metrics."""
    settings = _settings(config)
    service = _service(settings, trades_file)
    filters = FilterCodec().parse(query)
    try:
        result = asyncio.run(service.emotional_analysis(filters))
    except JournalError as exc:
        raise click.ClickException(str(exc)) from exc
    _echo_json(result.to_payload())


@main.command()
@click.option("--trades", "trades_file", default=None, help="JSON trade export")
@click.option("--query", default="", help="Filter query string")
@click.option("--config", default=None, help="Config file path")
def trades(trades_file: str | None, query: str, config: str | None) -> None:
    """List trades matching the filters, sorted."""
    settings = _settings(config)
    service = _service(settings, trades_file)
    filters = FilterCodec().parse(query)
    try:
        rows = asyncio.run(service.filtered_trades(filters))
    except JournalError as exc:
        raise click.ClickException(str(exc)) from exc
    _echo_json([t.model_dump(mode="json") for t in rows])


@main.command("share-url")
@click.argument("base_url")
@click.option("--query", default="", help="Filter query string")
def share_url(base_url: str, query: str) -> None:
    """Canonical shareable link: invalid filters dropped, keys ordered."""
    codec = FilterCodec(InMemoryLocation(base_url))
    click.echo(codec.create_shareable_url(codec.parse(query)))


@main.command()
@click.option("--trades", "trades_file", default=None, help="JSON trade export")
@click.option("--config", default=None, help="Config file path")
@click.option("--host", default=None, help="Bind address (default from config)")
@click.option("--port", default=None, type=int, help="Port (default from config)")
def serve(trades_file: str | None, config: str | None, host: str | None, port: int | None) -> None:
    """Run the read API."""
    import uvicorn

    from .api.app import create_app

    settings = _settings(config)
    app = create_app(service=_service(settings, trades_file), settings=settings)
    host = host or settings.api.host
    port = port or settings.api.port
    logger.info("api_starting", host=host, port=port)
    uvicorn.run(app, host=host, port=port, log_config=None)


if __name__ == "__main__":
    main()
