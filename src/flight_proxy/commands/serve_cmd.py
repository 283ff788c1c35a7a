"""CLI command that runs the HTTP API."""

from __future__ import annotations

import logging
from typing import Annotated

import typer
import uvicorn
from rich.console import Console

from flight_proxy.config import get_config
from flight_proxy.utils.errors import ConfigError, handle_error

console = Console(stderr=True)


def serve(
    host: Annotated[str | None, typer.Option("--host", help="Bind address (default from settings)")] = None,
    port: Annotated[int | None, typer.Option("--port", "-p", help="Port (default from PORT)")] = None,
    reload: Annotated[bool, typer.Option("--reload", help="Reload on code changes")] = False,
) -> None:
    """Run the search proxy HTTP server."""
    config = get_config()
    try:
        config.require_credentials()
    except ConfigError as e:
        handle_error(e)
        raise typer.Exit(1)

    settings = config.settings
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    console.print(
        f"Serving on [bold]{host or settings.host}:{port or settings.port}[/bold] "
        f"(provider environment: {settings.environment})",
        style="green",
    )
    uvicorn.run(
        "flight_proxy.api:create_app",
        factory=True,
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )
