"""CLI commands for provider token management."""

from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console

from flight_proxy.auth import TokenCache
from flight_proxy.config import get_config
from flight_proxy.utils.errors import handle_error
from flight_proxy.utils.output import OutputFormat, print_token_status

console = Console(stderr=True)
app = typer.Typer(name="auth", help="Check provider credentials and tokens.")


def _token_result(tokens: TokenCache, state: str) -> dict[str, object]:
    status = tokens.get_status()
    return {
        "status": state,
        "expires_at": str(status.expires_at),
        "seconds_remaining": status.seconds_remaining,
    }


@app.command()
def login(
    output: Annotated[OutputFormat, typer.Option("--output", "-o", help="Output format")] = OutputFormat.TABLE,
) -> None:
    """Request a token and display its expiry."""
    config = get_config()
    tokens = TokenCache(config)

    try:
        console.print(
            f"Authenticating against [bold]{config.settings.environment}[/bold]...", style="yellow"
        )
        config.require_credentials()
        tokens.get_access_token()
        print_token_status(_token_result(tokens, "authenticated"), output, title="Authentication")
    except Exception as e:
        handle_error(e)
        raise typer.Exit(1)
    finally:
        tokens.close()


@app.command()
def refresh(
    output: Annotated[OutputFormat, typer.Option("--output", "-o", help="Output format")] = OutputFormat.TABLE,
) -> None:
    """Force a token refresh."""
    config = get_config()
    tokens = TokenCache(config)

    try:
        console.print("Force refreshing provider token...", style="yellow")
        config.require_credentials()
        tokens.get_access_token(force_refresh=True)
        print_token_status(_token_result(tokens, "refreshed"), output, title="Token Refreshed")
    except Exception as e:
        handle_error(e)
        raise typer.Exit(1)
    finally:
        tokens.close()
