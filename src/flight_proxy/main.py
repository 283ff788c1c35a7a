"""Flight search proxy: entry point.

Serves the search API and exposes the same searches on the command line.
"""

from __future__ import annotations

import logging

import typer

from flight_proxy.commands.auth_cmd import app as auth_app
from flight_proxy.commands.search_cmd import app as search_app
from flight_proxy.commands.serve_cmd import serve

app = typer.Typer(
    name="flight-proxy",
    help="Flight and hotel search proxy for the travel data provider.",
    no_args_is_help=True,
)

app.command("serve")(serve)
app.add_typer(search_app, name="search")
app.add_typer(auth_app, name="auth")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
) -> None:
    """Flight search proxy: serve the API or run searches directly."""
    if verbose:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")


if __name__ == "__main__":
    app()
