"""Error taxonomy for provider calls and structured CLI error output."""

from __future__ import annotations

import json
import sys

from rich.console import Console

console = Console(stderr=True)


class ConfigError(Exception):
    """Required configuration is missing. Fatal at startup."""


class ProxyError(Exception):
    """Base class for failures surfaced to clients of the proxy."""

    status_code = 500
    code = "PROXY_ERROR"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class UpstreamAuthError(ProxyError):
    """The provider token endpoint rejected the credentials or was unreachable."""

    code = "AUTH_ERROR"


class UpstreamSearchError(ProxyError):
    """The provider answered with a structured list of error details."""

    status_code = 502
    code = "PROVIDER_ERROR"

    def __init__(self, details: list[str], upstream_status: int | None = None) -> None:
        super().__init__(", ".join(details))
        self.details = details
        self.upstream_status = upstream_status


class UpstreamUnavailableError(ProxyError):
    """Network failure, timeout, or a provider failure without usable detail."""

    code = "UPSTREAM_UNAVAILABLE"


# Actionable hints keyed by error substring
_ERROR_HINTS: list[tuple[str, str]] = [
    ("credentials are not set", "Set AMADEUS_CLIENT_ID and AMADEUS_CLIENT_SECRET in your .env file"),
    ("token request failed", "Check the provider client ID/secret and the selected environment"),
    ("invalid_client", "Check the provider client ID/secret and the selected environment"),
    ("timeout", "Request timed out — try again or raise FLIGHT_PROXY_HTTP_TIMEOUT"),
    ("timed out", "Request timed out — try again or raise FLIGHT_PROXY_HTTP_TIMEOUT"),
    ("connection", "Connection error — check network connectivity"),
    ("unknown environment", "Check FLIGHT_PROXY_ENVIRONMENT against config/providers.yaml"),
]


def _get_hint(error_message: str) -> str | None:
    """Match an error message to an actionable hint."""
    lower = error_message.lower()
    for pattern, hint in _ERROR_HINTS:
        if pattern.lower() in lower:
            return hint
    return None


def handle_error(error: Exception) -> None:
    """Handle an error with structured output to stdout and human-readable output to stderr.

    Outputs a JSON error object to stdout for agent consumption:
    {"error": true, "code": "PROVIDER_ERROR", "message": "...", "hint": "..."}
    """
    message = str(error)
    hint = _get_hint(message)

    if isinstance(error, ProxyError):
        code = error.code
    elif isinstance(error, ConfigError):
        code = "CONFIG_ERROR"
    else:
        code = "RUNTIME_ERROR"

    error_obj: dict[str, object] = {
        "error": True,
        "code": code,
        "message": message,
    }
    if hint:
        error_obj["hint"] = hint

    json.dump(error_obj, sys.stdout)
    sys.stdout.write("\n")

    console.print(f"[red]Error:[/red] {message}")
    if hint:
        console.print(f"[dim]Hint: {hint}[/dim]")
