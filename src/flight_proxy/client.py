"""Base API client for the travel data provider.

Handles bearer token injection and maps provider failures onto the
proxy's error kinds. Failed calls are not retried.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from flight_proxy.auth import TokenCache
from flight_proxy.config import Config
from flight_proxy.utils.errors import UpstreamSearchError, UpstreamUnavailableError

logger = logging.getLogger(__name__)


def extract_error_details(payload: Any) -> list[str]:
    """Pull human-readable messages out of a provider `errors` list.

    Returns an empty list when the payload carries no structured errors.
    """
    if not isinstance(payload, dict):
        return []
    errors = payload.get("errors")
    if not isinstance(errors, list):
        return []

    details = []
    for err in errors:
        if isinstance(err, dict):
            message = err.get("detail") or err.get("title") or err.get("code")
            if message is not None:
                details.append(str(message))
        elif err:
            details.append(str(err))
    return details


class ProviderClient:
    """HTTP client for the provider's bearer-authenticated data endpoints."""

    def __init__(
        self,
        config: Config,
        tokens: TokenCache,
        verbose: bool = False,
        http: httpx.Client | None = None,
    ) -> None:
        self._config = config
        self._tokens = tokens
        self._verbose = verbose
        self._http = http or httpx.Client(timeout=config.settings.http_timeout)

    def get(self, path: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        """Make an authenticated GET request and return the decoded JSON body.

        Args:
            path: API path (e.g. "/v2/shopping/flight-offers"). Appended to the environment endpoint.
            params: Query parameters.

        Raises:
            UpstreamAuthError: If no token could be obtained.
            UpstreamSearchError: If the provider answered with structured error details.
            UpstreamUnavailableError: On network failure or an unstructured provider failure.
        """
        url = self._config.get_environment().api_endpoint + path
        headers = {"Authorization": f"Bearer {self._tokens.get_access_token()}"}

        if self._verbose:
            logger.info(f"GET {url} params={params}")

        try:
            response = self._http.get(url, headers=headers, params=params)
        except httpx.HTTPError as e:
            logger.error(f"Provider request to {path} failed: {e}")
            raise UpstreamUnavailableError(f"Provider request failed: {e}") from e

        if self._verbose:
            logger.info(f"Response: {response.status_code}")

        try:
            payload = response.json()
        except ValueError:
            payload = None

        if response.status_code >= 400:
            details = extract_error_details(payload)
            logger.error(f"Provider error (HTTP {response.status_code}) on {path}: {payload or response.text}")
            if details:
                raise UpstreamSearchError(details, upstream_status=response.status_code)
            raise UpstreamUnavailableError(f"Provider error (HTTP {response.status_code})")

        if not isinstance(payload, dict):
            logger.error(f"Provider returned a non-JSON body for {path}")
            raise UpstreamUnavailableError("Provider returned a malformed response")

        return payload

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._http.close()
        self._tokens.close()
