"""OAuth2 client-credentials token cache for the travel data provider.

Holds a single bearer token and its expiry, refreshing lazily on demand.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Callable

import httpx

from flight_proxy.config import Config
from flight_proxy.models.auth import TokenResponse, TokenStatus
from flight_proxy.utils.errors import UpstreamAuthError

logger = logging.getLogger(__name__)

# Tokens are retired this long before the provider's expiry
EXPIRY_BUFFER = timedelta(seconds=60)


class TokenCache:
    """Owns the provider access token and its expiry.

    No locking: concurrent callers that find the token expired may each
    refresh it, and the last response written wins. Every refreshed token
    is valid for the window computed from its own response.
    """

    def __init__(
        self,
        config: Config,
        http: httpx.Client | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._config = config
        self._clock = clock
        self._access_token: str | None = None
        self._token_expiry: datetime | None = None
        self._http = http or httpx.Client(timeout=config.settings.http_timeout)

    def get_access_token(self, force_refresh: bool = False) -> str:
        """Get a valid access token, refreshing if needed.

        Args:
            force_refresh: Force a token refresh even if current token is valid.

        Returns:
            A valid access token string.

        Raises:
            UpstreamAuthError: If the token endpoint rejects the request or is unreachable.
        """
        if not force_refresh and self._is_token_valid():
            return self._access_token  # type: ignore[return-value]

        self._refresh_token()
        return self._access_token  # type: ignore[return-value]

    def get_status(self) -> TokenStatus:
        """Get the current token status."""
        if not self._access_token:
            return TokenStatus(has_token=False, is_expired=True)

        now = self._clock()
        is_expired = not self._is_token_valid()
        seconds_remaining = None
        if self._token_expiry and not is_expired:
            seconds_remaining = int((self._token_expiry - now).total_seconds())

        return TokenStatus(
            has_token=True,
            is_expired=is_expired,
            expires_at=self._token_expiry,
            seconds_remaining=seconds_remaining,
        )

    def _is_token_valid(self) -> bool:
        if not self._access_token or not self._token_expiry:
            return False
        return self._clock() < self._token_expiry

    def _refresh_token(self) -> None:
        """Request a new token with the client-credentials grant."""
        environment = self._config.get_environment()
        settings = self._config.settings
        requested_at = self._clock()

        try:
            response = self._http.post(
                environment.token_endpoint,
                data={
                    "grant_type": "client_credentials",
                    "client_id": settings.client_id,
                    "client_secret": settings.client_secret,
                },
                headers={"Content-Type": "application/x-www-form-urlencoded"},
            )
        except httpx.HTTPError as e:
            raise UpstreamAuthError(f"Token request failed: {e}") from e

        if response.status_code != 200:
            error_detail = response.text
            try:
                error_json = response.json()
                error_detail = error_json.get("error_description", response.text)
            except (ValueError, AttributeError):
                pass
            raise UpstreamAuthError(
                f"Token request failed (HTTP {response.status_code}): {error_detail}"
            )

        try:
            token_data = TokenResponse(**response.json())
        except (ValueError, TypeError) as e:
            raise UpstreamAuthError(f"Token request failed: malformed response ({e})") from e

        self._access_token = token_data.access_token
        self._token_expiry = requested_at + timedelta(seconds=token_data.expires_in) - EXPIRY_BUFFER
        logger.info(f"Refreshed provider token, valid until {self._token_expiry.isoformat()}")

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._http.close()
