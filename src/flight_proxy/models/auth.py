"""Auth-related data models."""

from __future__ import annotations

from datetime import datetime
from pydantic import BaseModel


class TokenResponse(BaseModel):
    """Response from the provider's OAuth2 token endpoint."""
    access_token: str
    token_type: str = "Bearer"
    expires_in: int = 1799


class TokenStatus(BaseModel):
    """Current state of the cached access token."""
    has_token: bool
    is_expired: bool
    expires_at: datetime | None = None
    seconds_remaining: int | None = None
