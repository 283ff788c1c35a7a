"""Configuration management for the flight search proxy.

Loads provider credentials from .env and environment profiles from providers.yaml.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

import yaml
from pydantic import BaseModel, Field
from dotenv import load_dotenv

from flight_proxy.utils.errors import ConfigError

DEFAULT_CORS_ORIGINS = [
    "http://localhost:5173",
    "http://localhost:3000",
    "https://moufatmi.github.io",
    "https://ticket.beausejourvoyage.com",
    "https://www.ticket.beausejourvoyage.com",
]


class ProviderEnvironment(BaseModel):
    """Endpoints for one provider environment (test or production)."""
    api_endpoint: str
    token_endpoint: str


class Settings(BaseModel):
    """Application settings loaded from environment variables."""
    client_id: str = Field(description="Provider OAuth client ID")
    client_secret: str = Field(description="Provider OAuth client secret")
    environment: str = Field(default="test", description="Provider environment profile")
    currency: str = Field(default="EUR", description="Currency requested from the provider")
    max_results: int = Field(default=20, description="Offers fetched per search, before filtering")
    hotel_radius: int = Field(default=20, description="Hotel search radius in KM")
    http_timeout: float = Field(default=30.0, description="Provider request timeout in seconds")
    price_filters_enabled: bool = Field(default=True, description="Apply minPrice/maxPrice filters")
    cors_origins: list[str] = Field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"


class Config(BaseModel):
    """Full application configuration."""
    settings: Settings
    environments: dict[str, ProviderEnvironment]

    def get_environment(self, name: str | None = None) -> ProviderEnvironment:
        """Get a provider environment by name, defaulting to the configured one."""
        name = (name or self.settings.environment).lower()
        if name not in self.environments:
            available = ", ".join(sorted(self.environments.keys()))
            raise ValueError(f"Unknown environment '{name}'. Available: {available}")
        return self.environments[name]

    def require_credentials(self) -> None:
        """Raise ConfigError if either provider secret is missing."""
        missing = []
        if not self.settings.client_id:
            missing.append("AMADEUS_CLIENT_ID")
        if not self.settings.client_secret:
            missing.append("AMADEUS_CLIENT_SECRET")
        if missing:
            raise ConfigError(
                f"Provider credentials are not set: {', '.join(missing)}. Check your .env file."
            )

    @property
    def all_environments(self) -> list[str]:
        return sorted(self.environments.keys())


def _find_project_root() -> Path:
    """Walk up from this file to find the project root (where config/ lives)."""
    current = Path(__file__).resolve().parent
    for parent in [current, *current.parents]:
        if (parent / "config" / "providers.yaml").exists():
            return parent
    return Path.cwd()


def _load_environments(project_root: Path) -> dict[str, ProviderEnvironment]:
    """Load provider environments from providers.yaml."""
    path = project_root / "config" / "providers.yaml"
    if not path.exists():
        raise FileNotFoundError(f"Provider config not found at {path}")

    with open(path) as f:
        data = yaml.safe_load(f)

    return {
        name.lower(): ProviderEnvironment(**env_data)
        for name, env_data in data.get("environments", {}).items()
    }


def _env(*keys: str, default: str = "") -> str:
    """Try multiple env var names, return the first one found."""
    for key in keys:
        val = os.environ.get(key, "")
        if val:
            return val.strip().strip('"')
    return default


def _split_origins(raw: str) -> list[str]:
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def _load_settings() -> Settings:
    """Load settings from environment variables.

    Supports both FLIGHT_PROXY_* and the provider's AMADEUS_* names.
    """
    cors = _env("FLIGHT_PROXY_CORS_ORIGINS")
    return Settings(
        client_id=_env("FLIGHT_PROXY_CLIENT_ID", "AMADEUS_CLIENT_ID"),
        client_secret=_env("FLIGHT_PROXY_CLIENT_SECRET", "AMADEUS_CLIENT_SECRET"),
        environment=_env("FLIGHT_PROXY_ENVIRONMENT", default="test"),
        currency=_env("FLIGHT_PROXY_CURRENCY", default="EUR").upper(),
        max_results=int(_env("FLIGHT_PROXY_MAX_RESULTS", default="20")),
        hotel_radius=int(_env("FLIGHT_PROXY_HOTEL_RADIUS", default="20")),
        http_timeout=float(_env("FLIGHT_PROXY_HTTP_TIMEOUT", default="30")),
        price_filters_enabled=_env("FLIGHT_PROXY_PRICE_FILTERS", default="true").lower() in ("true", "1", "yes"),
        cors_origins=_split_origins(cors) if cors else list(DEFAULT_CORS_ORIGINS),
        host=_env("FLIGHT_PROXY_HOST", default="0.0.0.0"),
        port=int(_env("FLIGHT_PROXY_PORT", "PORT", default="3000")),
        log_level=_env("FLIGHT_PROXY_LOG_LEVEL", default="INFO").upper(),
    )


@lru_cache(maxsize=1)
def get_config() -> Config:
    """Load and cache the full application configuration."""
    project_root = _find_project_root()

    env_path = project_root / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    settings = _load_settings()
    environments = _load_environments(project_root)

    return Config(settings=settings, environments=environments)
