# moviedeck/core/clients.py
from typing import Optional

from httpx import AsyncBaseTransport, AsyncClient, Limits, Timeout
from aiolimiter import AsyncLimiter

from moviedeck.core.config import Settings


def create_tmdb_client(
    settings: Settings,
    transport: Optional[AsyncBaseTransport] = None,
) -> AsyncClient:
    """
    Returns an httpx.AsyncClient bound to the TMDb base URL with the bearer
    token baked into every request. No retry transport is installed.

    :param settings: loaded application settings
    :param transport: optional transport override (tests use httpx.MockTransport)
    """
    return AsyncClient(
        base_url=settings.tmdb_base_url,
        headers={
            "Authorization": f"Bearer {settings.tmdb_bearer_token}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        },
        limits=Limits(
            max_connections=20,
            max_keepalive_connections=10
        ),
        timeout=Timeout(settings.tmdb_timeout_seconds),
        transport=transport,
    )


def create_tmdb_limiter(settings: Settings) -> AsyncLimiter:
    # Rate limiter parameterized by settings
    return AsyncLimiter(
        max_rate=settings.tmdb_rate_limit,
        time_period=10
    )
