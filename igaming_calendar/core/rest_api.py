"""
Shared httpx client pool for outbound API calls (the Notion document store).

One ``httpx.AsyncClient`` is created lazily and reused across requests so
connections to the store are kept alive. It is created on startup and closed
on shutdown by the application lifespan.

Failed calls are never retried: a transport error or an error status
surfaces immediately to the caller, which reports it to the client.

Usage:
    client = await HttpxRestClientPool.get_client()
    response = await client.post(url, json=payload)
"""

import asyncio

import httpx
from pydantic import BaseModel, Field

__all__ = [
    "ClientConfig",
    "HttpxRestClientPool",
    "PoolConfig",
    "TimeoutConfig",
]


class TimeoutConfig(BaseModel):
    """HTTP client timeout settings."""

    connect: float = Field(default=5.0, description="Connection timeout (seconds)")
    read: float = Field(default=30.0, description="Read timeout (seconds)")
    write: float = Field(default=30.0, description="Write timeout (seconds)")
    pool: float = Field(default=30.0, description="Pool timeout (seconds)")

    def to_httpx_timeout(self) -> httpx.Timeout:
        """Convert to httpx.Timeout."""
        return httpx.Timeout(**self.model_dump())


class PoolConfig(BaseModel):
    """Connection pool settings."""

    max_connections: int = Field(default=100, description="Max total connections")
    max_keepalive: int = Field(default=20, description="Max idle connections")
    keepalive_expiry: float = Field(default=30.0, description="Idle connection TTL (seconds)")


class ClientConfig(BaseModel):
    """HTTP client configuration."""

    timeout: TimeoutConfig = Field(default_factory=TimeoutConfig)
    pool: PoolConfig = Field(default_factory=PoolConfig)
    http2: bool = Field(default=True, description="Enable HTTP/2")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")
    follow_redirects: bool = Field(default=True, description="Follow redirects")


class HttpxRestClientPool:
    """Singleton HTTP client pool with connection reuse."""

    _client: httpx.AsyncClient | None = None
    _config: ClientConfig = ClientConfig()
    _lock: asyncio.Lock | None = None

    @classmethod
    def _get_lock(cls) -> asyncio.Lock:
        """Get or create lock for current event loop."""
        if cls._lock is None:
            cls._lock = asyncio.Lock()
        return cls._lock

    @classmethod
    async def get_client(cls) -> httpx.AsyncClient:
        """Get shared HTTP client (async-safe)."""
        if cls._client is None:
            async with cls._get_lock():
                if cls._client is None:
                    limits = httpx.Limits(
                        max_connections=cls._config.pool.max_connections,
                        max_keepalive_connections=cls._config.pool.max_keepalive,
                        keepalive_expiry=cls._config.pool.keepalive_expiry,
                    )

                    # retries=0: no retry policy anywhere in the service
                    transport = httpx.AsyncHTTPTransport(
                        retries=0,
                        http2=cls._config.http2,
                        limits=limits,
                        verify=cls._config.verify_ssl,
                    )

                    cls._client = httpx.AsyncClient(
                        transport=transport,
                        timeout=cls._config.timeout.to_httpx_timeout(),
                        follow_redirects=cls._config.follow_redirects,
                    )
        return cls._client

    @classmethod
    async def dispose(cls) -> None:
        """Close client and release resources."""
        if cls._client is not None:
            await cls._client.aclose()
            cls._client = None
            cls._lock = None
