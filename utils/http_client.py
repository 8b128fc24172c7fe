"""
HTTP client utilities with connection pooling.
Provides reusable httpx clients for upstream provider calls and usage logging.
"""
import httpx
from config import Config


class HTTPClientManager:
    """Manages shared httpx clients with connection pooling."""

    _provider_client: httpx.AsyncClient | None = None
    _logging_client: httpx.AsyncClient | None = None

    @classmethod
    def get_provider_client(cls) -> httpx.AsyncClient:
        """
        Get or create the shared client for LLM provider calls.

        Per-request timeouts are passed on each call; the client default
        matches the provider timeout.

        Returns:
            Configured httpx.AsyncClient for provider operations
        """
        if cls._provider_client is None:
            limits = httpx.Limits(
                max_connections=50,
                max_keepalive_connections=10,
                keepalive_expiry=60.0
            )

            cls._provider_client = httpx.AsyncClient(
                timeout=Config.PROVIDER_TIMEOUT,
                limits=limits,
                http2=True
            )

        return cls._provider_client

    @classmethod
    def get_logging_client(cls) -> httpx.AsyncClient:
        """
        Get or create the shared client for the usage statistics sink.

        Returns:
            Configured httpx.AsyncClient with a short timeout
        """
        if cls._logging_client is None:
            limits = httpx.Limits(
                max_connections=10,
                max_keepalive_connections=2,
                keepalive_expiry=30.0
            )

            cls._logging_client = httpx.AsyncClient(
                timeout=Config.USAGE_LOG_TIMEOUT,
                limits=limits
            )

        return cls._logging_client

    @classmethod
    async def close_all(cls) -> None:
        """
        Close all managed clients and clean up connections.
        """
        if cls._provider_client is not None:
            await cls._provider_client.aclose()
            cls._provider_client = None

        if cls._logging_client is not None:
            await cls._logging_client.aclose()
            cls._logging_client = None
