"""
Best-effort usage statistics logging.
Records are delivered on detached background tasks with a short deadline so
that logging can never delay or fail a chat response.
"""
import asyncio
from typing import Awaitable, Callable, Set

import httpx

from exceptions import UsageLoggingError
from models.chat_models import OrchestratorConfig, UsageRecord
from utils.http_client import HTTPClientManager
from utils.logger import app_logger


UsageSink = Callable[[UsageRecord], Awaitable[None]]


class HttpUsageSink:
    """Posts usage records to the stats webhook."""

    def __init__(self, url: str):
        self.url = url

    async def __call__(self, record: UsageRecord) -> None:
        client = HTTPClientManager.get_logging_client()
        try:
            response = await client.post(self.url, json=record.to_payload())
        except httpx.HTTPError as e:
            raise UsageLoggingError(f"Stats endpoint unreachable: {e}") from e

        if not response.is_success:
            raise UsageLoggingError(f"Stats endpoint returned {response.status_code}")


class LogUsageSink:
    """Writes usage records to the application log."""

    async def __call__(self, record: UsageRecord) -> None:
        app_logger.info(f"Usage: {record.to_payload()}")


class UsageLogger:
    """Fire-and-forget usage logging on detached tasks."""

    def __init__(self, sink: UsageSink, timeout: float = 5.0):
        self._sink = sink
        self._timeout = timeout
        self._tasks: Set[asyncio.Task] = set()

    @classmethod
    def from_config(cls, config: OrchestratorConfig) -> "UsageLogger":
        """Build a logger posting to the configured stats URL, or logging locally."""
        sink = HttpUsageSink(config.usage_log_url) if config.usage_log_url else LogUsageSink()
        return cls(sink, timeout=config.usage_log_timeout)

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def log_usage(self, record: UsageRecord) -> None:
        """Schedule delivery of a usage record and return immediately."""
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            app_logger.warning("No running event loop, usage record dropped")
            return

        task = loop.create_task(self._deliver(record))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _deliver(self, record: UsageRecord) -> None:
        try:
            await asyncio.wait_for(self._sink(record), timeout=self._timeout)
        except asyncio.TimeoutError:
            app_logger.warning(f"Failed to log usage: timed out after {self._timeout}s")
        except Exception as e:
            # Logging failures must never reach the request path
            app_logger.warning(f"Failed to log usage: {e}")

    async def drain(self) -> None:
        """Wait for in-flight deliveries (used on shutdown)."""
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
