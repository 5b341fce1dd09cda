"""Base source adapter — Abstract interface for all search service connectors.

Every search source plugged into the clustering pipeline implements this
interface. The adapter is responsible for:
  1. Executing a query for one pagination window against the service
  2. Returning a normalized ``SearchEngineResponse``
  3. Reporting health status
"""

from __future__ import annotations

import asyncio
import functools
import time
from abc import ABC, abstractmethod
from datetime import UTC, datetime

from pydantic import BaseModel, Field

from searchfeed.models.query import Query
from searchfeed.models.response import SearchEngineResponse


class AdapterHealth(BaseModel):
    """Health status of a source adapter."""

    status: str = Field(description="Health status: healthy, degraded, unhealthy")
    latency_ms: int = Field(default=0, description="Latency of last health check in ms")
    last_check: str | None = Field(default=None, description="ISO timestamp of last health check")
    message: str | None = Field(default=None, description="Additional health message")


class SearchSource(ABC):
    """Abstract base class for search source adapters.

    All adapters must implement:
      - name: Unique adapter name
      - search(): Execute a query for a pagination window

    Adapters hold no per-request state and may be called concurrently;
    each call owns its own connection and response object.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique adapter name (e.g., 'xml')."""

    @abstractmethod
    def search(self, query: Query, start: int, count: int) -> SearchEngineResponse:
        """Execute a search query against the service.

        Args:
            query: The query to run.
            start: 0-based index of the first requested result.
            count: Number of results requested.

        Returns:
            The parsed response.

        Raises:
            SourceError: If the query failed for any reason.
        """

    async def search_async(self, query: Query, start: int, count: int) -> SearchEngineResponse:
        """Run ``search()`` in the default executor for use from asyncio pipelines."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, functools.partial(self.search, query, start, count))

    def health_check(self) -> AdapterHealth:
        """Check the service with a single one-result query."""
        try:
            start = time.monotonic()
            response = self.search(Query(text="test"), 0, 1)
            latency_ms = int((time.monotonic() - start) * 1000)
        except Exception as e:
            return AdapterHealth(status="unhealthy", message=str(e))

        if response.error:
            return AdapterHealth(
                status="degraded",
                latency_ms=latency_ms,
                last_check=datetime.now(UTC).isoformat(),
                message=response.error,
            )
        return AdapterHealth(
            status="healthy",
            latency_ms=latency_ms,
            last_check=datetime.now(UTC).isoformat(),
            message=f"Results available: {response.results_total}",
        )
