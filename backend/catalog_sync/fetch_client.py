"""
Rate-limited HTTP helper shared by every upstream lookup in the pipeline.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

import httpx

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "StremioAddon/3.0"


@dataclass(frozen=True, slots=True)
class FetchResult:
    """Outcome of a single upstream call: a decoded JSON body or an error."""

    data: Any = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class FetchClient:
    """Async JSON client that converts every transport failure into a result.

    Callers iterate over upstream items and call :meth:`pause` between
    requests to stay below the informal rate limits of the public APIs.
    """

    def __init__(
        self,
        *,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: float = 15.0,
        delay: float = 0.2,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.delay = delay
        self._client = httpx.AsyncClient(
            headers={"User-Agent": user_agent, "Accept": "application/json"},
            timeout=timeout,
            follow_redirects=True,
            transport=transport,
        )

    async def get_json(self, url: str, params: Mapping[str, Any] | None = None) -> FetchResult:
        """GET ``url`` and decode the JSON body, never raising."""

        try:
            response = await self._client.get(url, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.warning("Upstream %s responded with HTTP %s", url, exc.response.status_code)
            return FetchResult(error=f"HTTP {exc.response.status_code}")
        except httpx.HTTPError as exc:
            logger.warning("Request to %s failed: %s", url, exc)
            return FetchResult(error=f"{type(exc).__name__}: {exc}")

        try:
            return FetchResult(data=response.json())
        except ValueError:
            logger.warning("Upstream %s returned invalid JSON", url)
            return FetchResult(error="invalid JSON")

    async def pause(self) -> None:
        if self.delay > 0:
            await asyncio.sleep(self.delay)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "FetchClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
