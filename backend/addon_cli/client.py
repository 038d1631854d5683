"""HTTP client helpers for the movieleaks-cli."""
from __future__ import annotations

import httpx

USER_AGENT = "movieleaks-cli/3.0"


def create_client(base_url: str, *, timeout: float = 10.0, transport: httpx.BaseTransport | None = None) -> httpx.Client:
    """Instantiate an HTTPX client pointed at a running Movie Leaks addon.

    Every request asks for JSON and identifies itself as the operator CLI.
    """

    headers = {"Accept": "application/json", "User-Agent": USER_AGENT}
    return httpx.Client(base_url=base_url, timeout=timeout, transport=transport, headers=headers)
