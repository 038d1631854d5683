"""
Cinemeta metadata resolver and poster helpers.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Literal, Optional
from urllib.parse import quote

from .fetch_client import FetchClient

logger = logging.getLogger(__name__)

PosterStrategy = Literal["metahub", "resolver"]


@dataclass(frozen=True, slots=True)
class MetaMatch:
    id: str
    name: str
    description: Optional[str] = None
    release_info: Optional[str] = None
    poster: Optional[str] = None


class MetadataFetcher:
    CINEMETA_ENDPOINT = "https://v3-cinemeta.strem.io/catalog/movie/top"
    POSTER_TEMPLATE = "https://images.metahub.space/poster/medium/{id}/img"

    def __init__(
        self,
        client: FetchClient,
        *,
        endpoint: Optional[str] = None,
        poster_strategy: PosterStrategy = "metahub",
        poster_template: Optional[str] = None,
    ) -> None:
        self._client = client
        self.endpoint = (endpoint or self.CINEMETA_ENDPOINT).rstrip("/")
        self.poster_strategy = poster_strategy
        self.poster_template = poster_template or self.POSTER_TEMPLATE

    async def search(self, title: str, year: str) -> Optional[MetaMatch]:
        """Return the first Cinemeta match for ``"<title> <year>"``."""

        query = f"{title} {year}"
        url = f"{self.endpoint}/search={quote(query, safe='')}.json"
        result = await self._client.get_json(url)
        if not result.ok:
            logger.warning("Failed to resolve: %s (%s)", title, year)
            return None

        metas = result.data.get("metas") if isinstance(result.data, dict) else None
        if not metas:
            return None
        return self._to_match(metas[0])

    def poster_for(self, match: MetaMatch) -> Optional[str]:
        """Build the poster URL for a resolved match.

        ``metahub`` always derives the URL from the IMDb id so every resolved
        item has artwork; ``resolver`` prefers Cinemeta's own poster.
        """

        if self.poster_strategy == "resolver" and match.poster:
            return match.poster
        return self.poster_template.format(id=match.id)

    def _to_match(self, data: Dict[str, Any]) -> Optional[MetaMatch]:
        if not isinstance(data, dict):
            return None
        meta_id = data.get("id") or data.get("imdb_id")
        name = data.get("name")
        if not meta_id or not name:
            return None
        release = data.get("releaseInfo") or data.get("year")
        return MetaMatch(
            id=str(meta_id),
            name=str(name),
            description=(data.get("description") or "").strip() or None,
            release_info=str(release) if release else None,
            poster=data.get("poster") or None,
        )
