"""
Resolution chain: Cinemeta match, optional score enrichment, raw fallback.
"""
from __future__ import annotations

import logging
from typing import Optional

from .catalog import FALLBACK_ID_PREFIX, UNKNOWN_YEAR, CatalogItem
from .feed_reader import RawPost
from .fetch_client import FetchClient
from .metadata_fetcher import MetaMatch, MetadataFetcher
from .scores import OmdbScoreProvider, ScoreResult, TmdbScoreProvider
from .title_parser import ParsedCandidate

logger = logging.getLogger(__name__)


def fallback_id(post_id: str) -> str:
    return f"{FALLBACK_ID_PREFIX}{post_id}"


def _absolute_url(value: Optional[str]) -> Optional[str]:
    if value and value.startswith(("http://", "https://")):
        return value
    return None


class ResolutionChain:
    """Turn one parsed post into exactly one catalog item.

    Every upstream call is best effort: a failed Cinemeta lookup yields a
    fallback item, a failed score lookup only drops the annotation.
    """

    def __init__(
        self,
        client: FetchClient,
        metadata: MetadataFetcher,
        *,
        primary: Optional[OmdbScoreProvider] = None,
        secondary: Optional[TmdbScoreProvider] = None,
        enrich_scores: bool = True,
        source_label: str = "r/MovieLeaks",
    ) -> None:
        self._client = client
        self.metadata = metadata
        self.primary = primary
        self.secondary = secondary
        self.enrich_scores = enrich_scores
        self.source_label = source_label
        self._warm = False

    async def resolve(self, post: RawPost, candidate: ParsedCandidate) -> CatalogItem:
        match: Optional[MetaMatch] = None
        if candidate.year:
            await self._throttle()
            match = await self.metadata.search(candidate.title, candidate.year)

        if match is None:
            logger.info("No match for %r, listing raw post %s", candidate.title, post.post_id)
            return self.build_fallback(post, candidate)

        score = await self.lookup_score(match, candidate) if self.enrich_scores else None
        item = self.build_item(match, candidate, score)
        logger.info("Matched: %s -> %s", candidate.title, item.id)
        logger.debug("Poster: %s", item.poster)
        return item

    async def lookup_score(self, match: MetaMatch, candidate: ParsedCandidate) -> Optional[ScoreResult]:
        if self.primary is not None and self.primary.enabled:
            await self._throttle()
            score = await self.primary.lookup(match.id)
            if score is not None:
                return score

        if self.secondary is not None and self.secondary.enabled:
            await self._throttle()
            year = candidate.year or match.release_info
            score = await self.secondary.lookup(match.name, year)
            if score is not None:
                return score

        logger.debug("No score found for %s", match.id)
        return None

    def build_item(
        self,
        match: MetaMatch,
        candidate: ParsedCandidate,
        score: Optional[ScoreResult] = None,
    ) -> CatalogItem:
        name = match.name
        description = match.description
        if score is not None:
            name = f"[{score.badge}] {name}"
            header = f"{score.source}: {score.value}%"
            description = f"{header}\n\n{description}" if description else header

        return CatalogItem(
            id=match.id,
            name=name,
            poster=self.metadata.poster_for(match),
            description=description,
            release_info=match.release_info or candidate.year or UNKNOWN_YEAR,
            source_title=candidate.title,
        )

    def build_fallback(self, post: RawPost, candidate: ParsedCandidate) -> CatalogItem:
        return CatalogItem(
            id=fallback_id(post.post_id),
            name=candidate.title,
            poster=_absolute_url(post.thumbnail),
            description=f"Unmatched raw listing from {self.source_label}: {post.title}",
            release_info=candidate.year or UNKNOWN_YEAR,
            source_title=candidate.title,
        )

    async def _throttle(self) -> None:
        if self._warm:
            await self._client.pause()
        self._warm = True
