"""
Backward-in-time reader for the Reddit listing feed.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .fetch_client import FetchClient

logger = logging.getLogger(__name__)

DEFAULT_FEED_URL = "https://www.reddit.com/r/movieleaks/new.json"


@dataclass(frozen=True, slots=True)
class RawPost:
    post_id: str
    title: str
    created_utc: float
    thumbnail: Optional[str] = None


@dataclass(slots=True)
class FeedResult:
    """Posts collected by one read, newest first."""

    posts: List[RawPost] = field(default_factory=list)
    pages_fetched: int = 0
    error: Optional[str] = None


def parse_post(payload: Dict[str, Any]) -> Optional[RawPost]:
    data = payload.get("data") if isinstance(payload, dict) else None
    if not isinstance(data, dict):
        return None
    post_id = data.get("id")
    title = data.get("title")
    if not post_id or not isinstance(title, str):
        return None
    try:
        created = float(data.get("created_utc") or 0)
    except (TypeError, ValueError):
        created = 0.0
    thumbnail = data.get("thumbnail")
    return RawPost(
        post_id=str(post_id),
        title=title,
        created_utc=created,
        thumbnail=thumbnail if isinstance(thumbnail, str) and thumbnail else None,
    )


class FeedReader:
    """Walk the listing with the ``after`` cursor until a stop condition hits.

    With a cutoff the read stops at the first post older than the cutoff;
    without one it stops after ``max_items`` posts. ``max_pages`` bounds both.
    """

    def __init__(
        self,
        client: FetchClient,
        *,
        feed_url: str = DEFAULT_FEED_URL,
        page_size: int = 100,
        max_pages: int = 10,
        max_items: int = 40,
    ) -> None:
        self._client = client
        self.feed_url = feed_url
        self.page_size = page_size
        self.max_pages = max_pages
        self.max_items = max_items

    async def read(self, cutoff: Optional[float] = None) -> FeedResult:
        result = FeedResult()
        cursor: Optional[str] = None

        while result.pages_fetched < self.max_pages:
            if result.pages_fetched:
                await self._client.pause()

            params: Dict[str, Any] = {"limit": self.page_size, "raw_json": 1}
            if cursor:
                params["after"] = cursor
            response = await self._client.get_json(self.feed_url, params=params)
            if not response.ok:
                logger.warning(
                    "Feed page %d failed (%s); keeping %d posts",
                    result.pages_fetched + 1,
                    response.error,
                    len(result.posts),
                )
                result.error = response.error
                break
            result.pages_fetched += 1

            listing = response.data.get("data") if isinstance(response.data, dict) else None
            if not isinstance(listing, dict):
                result.error = "malformed listing"
                break
            children = listing.get("children") or []
            if not children:
                break

            stop = False
            for child in children:
                post = parse_post(child)
                if post is None:
                    continue
                if cutoff is not None and post.created_utc < cutoff:
                    stop = True
                    break
                result.posts.append(post)
                if cutoff is None and len(result.posts) >= self.max_items:
                    stop = True
                    break

            cursor = listing.get("after")
            if stop or not cursor:
                break

        logger.info("Read %d posts from %d feed pages", len(result.posts), result.pages_fetched)
        return result
