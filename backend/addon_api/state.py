"""Shared state container for the addon API."""
from __future__ import annotations

from dataclasses import dataclass

import httpx

from ..catalog_sync.feed_reader import FeedReader
from ..catalog_sync.fetch_client import FetchClient
from ..catalog_sync.metadata_fetcher import MetadataFetcher
from ..catalog_sync.resolution import ResolutionChain
from ..catalog_sync.scores import OmdbScoreProvider, TmdbScoreProvider
from .services.catalog_adapter import CatalogAdapter
from .services.refresher import RefreshService
from .settings import AddonSettings
from .stores.catalog_store import CatalogStore


def build_refresh_service(
    settings: AddonSettings,
    store: CatalogStore,
    client: FetchClient,
) -> RefreshService:
    """Wire the feed reader, resolution chain and store into a refresher."""

    reader = FeedReader(
        client,
        feed_url=settings.feed_url,
        page_size=settings.feed_page_size,
        max_pages=settings.feed_max_pages,
        max_items=settings.feed_max_items,
    )
    metadata = MetadataFetcher(
        client,
        endpoint=settings.cinemeta_url,
        poster_strategy=settings.poster_strategy,
        poster_template=settings.poster_template,
    )
    chain = ResolutionChain(
        client,
        metadata,
        primary=OmdbScoreProvider(client, settings.omdb_api_key, endpoint=settings.omdb_url),
        secondary=TmdbScoreProvider(
            client,
            settings.tmdb_api_key,
            endpoint=settings.tmdb_url,
            year_tolerance=settings.score_year_tolerance,
        ),
        enrich_scores=settings.score_enrichment,
    )
    return RefreshService(
        store,
        reader,
        chain,
        interval=settings.refresh_interval_seconds,
        max_age_hours=settings.max_age_hours,
        strict_titles=settings.strict_titles,
    )


@dataclass(slots=True)
class AppState:
    """Encapsulates the catalog state shared between the timer and the routers."""

    settings: AddonSettings
    store: CatalogStore
    fetch_client: FetchClient
    refresher: RefreshService
    adapter: CatalogAdapter

    def __init__(
        self,
        settings: AddonSettings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.settings = settings
        self.store = CatalogStore()
        self.fetch_client = FetchClient(
            user_agent=settings.user_agent,
            timeout=settings.request_timeout_seconds,
            delay=settings.request_delay_seconds,
            transport=transport,
        )
        self.refresher = build_refresh_service(settings, self.store, self.fetch_client)
        self.adapter = CatalogAdapter(
            self.store,
            catalog_id=settings.catalog_id,
            page_size=settings.catalog_page_size,
            display_name=settings.catalog_name,
        )
