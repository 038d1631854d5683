"""Tests for the Cinemeta resolution and score enrichment chain."""
from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Callable

import httpx
import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[2]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from backend.catalog_sync.catalog import UNKNOWN_YEAR  # noqa: E402
from backend.catalog_sync.feed_reader import RawPost  # noqa: E402
from backend.catalog_sync.fetch_client import FetchClient  # noqa: E402
from backend.catalog_sync.metadata_fetcher import MetaMatch, MetadataFetcher  # noqa: E402
from backend.catalog_sync.resolution import ResolutionChain  # noqa: E402
from backend.catalog_sync.scores import OmdbScoreProvider, TmdbScoreProvider  # noqa: E402
from backend.catalog_sync.title_parser import ParsedCandidate  # noqa: E402

SALTBURN = {
    "id": "tt17351924",
    "name": "Saltburn",
    "description": "A student is drawn into an aristocratic world.",
    "releaseInfo": "2023",
    "poster": "https://cinemeta.example/poster.jpg",
}


class FakeUpstream:
    """Routes requests by host to per-service handlers and logs them."""

    def __init__(self, **routes: Callable[[httpx.Request], httpx.Response]) -> None:
        self.routes = routes
        self.hosts: list[str] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.hosts.append(request.url.host)
        key = {
            "v3-cinemeta.strem.io": "cinemeta",
            "www.omdbapi.com": "omdb",
            "api.themoviedb.org": "tmdb",
        }[request.url.host]
        handler = self.routes.get(key)
        if handler is None:
            return httpx.Response(404)
        return handler(request)


def _json(payload: Any, status: int = 200) -> Callable[[httpx.Request], httpx.Response]:
    return lambda request: httpx.Response(status, json=payload)


def _chain(upstream: FakeUpstream, **kwargs: Any) -> ResolutionChain:
    client = FetchClient(delay=0, transport=httpx.MockTransport(upstream))
    return ResolutionChain(
        client,
        MetadataFetcher(client),
        primary=OmdbScoreProvider(client, kwargs.pop("omdb_key", "omdb-key")),
        secondary=TmdbScoreProvider(client, kwargs.pop("tmdb_key", "tmdb-key")),
        **kwargs,
    )


POST = RawPost(post_id="abc123", title="Saltburn.2023.1080p.WEB", created_utc=1700000000, thumbnail="self")


@pytest.mark.asyncio
async def test_match_with_primary_score_annotates_item() -> None:
    """A Cinemeta match with a Rotten Tomatoes score is annotated and uses the metahub poster."""

    queries: list[str] = []

    def cinemeta(request: httpx.Request) -> httpx.Response:
        queries.append(request.url.path)
        return httpx.Response(200, json={"metas": [SALTBURN, {"id": "tt0", "name": "Other"}]})

    upstream = FakeUpstream(
        cinemeta=cinemeta,
        omdb=_json({"Response": "True", "Ratings": [
            {"Source": "Internet Movie Database", "Value": "7.0/10"},
            {"Source": "Rotten Tomatoes", "Value": "71%"},
        ]}),
    )

    item = await _chain(upstream).resolve(POST, ParsedCandidate("Saltburn", "2023"))

    assert queries == ["/catalog/movie/top/search=Saltburn 2023.json"]
    assert item.id == "tt17351924"
    assert item.name == "[RT 71%] Saltburn"
    assert item.poster == "https://images.metahub.space/poster/medium/tt17351924/img"
    assert item.description.startswith("Rotten Tomatoes: 71%\n\n")
    assert item.release_info == "2023"
    assert item.source_title == "Saltburn"
    assert upstream.hosts == ["v3-cinemeta.strem.io", "www.omdbapi.com"]


@pytest.mark.asyncio
async def test_secondary_provider_tolerates_one_year_variance() -> None:
    """When OMDb has no score, TMDB results within one year of the post are accepted."""

    tmdb_results = {
        "results": [
            {"title": "Saltburn", "release_date": "2020-01-01", "vote_average": 9.0, "vote_count": 10},
            {"title": "Saltburn", "release_date": "2022-11-17", "vote_average": 7.04, "vote_count": 2500},
        ]
    }
    upstream = FakeUpstream(
        cinemeta=_json({"metas": [SALTBURN]}),
        omdb=_json({"Response": "True", "Ratings": []}),
        tmdb=_json(tmdb_results),
    )

    item = await _chain(upstream).resolve(POST, ParsedCandidate("Saltburn", "2023"))

    assert item.name == "[TMDB 70%] Saltburn"
    assert upstream.hosts == ["v3-cinemeta.strem.io", "www.omdbapi.com", "api.themoviedb.org"]


@pytest.mark.asyncio
async def test_score_failures_only_drop_the_annotation() -> None:
    """Failing score providers leave the resolved item unannotated."""

    upstream = FakeUpstream(
        cinemeta=_json({"metas": [SALTBURN]}),
        omdb=_json({"Error": "limit"}, status=401),
        tmdb=_json({}, status=500),
    )

    item = await _chain(upstream).resolve(POST, ParsedCandidate("Saltburn", "2023"))

    assert item.name == "Saltburn"
    assert item.description == SALTBURN["description"]


@pytest.mark.asyncio
async def test_missing_year_skips_resolution_and_falls_back() -> None:
    """Candidates without a year never query Cinemeta and become fallback items."""

    upstream = FakeUpstream()
    post = RawPost(post_id="zz9", title="Some leak without a year", created_utc=1.0,
                   thumbnail="https://b.thumbs.redditmedia.com/x.jpg")

    item = await _chain(upstream).resolve(post, ParsedCandidate(post.title, None))

    assert upstream.hosts == []
    assert item.id == "leaks_zz9"
    assert item.name == "Some leak without a year"
    assert item.poster == "https://b.thumbs.redditmedia.com/x.jpg"
    assert item.release_info == UNKNOWN_YEAR
    assert "Unmatched raw listing" in (item.description or "")


@pytest.mark.asyncio
async def test_resolver_failure_falls_back_to_raw_listing() -> None:
    """A failed or empty Cinemeta search still yields exactly one item."""

    for cinemeta in (_json({}, status=503), _json({"metas": []})):
        upstream = FakeUpstream(cinemeta=cinemeta)
        item = await _chain(upstream).resolve(POST, ParsedCandidate("Saltburn", "2023"))

        assert item.id == "leaks_abc123"
        assert item.name == "Saltburn"
        assert item.poster is None
        assert item.release_info == "2023"


@pytest.mark.asyncio
async def test_enrichment_disabled_or_unconfigured_skips_score_calls() -> None:
    """No score provider is called when enrichment is off or keys are missing."""

    upstream = FakeUpstream(cinemeta=_json({"metas": [SALTBURN]}))
    item = await _chain(upstream, enrich_scores=False).resolve(POST, ParsedCandidate("Saltburn", "2023"))
    assert item.name == "Saltburn"

    upstream = FakeUpstream(cinemeta=_json({"metas": [SALTBURN]}))
    item = await _chain(upstream, omdb_key=None, tmdb_key=None).resolve(POST, ParsedCandidate("Saltburn", "2023"))
    assert item.name == "Saltburn"
    assert upstream.hosts == ["v3-cinemeta.strem.io"]


def test_resolver_poster_strategy_prefers_cinemeta_poster() -> None:
    """The resolver strategy uses Cinemeta's poster and falls back to the template."""

    fetcher = MetadataFetcher(FetchClient(delay=0), poster_strategy="resolver")
    with_poster = MetaMatch(id="tt1", name="A", poster="https://img.example/a.jpg")
    without_poster = MetaMatch(id="tt2", name="B")

    assert fetcher.poster_for(with_poster) == "https://img.example/a.jpg"
    assert fetcher.poster_for(without_poster) == "https://images.metahub.space/poster/medium/tt2/img"
