"""Runtime configuration for the Movie Leaks addon."""
from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AddonSettings(BaseSettings):
    """Environment-aware settings for the addon service and its refresh pipeline."""

    host: str = Field("0.0.0.0", description="Interface the HTTP server binds to.")
    port: int = Field(7000, description="Port the HTTP server listens on.")
    log_level: str = Field("INFO", description="Root logging level for the service.")

    addon_id: str = Field("org.reddit.movieleaks.v3", description="Stremio manifest id.")
    addon_version: str = Field("3.0.0", description="Version advertised in the manifest.")
    addon_name: str = Field("Reddit Movie Leaks", description="Display name of the addon.")
    addon_description: str = Field(
        "Latest r/MovieLeaks releases with official Stremio posters.",
        description="Manifest description shown in the addon catalog.",
    )
    catalog_id: str = Field("movieleaks_imdb", description="Identifier of the served catalog.")
    catalog_name: str = Field("Movie Leaks", description="Display name of the served catalog.")
    catalog_page_size: int = Field(100, ge=1, description="Items returned per catalog page.")
    meta_id_prefixes: list[str] = Field(
        default_factory=lambda: ["leaks_"],
        description="Id prefixes for which the addon answers meta requests.",
    )

    feed_url: str = Field(
        "https://www.reddit.com/r/movieleaks/new.json",
        description="Listing endpoint scraped every refresh cycle.",
    )
    feed_page_size: int = Field(100, ge=1, le=100, description="Posts requested per feed page.")
    feed_max_pages: int = Field(10, ge=1, description="Upper bound on feed pages per cycle.")
    feed_max_items: int = Field(40, ge=1, description="Posts kept per cycle when no age cutoff is set.")
    max_age_hours: float | None = Field(
        default=None, description="Only keep posts newer than this many hours."
    )

    cinemeta_url: str = Field(
        "https://v3-cinemeta.strem.io/catalog/movie/top",
        description="Cinemeta catalog endpoint used for title searches.",
    )
    poster_strategy: Literal["metahub", "resolver"] = Field(
        "metahub", description="Build posters from the IMDb id or use Cinemeta's poster."
    )
    poster_template: str = Field(
        "https://images.metahub.space/poster/medium/{id}/img",
        description="Poster URL template formatted with the IMDb id.",
    )
    score_enrichment: bool = Field(default=True, description="Annotate items with critic scores.")
    omdb_api_key: str | None = Field(default=None, description="OMDb key for Rotten Tomatoes scores.")
    omdb_url: str = Field("https://www.omdbapi.com/", description="OMDb API endpoint.")
    tmdb_api_key: str | None = Field(default=None, description="TMDB key for fallback scores.")
    tmdb_url: str = Field("https://api.themoviedb.org/3", description="TMDB API base URL.")
    score_year_tolerance: int = Field(1, ge=0, description="Allowed year drift for TMDB matches.")
    strict_titles: bool = Field(
        default=False, description="Skip posts whose title has no recognisable year."
    )

    user_agent: str = Field("StremioAddon/3.0", description="User-Agent sent upstream.")
    request_timeout_seconds: float = Field(15.0, gt=0, description="Per-request timeout.")
    request_delay_seconds: float = Field(0.2, ge=0, description="Pause between upstream calls.")

    refresh_interval_seconds: float = Field(15 * 60, gt=0, description="Seconds between refresh cycles.")
    refresh_on_startup: bool = Field(default=True, description="Run the first refresh as soon as the app starts.")

    model_config = SettingsConfigDict(
        env_prefix="MOVIELEAKS_",
        env_file=".env",
        env_file_encoding="utf-8",
    )
