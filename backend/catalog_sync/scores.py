"""
Critic score providers used to annotate resolved catalog items.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, Optional

from .fetch_client import FetchClient

logger = logging.getLogger(__name__)

_PERCENT_RE = re.compile(r"(\d{1,3})\s*%")


@dataclass(frozen=True, slots=True)
class ScoreResult:
    value: int
    source: str
    label: str

    @property
    def badge(self) -> str:
        return f"{self.label} {self.value}%"


def _extract_year(date_str: Optional[str]) -> int:
    if not date_str:
        return 0
    try:
        return int(str(date_str).split("-")[0])
    except ValueError:
        return 0


class OmdbScoreProvider:
    """Primary provider: Rotten Tomatoes rating from OMDb, keyed by IMDb id."""

    OMDB_ENDPOINT = "https://www.omdbapi.com/"

    def __init__(self, client: FetchClient, api_key: Optional[str], *, endpoint: Optional[str] = None) -> None:
        self._client = client
        self.api_key = api_key
        self.enabled = bool(api_key)
        self.endpoint = endpoint or self.OMDB_ENDPOINT

    async def lookup(self, imdb_id: str) -> Optional[ScoreResult]:
        if not self.enabled or not imdb_id.startswith("tt"):
            return None

        result = await self._client.get_json(self.endpoint, params={"i": imdb_id, "apikey": self.api_key})
        if not result.ok or not isinstance(result.data, dict):
            return None
        if str(result.data.get("Response", "True")).lower() == "false":
            return None

        for rating in result.data.get("Ratings") or []:
            if not isinstance(rating, dict):
                continue
            if str(rating.get("Source", "")).strip().lower() != "rotten tomatoes":
                continue
            match = _PERCENT_RE.search(str(rating.get("Value", "")))
            if match:
                return ScoreResult(value=int(match.group(1)), source="Rotten Tomatoes", label="RT")
        return None


class TmdbScoreProvider:
    """Secondary provider: TMDB audience score found by title search."""

    TMDB_ENDPOINT = "https://api.themoviedb.org/3"

    def __init__(
        self,
        client: FetchClient,
        api_key: Optional[str],
        *,
        endpoint: Optional[str] = None,
        year_tolerance: int = 1,
    ) -> None:
        self._client = client
        self.api_key = api_key
        self.enabled = bool(api_key)
        self.endpoint = (endpoint or self.TMDB_ENDPOINT).rstrip("/")
        self.year_tolerance = year_tolerance

    async def lookup(self, title: str, year: Optional[str]) -> Optional[ScoreResult]:
        if not self.enabled or not title:
            return None

        params = {
            "api_key": self.api_key,
            "query": title,
            "include_adult": "false",
        }
        result = await self._client.get_json(f"{self.endpoint}/search/movie", params=params)
        if not result.ok or not isinstance(result.data, dict):
            return None

        target = _extract_year(year)
        for candidate in result.data.get("results") or []:
            if not self._year_matches(candidate, target):
                continue
            score = self._score_of(candidate)
            if score is not None:
                return ScoreResult(value=score, source="TMDB", label="TMDB")
        return None

    def _year_matches(self, candidate: Dict[str, Any], target: int) -> bool:
        if not isinstance(candidate, dict):
            return False
        if not target:
            return True
        found = _extract_year(candidate.get("release_date"))
        return bool(found) and abs(found - target) <= self.year_tolerance

    @staticmethod
    def _score_of(candidate: Dict[str, Any]) -> Optional[int]:
        try:
            votes = int(candidate.get("vote_count") or 0)
            average = float(candidate.get("vote_average") or 0)
        except (TypeError, ValueError):
            return None
        if votes <= 0 or average <= 0:
            return None
        return round(average * 10)
