"""
Extract a (title, year) candidate from free-form release titles.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

# "<title><sep><yyyy><sep>" where sep is a dot, whitespace or a parenthesis.
TITLE_RE = re.compile(r"^(.+?)[.\s(]+(\d{4})[.\s)]+")
_SPACES_RE = re.compile(r"\s+")


@dataclass(frozen=True, slots=True)
class ParsedCandidate:
    title: str
    year: Optional[str] = None


def normalize_title(value: str) -> str:
    """Turn dot separated release names into plain titles."""

    return _SPACES_RE.sub(" ", value.replace(".", " ")).strip()


def parse_title(raw: str, *, strict: bool = False) -> Optional[ParsedCandidate]:
    """Split ``raw`` into a cleaned title and a four digit year.

    When the title does not look like ``Name.2023.1080p`` the strict mode
    returns ``None``; the permissive mode keeps the whole input as the title
    and leaves the year empty so the post can still be listed.
    """

    match = TITLE_RE.match(raw or "")
    if match:
        title = normalize_title(match.group(1))
        if title:
            return ParsedCandidate(title=title, year=match.group(2))
    if strict:
        return None
    return ParsedCandidate(title=raw, year=None)
