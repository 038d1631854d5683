"""
Catalog synchronization pipeline for the Movie Leaks addon.

This package turns the r/MovieLeaks listing feed into an ordered Stremio
catalog: feed pagination, title parsing, Cinemeta resolution, optional
score enrichment and reconciliation against the previous snapshot.
"""

__all__ = [
    "catalog",
    "feed_reader",
    "fetch_client",
    "metadata_fetcher",
    "reconciler",
    "resolution",
    "scores",
    "title_parser",
]
