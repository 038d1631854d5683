"""Process-wide holder for the served catalog snapshot and refresh status."""
from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
from threading import Lock

from ...catalog_sync.catalog import RefreshState, RefreshStatus, Snapshot


class CatalogStore:
    """Thread-safe reference holder for the current snapshot.

    Readers take a reference to the snapshot and keep using it; ``publish``
    swaps the whole reference, so a reader sees either the old or the new
    generation and never a mix of both.
    """

    def __init__(self) -> None:
        self._lock = Lock()
        self._snapshot = Snapshot()
        self._status = RefreshStatus(updated_at=datetime.now(timezone.utc))

    def current(self) -> Snapshot:
        """Return the snapshot currently being served."""

        return self._snapshot

    def publish(self, snapshot: Snapshot) -> None:
        """Replace the served snapshot with a newer generation."""

        with self._lock:
            if snapshot.generation <= self._snapshot.generation:
                raise ValueError(
                    f"Snapshot generation {snapshot.generation} is not newer than "
                    f"{self._snapshot.generation}"
                )
            self._snapshot = snapshot
            self._status = replace(self._status, last_success_at=snapshot.published_at)

    def status(self) -> RefreshStatus:
        """Return the latest refresh status."""

        return self._status

    def set_status(self, message: str, state: RefreshState = "running", *, error: str | None = None) -> RefreshStatus:
        """Record refresh progress; errors are kept until the next success."""

        with self._lock:
            now = datetime.now(timezone.utc)
            last_error = error if state == "error" else (None if state == "ready" else self._status.last_error)
            self._status = replace(
                self._status,
                message=message,
                state=state,
                updated_at=now,
                last_error=last_error,
            )
            return self._status
