"""Command line interface for the Movie Leaks addon."""
from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Optional

import typer

from ..addon_api.settings import AddonSettings
from ..addon_api.state import build_refresh_service
from ..addon_api.stores.catalog_store import CatalogStore
from ..catalog_sync.catalog import Snapshot
from ..catalog_sync.fetch_client import FetchClient
from ..catalog_sync.title_parser import parse_title
from .client import create_client


DEFAULT_API_BASE = "http://localhost:7000"

app = typer.Typer(help="Inspect and drive the Movie Leaks addon.")


def _api_base_option() -> typer.Option:
    return typer.Option(
        DEFAULT_API_BASE,
        "--api-base",
        help="Base URL of the running addon.",
        show_default=True,
        envvar="MOVIELEAKS_API_BASE",
    )


def _echo_json(payload: Any) -> None:
    typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))


@app.command()
def health(api_base: str = _api_base_option()) -> None:
    """Call the /health endpoint and pretty-print the response."""

    with create_client(api_base) as client:
        response = client.get("/health")
        response.raise_for_status()
        _echo_json(response.json())


@app.command()
def catalog(
    skip: int = typer.Option(0, min=0, help="Offset into the catalog.", show_default=True),
    catalog_id: str = typer.Option("movieleaks_imdb", help="Catalog identifier.", show_default=True),
    api_base: str = _api_base_option(),
) -> None:
    """List one page of the served catalog."""

    path = f"/catalog/movie/{catalog_id}.json"
    if skip:
        path = f"/catalog/movie/{catalog_id}/skip={skip}.json"

    with create_client(api_base) as client:
        response = client.get(path)
        response.raise_for_status()
        metas = response.json().get("metas", [])

    if not metas:
        typer.echo("No catalog items found.")
        return
    for meta in metas:
        typer.echo(f"{meta.get('id')}\t{meta.get('releaseInfo', '')}\t{meta.get('name')}")


@app.command()
def meta(item_id: str = typer.Argument(..., help="Catalog item id."), api_base: str = _api_base_option()) -> None:
    """Show a single catalog item."""

    with create_client(api_base) as client:
        response = client.get(f"/meta/movie/{item_id}.json")
        if response.status_code == 404:
            typer.echo(f"Item {item_id} is not in the catalog.", err=True)
            raise typer.Exit(code=1)
        response.raise_for_status()
        _echo_json(response.json())


@app.command()
def refresh(api_base: str = _api_base_option()) -> None:
    """Ask the addon to start a refresh cycle."""

    with create_client(api_base) as client:
        response = client.post("/refresh")
        if response.status_code == 409:
            typer.echo(response.json().get("detail", "Refresh already running"), err=True)
            raise typer.Exit(code=1)
        response.raise_for_status()
        _echo_json(response.json())


@app.command()
def parse(
    title: str = typer.Argument(..., help="Raw post title."),
    strict: bool = typer.Option(False, "--strict/--permissive", help="Reject titles without a year."),
) -> None:
    """Run the title parser locally."""

    candidate = parse_title(title, strict=strict)
    if candidate is None:
        typer.echo("No title/year candidate found.", err=True)
        raise typer.Exit(code=1)
    _echo_json({"title": candidate.title, "year": candidate.year})


@app.command()
def sync(
    output: Optional[Path] = typer.Option(None, help="Write the catalog JSON here instead of stdout."),
    verbose: bool = typer.Option(False, "--verbose", help="Log pipeline progress."),
) -> None:
    """Run one refresh cycle in-process and print the resulting catalog."""

    settings = AddonSettings()
    logging.basicConfig(level=logging.INFO if verbose else logging.WARNING)
    snapshot, status = asyncio.run(_run_once(settings))
    if snapshot is None:
        typer.echo(status, err=True)
        raise typer.Exit(code=1)

    output_json = json.dumps([item.to_meta() for item in snapshot], indent=2, ensure_ascii=False)
    if output:
        output.write_text(output_json + "\n", encoding="utf-8")
        typer.echo(f"Wrote {len(snapshot)} items to {output}")
    else:
        typer.echo(output_json)


async def _run_once(settings: AddonSettings) -> tuple[Snapshot | None, str]:
    store = CatalogStore()
    async with FetchClient(
        user_agent=settings.user_agent,
        timeout=settings.request_timeout_seconds,
        delay=settings.request_delay_seconds,
    ) as client:
        refresher = build_refresh_service(settings, store, client)
        snapshot = await refresher.run_cycle()
    return snapshot, store.status().message
