"""Console entry point for the Movie Leaks operator CLI."""
from __future__ import annotations

from .app import app


def main() -> None:
    """Run the movieleaks-cli Typer application."""

    app()


if __name__ == "__main__":
    main()
