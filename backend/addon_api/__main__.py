"""CLI entry point for launching the addon with Uvicorn."""
import logging

import uvicorn

from .app import create_app
from .settings import AddonSettings


def main() -> None:
    """Start the addon HTTP server."""
    settings = AddonSettings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
