"""
Process entry point.

Usage:
    python -m todo_api

Reads settings from the environment (see todo_api.settings), builds the
application once and serves it with uvicorn until interrupted.
"""
from __future__ import annotations

import logging

import uvicorn

from .main import create_app
from .settings import get_settings

logger = logging.getLogger(__name__)


# PUBLIC_INTERFACE
def main() -> None:
    """Configure logging, build the app and run uvicorn on server_host:server_port."""
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = create_app(settings)
    logger.info("Starting Todo API on %s:%d", settings.server_host, settings.server_port)
    uvicorn.run(app, host=settings.server_host, port=settings.server_port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
