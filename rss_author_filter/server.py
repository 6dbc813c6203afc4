"""FastAPI application exposing the filtered feed."""

from __future__ import annotations

import logging
from typing import Optional

import requests
from fastapi import FastAPI
from fastapi.responses import Response

from . import __version__
from .config import AppConfig
from .handler import handle

logger = logging.getLogger(__name__)


def create_app(config: AppConfig) -> FastAPI:
    """Create the HTTP app bound to an immutable configuration."""
    app = FastAPI(title="RSS Author Filter", version=__version__)

    # Declared sync so FastAPI runs the blocking fetch in its thread pool.
    # One Session per request, since requests run concurrently on pool threads.
    @app.get("/")
    def filtered_feed(
        whitelist: Optional[str] = None, blacklist: Optional[str] = None
    ) -> Response:
        with requests.Session() as session:
            result = handle(
                {"whitelist": whitelist, "blacklist": blacklist},
                config,
                session=session,
            )
        return Response(
            content=result.body,
            status_code=result.status_code,
            headers=result.headers,
        )

    logger.debug("Created app for feed %s", config.feed_url)
    return app


def serve(config: AppConfig, host: str = "127.0.0.1", port: int = 8000) -> None:
    """Run the app under uvicorn until interrupted."""
    import uvicorn

    logger.info("Serving filtered feed for %s on %s:%d", config.feed_url, host, port)
    uvicorn.run(
        create_app(config),
        host=host,
        port=port,
        log_level=config.log_level.lower(),
    )
