"""Entry point for the BoardTime API.

Launches the FastAPI application with uvicorn.  It is intended to be
executed from the project root, for example under Docker or a process
manager where you only specify a single Python file to run.

Configuration (database path, log level, CORS origins, host and port)
is read from environment variables; see ``boardtime_api/app/core/config.py``.

Usage:
    python run.py
"""
import asyncio
import logging

from uvicorn import Config, Server

from boardtime_api.app.core.config import settings
from boardtime_api.app.main import app


async def run_api() -> None:
    """Serve the API on ``settings.api_host:settings.api_port``."""
    config = Config(
        app=app,
        host=settings.api_host,
        port=settings.api_port,
        reload=False,
        log_level=settings.log_level.lower(),
    )
    server = Server(config)
    await server.serve()


def main() -> None:
    try:
        asyncio.run(run_api())
    except (KeyboardInterrupt, SystemExit):
        logging.getLogger(__name__).info("BoardTime API stopped")


if __name__ == "__main__":
    main()
