"""Entry point for running the Mood Journal API.

Host and port are read from the ``API_HOST`` and ``API_PORT``
environment variables (see ``mood_journal_api.app.core.config``).

Usage:
    python run.py
"""
import asyncio
import logging

from uvicorn import Config, Server

from mood_journal_api.app.core.config import settings
from mood_journal_api.app.main import app


async def run_api() -> None:
    """Serve the API with Uvicorn."""
    config = Config(
        app=app,
        host=settings.api_host,
        port=settings.api_port,
        reload=False,
        log_level=settings.log_level.lower(),
    )
    server = Server(config)
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(run_api())
    except (KeyboardInterrupt, SystemExit):
        logging.getLogger(__name__).info("API stopped")
