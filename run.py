"""Entry point serving the Playlist Share API with uvicorn.

Host and port are read from the environment variables ``APP_HOST`` and
``APP_PORT`` (defaults ``0.0.0.0`` and ``3000``).  All other settings
come from ``playlist_share_api.app.core.config``.

Usage:
    python run.py
"""
import asyncio
import logging
import os

from uvicorn import Config, Server

from playlist_share_api.app.main import app


async def main() -> None:
    host = os.getenv("APP_HOST", "0.0.0.0")
    port = int(os.getenv("APP_PORT", "3000"))
    logging.getLogger(__name__).info("Starting playlist share server on %s:%s", host, port)
    config = Config(app=app, host=host, port=port, reload=False, log_level="info")
    server = Server(config)
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        pass
