"""Entry point for the MovieMaster API.

Launches the FastAPI application with uvicorn.  Configuration such as
``MONGO_URI``, ``APP_ENV``, the Firebase credentials and ``PORT`` is
read from the environment; see ``movie_master_api/app/core/config.py``
for the full list of supported variables.

Usage:
    python run.py
"""
import asyncio
import logging

from uvicorn import Config, Server

from movie_master_api.app.core.config import settings
from movie_master_api.app.main import app


async def main() -> None:
    """Serve the API until interrupted.

    Host and port come from the ``HOST`` and ``PORT`` environment
    variables.  Defaults are ``0.0.0.0`` and ``5000``.
    """
    config = Config(app=app, host=settings.host, port=settings.port, reload=False, log_level=settings.log_level.lower())
    server = Server(config)
    logging.getLogger(__name__).info("Server: http://localhost:%s", settings.port)
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        pass
