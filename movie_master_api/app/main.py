"""
Main entrypoint for the MovieMaster API.

This module assembles the FastAPI application: logging, CORS, the JSON
error handlers, the API router under ``/api`` and the liveness route at
``/``.  ``create_app`` also builds the two process‑wide resources, the
MongoDB ``ConnectionManager`` and the Firebase ``TokenVerifier``, and
stores them on ``app.state`` where the request dependencies find them.
Run it with uvicorn, e.g.::

    uvicorn movie_master_api.app.main:app --reload

In production mode (``APP_ENV=production``) startup connects to MongoDB
eagerly and requires valid Firebase credentials; either failure aborts
startup.  Elsewhere the database is connected on first use and a
missing credential only disables the protected routes.
"""

import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from .api.v1.router import router as v1_router
from .core.config import Settings, settings as default_settings
from .core.db import ConnectionManager
from .core.errors import install_error_handlers
from .core.logging_config import setup_logging
from .core.security import TokenVerifier

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    connection_manager: Optional[ConnectionManager] = None,
    token_verifier: Optional[TokenVerifier] = None,
) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    settings : Optional[Settings]
        Configuration to use.  Defaults to the settings read from the
        environment at import time.
    connection_manager : Optional[ConnectionManager]
        MongoDB connection manager.  Built from ``settings`` if omitted.
    token_verifier : Optional[TokenVerifier]
        ID token verifier.  Built from ``settings`` if omitted.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    settings = settings or default_settings
    setup_logging(settings.log_level, settings.log_file or None)

    app = FastAPI(title=settings.project_name, version=settings.api_version)
    app.state.settings = settings
    app.state.connection_manager = connection_manager or ConnectionManager(
        settings.mongo_uri, settings.mongo_db_name
    )
    app.state.token_verifier = token_verifier or TokenVerifier(settings)

    origins = settings.cors_origins
    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    install_error_handlers(app)
    app.include_router(v1_router, prefix="/api")

    @app.get("/", response_class=PlainTextResponse, include_in_schema=False)
    async def liveness() -> str:
        return "MovieMaster Server Running!"

    @app.on_event("startup")
    async def startup_event() -> None:
        # Raises in production mode when credentials are unusable.
        app.state.token_verifier.initialize()
        if settings.is_production:
            await app.state.connection_manager.get_connection()
        logger.info("%s started (%s mode)", settings.project_name, settings.environment)

    @app.on_event("shutdown")
    async def shutdown_event() -> None:
        app.state.connection_manager.close()

    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
