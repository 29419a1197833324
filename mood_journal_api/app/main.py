"""
Main entrypoint for the Mood Journal API.

This module assembles the FastAPI application, sets up logging,
registers the error handlers and includes the versioned routers.  The
``create_app`` function builds and configures the app, which is then
instantiated at module import time as ``app``, e.g.::

    uvicorn mood_journal_api.app.main:app --reload
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .api.v1.router import router as v1_router
from .core.config import settings
from .core.db import init_db
from .core.errors import ServiceError, ValidationFailed
from .core.logging_config import setup_logging
from .schemas.common import format_validation_errors


logger = logging.getLogger(__name__)


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    """Render a ``ServiceError`` as ``{"success": false, "error": {...}}``."""
    logger.info("%s %s rejected: %s %s", request.method, request.url.path, exc.code, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Answer malformed path or query parameters like any other validation failure."""
    return await service_error_handler(request, ValidationFailed(format_validation_errors(exc.errors())))


def create_app(initialise_database: bool = True) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    initialise_database : bool
        Create the schema on startup.  Tests that override ``get_db``
        with their own connection pass ``False``.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    setup_logging(settings.log_level, settings.log_file or None)

    app = FastAPI(title=settings.project_name, version=settings.api_version, debug=settings.debug)

    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    app.include_router(v1_router, prefix="/api/v1")

    if initialise_database:
        @app.on_event("startup")
        async def startup_event() -> None:
            init_db()

    return app


app = create_app()
