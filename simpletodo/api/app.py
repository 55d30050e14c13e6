"""FastAPI web application for simpletodo."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from simpletodo import __version__, settings
from simpletodo.api.routes import config, misc, prompts, tasks
from simpletodo.errors import SimpleTodoError
from simpletodo.services import ServiceContainer, build_services

logger = logging.getLogger(__name__)


def _validation_details(exc: RequestValidationError):
    details = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        details.append({"field": ".".join(location), "message": error.get("msg", "Invalid value")})
    return details


def create_app(services: Optional[ServiceContainer] = None, start_scheduler: bool = True) -> FastAPI:
    """Build the application around a service container.

    Args:
        services: Pre-built services (tests pass ones bound to a temp data dir)
        start_scheduler: Whether the lifespan starts the prompting scheduler
    """
    services = services or build_services(settings.DATA_DIR)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        prompting_service = app.state.services.prompting_service
        if start_scheduler:
            try:
                prompting_service.start_scheduler()
            except SimpleTodoError as e:
                logger.error(f"Failed to start prompting scheduler: {str(e)}")
        yield
        prompting_service.stop_scheduler()

    app = FastAPI(
        title="simpletodo API",
        description="Personal to-do list with WIP limits, proactive prompts and celebrations",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.services = services

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.CORS_ORIGIN],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(HTTPException)
    async def handle_http_exception(request: Request, exc: HTTPException) -> JSONResponse:
        content = exc.detail if isinstance(exc.detail, dict) else {"error": exc.detail}
        return JSONResponse(status_code=exc.status_code, content=content, headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        details = _validation_details(exc)
        logger.warning(f"Request validation failed: {request.method} {request.url.path}: {details}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Validation failed", "details": details},
        )

    @app.exception_handler(SimpleTodoError)
    async def handle_domain_error(request: Request, exc: SimpleTodoError) -> JSONResponse:
        logger.error(f"Unhandled error on {request.method} {request.url.path}: {type(exc).__name__}: {str(exc)}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error"},
        )

    app.include_router(misc.router)
    app.include_router(tasks.router)
    app.include_router(config.router)
    app.include_router(prompts.router)

    return app


app = create_app()
