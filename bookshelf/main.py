"""Main FastAPI application."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from bookshelf.api.books import router as books_router
from bookshelf.core.config import Settings, get_settings
from bookshelf.core.logging_config import setup_logging
from bookshelf.core.tracing import setup_tracing, shutdown_tracing
from bookshelf.services.book_repository import BookRepository

logger = logging.getLogger(__name__)

MSG_INVALID_PAYLOAD = "Payload tidak valid"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    logger.info(f"Starting {app.title}")
    yield
    # Shutdown
    shutdown_tracing()


def fail(status_code: int, message: str, headers: dict[str, str] | None = None) -> JSONResponse:
    """Build a failure envelope."""
    return JSONResponse(
        status_code=status_code,
        content={"status": "fail", "message": message},
        headers=headers,
    )


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render HTTP errors, including unknown routes, as failure envelopes."""
    return fail(exc.status_code, str(exc.detail), headers=exc.headers)


async def invalid_request_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Answer malformed requests with a failure envelope instead of a 422 body."""
    logger.debug(f"Invalid request to {request.url.path}: {exc.errors()}")
    return fail(status.HTTP_400_BAD_REQUEST, MSG_INVALID_PAYLOAD)


def create_app(
    settings: Settings | None = None,
    repository: BookRepository | None = None,
) -> FastAPI:
    """Build the application and the book repository it owns.

    Args:
        settings: Settings to use. Defaults to the cached environment settings.
        repository: Repository to serve. A new, empty one is created if omitted.
    """
    if settings is None:
        settings = get_settings()

    setup_logging(settings.log_level)

    app = FastAPI(
        title=settings.app_name,
        description="In-memory bookshelf with create, list, get, update and delete for books",
        version="0.1.0",
        lifespan=lifespan,
    )

    if repository is None:
        repository = BookRepository(id_length=settings.book_id_length)
    app.state.book_repository = repository

    # Must be done before adding routes
    setup_tracing(app, settings)

    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, invalid_request_handler)
    app.include_router(books_router)

    return app


app = create_app()


def run() -> None:
    """Serve the application with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "bookshelf.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.is_development,
    )


if __name__ == "__main__":
    run()
