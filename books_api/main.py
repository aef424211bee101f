"""
FastAPI main application for the Books API.
"""

from contextlib import asynccontextmanager
from datetime import datetime
from typing import Optional

import structlog
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from books_api.config import APIConfig, config
from books_api.database import BookRepository
from books_api.errors import BookAPIError
from books_api.models import ErrorDetail, ErrorResponse, HealthResponse
from books_api.routes import router as books_router
from utilities.logger import setup_logging

# Setup logging
logger = structlog.get_logger(__name__)


def error_response(message, status_code: int, headers=None) -> JSONResponse:
    """Render an error in the API's error envelope."""
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(
            error=ErrorDetail(message=message, status=status_code)
        ).model_dump(),
        headers=headers,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    app_config: APIConfig = app.state.config
    logger.info("Starting Books API")

    # Initialize database connection
    repository = BookRepository.from_url(
        app_config.database_url, echo=app_config.database_echo
    )
    try:
        if app_config.create_tables_on_startup:
            await repository.create_table()

        health_info = await repository.health_check()
        if health_info["status"] != "healthy":
            raise RuntimeError(health_info.get("error", "database unavailable"))
        logger.info("Database connection established", books_count=health_info["books_count"])

    except Exception as e:
        logger.error("Failed to connect to database", error=str(e))
        await repository.dispose()
        raise

    app.state.repository = repository

    yield

    # Shutdown
    logger.info("Shutting down Books API")
    await repository.dispose()


def create_app(app_config: Optional[APIConfig] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        app_config: Settings to use instead of the environment-derived defaults

    Returns:
        Configured FastAPI application
    """
    app_config = app_config or config

    setup_logging(
        log_level=app_config.log_level,
        log_format=app_config.log_format,
        log_file=app_config.log_file,
        debug=app_config.debug,
    )

    app = FastAPI(
        title=app_config.api_title,
        description=app_config.api_description,
        version=app_config.api_version,
        license_info={
            "name": "MIT",
            "url": "https://opensource.org/licenses/MIT",
        },
        lifespan=lifespan,
    )
    app.state.config = app_config

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_config.cors_origins,
        allow_credentials=app_config.cors_allow_credentials,
        allow_methods=app_config.cors_allow_methods,
        allow_headers=app_config.cors_allow_headers,
    )

    # Exception handlers
    @app.exception_handler(BookAPIError)
    async def book_api_exception_handler(request: Request, exc: BookAPIError):
        """Handle errors raised by routes and the repository."""
        return error_response(exc.message, exc.status_code)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Handle HTTP exceptions."""
        return error_response(exc.detail, exc.status_code, headers=getattr(exc, "headers", None))

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle general exceptions."""
        logger.error("Unhandled exception", error=str(exc), path=request.url.path)
        message = "Internal server error"
        if app_config.debug:
            message = f"{message}: {exc}"
        return error_response(message, status.HTTP_500_INTERNAL_SERVER_ERROR)

    # Health check endpoint
    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check(request: Request):
        """Health check endpoint."""
        repository: BookRepository = getattr(request.app.state, "repository", None)
        db_status = "unavailable"
        if repository is not None:
            health_info = await repository.health_check()
            db_status = health_info.get("status", "unknown")

        return HealthResponse(
            status="healthy" if db_status == "healthy" else "degraded",
            timestamp=datetime.utcnow(),
            version=app_config.api_version,
            database_status=db_status,
        )

    app.include_router(books_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "books_api.main:app",
        host=config.host,
        port=config.port,
        reload=config.debug,
        log_level=config.log_level.lower(),
    )
