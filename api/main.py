"""
FastAPI application entry point.

Configures the API with all routes, middleware, and error handling.
"""

import logging
import time
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from planner import __version__
from planner.config import Config, load_config
from planner.errors import MissingFieldsError, RecordNotFound, ValidationError

from .v1.router import router as v1_router
from .deps import build_services

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


def configure_logging(level: str = "INFO"):
    """Configure root logging once for the process."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S"
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """Application lifespan manager."""
    logger.info("Starting Planner API...")
    yield
    logger.info("Shutting down...")


def register_exception_handlers(app: FastAPI):
    """Map application errors onto their HTTP shapes."""

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        return JSONResponse(status_code=422, content=exc.to_dict())

    @app.exception_handler(MissingFieldsError)
    async def missing_fields_handler(request: Request, exc: MissingFieldsError):
        logger.warning(exc.message)
        return JSONResponse(status_code=400, content={"error": exc.message, "missing": exc.fields})

    @app.exception_handler(RecordNotFound)
    async def record_not_found_handler(request: Request, exc: RecordNotFound):
        logger.info(str(exc))
        return JSONResponse(status_code=404, content={"error": "Not found"})

    @app.exception_handler(RequestValidationError)
    async def bad_request_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"error": "Bad Request"})

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        # An unsupported method on a known path counts as an unknown route
        if exc.status_code in (404, 405):
            return JSONResponse(status_code=404, content={"message": "This route is not available"})
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None)
        )

    # Global exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error"}
        )


def create_app(config: Optional[Config] = None) -> FastAPI:
    """
    Build the application.

    Args:
        config: Explicit configuration (loads from env if not provided)
    """
    config = config or load_config()

    app = FastAPI(
        title="Planner API",
        description="Per-user events and items behind JWT authentication",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json"
    )
    app.state.services = build_services(config)

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[config.server.client_origin],
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
        allow_headers=["Content-Type", "Authorization"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(f"{request.method} {request.url.path} {response.status_code} {elapsed_ms:.1f}ms")
        return response

    register_exception_handlers(app)

    # Health check
    @app.get("/health", tags=["System"])
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "service": "planner-api"}

    # Root endpoint
    @app.get("/", tags=["System"])
    async def root():
        """API root endpoint."""
        return {
            "name": "Planner API",
            "version": __version__,
            "docs": "/docs"
        }

    app.include_router(v1_router, prefix="/api")

    return app
