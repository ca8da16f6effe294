"""
Main FastAPI application factory.
"""
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import settings
from .dependencies import get_logger, get_mailbox_service, reset_services
from .routes import gmail, health
from .models import ErrorResponse
from ..gmail.errors import (
    GmailError, Unauthenticated, TokenRefreshFailed, TokenExchangeFailed,
    InvalidRequest, SendFailed, FetchFailed
)


def _error_status(exc: GmailError) -> tuple[int, str]:
    """HTTP status and error code for a Gmail pipeline failure."""
    if isinstance(exc, (Unauthenticated, TokenRefreshFailed)):
        return 401, "UNAUTHENTICATED"
    if isinstance(exc, InvalidRequest):
        return 400, "INVALID_REQUEST"
    if isinstance(exc, SendFailed):
        return (exc.status_code if exc.status_code >= 400 else 502), "SEND_FAILED"
    if isinstance(exc, FetchFailed):
        return 502, "FETCH_FAILED"
    if isinstance(exc, TokenExchangeFailed):
        return 502, "TOKEN_EXCHANGE_FAILED"
    return 500, "GMAIL_ERROR"


def _error_details(exc: GmailError) -> dict:
    details = {"error": str(exc)}
    payload = getattr(exc, "payload", None)
    if payload:
        details["provider_response"] = payload
    response_text = getattr(exc, "response_text", None)
    if response_text:
        details["provider_response"] = response_text
    return details


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup and shutdown events."""
    logger = get_logger()
    logger.info("Starting FastAPI application", environment=settings.environment, api_version=settings.api_version)

    try:
        get_mailbox_service()
        logger.info("Services initialized successfully")
    except Exception as e:
        logger.error("Failed to initialize services", error=str(e))
        raise

    yield

    logger.info("Shutting down FastAPI application")
    reset_services()


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance
    """
    app = FastAPI(
        title=settings.app_name,
        description=settings.app_description,
        version=settings.api_version,
        docs_url=f"{settings.api_prefix}/docs",
        redoc_url=f"{settings.api_prefix}/redoc",
        openapi_url=f"{settings.api_prefix}/openapi.json",
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def no_cache_middleware(request: Request, call_next):
        response = await call_next(request)
        response.headers["Cache-Control"] = "no-cache, no-store, must-revalidate"
        return response

    @app.exception_handler(GmailError)
    async def gmail_exception_handler(request: Request, exc: GmailError):
        """Map Gmail pipeline failures to HTTP errors."""
        status_code, error_code = _error_status(exc)
        get_logger().warning("Gmail request failed", path=request.url.path, status=status_code, error=str(exc))
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(
                success=False,
                message=str(exc),
                error_code=error_code,
                details=_error_details(exc)
            ).model_dump(mode="json")
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Global exception handler for unhandled errors."""
        get_logger().error("Unhandled exception", error=str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(
                success=False,
                message="Internal server error",
                error_code="INTERNAL_ERROR",
                details={"error": str(exc)}
            ).model_dump(mode="json")
        )

    app.include_router(
        gmail.router,
        prefix=f"{settings.api_prefix}/v1"
    )

    app.include_router(
        health.router,
        prefix=f"{settings.api_prefix}/v1"
    )

    @app.get("/")
    async def root():
        """Root endpoint with API information."""
        return {
            "message": "Rental Mail API is running",
            "version": settings.api_version,
            "environment": settings.environment,
            "docs": f"{settings.api_prefix}/docs"
        }

    return app
