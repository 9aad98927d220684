# src/huddle/main.py
"""Main entry point for the Huddle application."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from huddle.api.v1 import location_router, notifications_router, posts_router
from huddle.core.errors import (
    PostForbiddenError,
    PostNotFoundError,
    PostValidationError,
    StorageFailure,
)
from huddle.core.logging import setup_logging
from huddle.core.middleware import AnonymousSessionMiddleware
from huddle.core.settings import settings
from huddle.services.geocoding import get_geocoding_client
from huddle.services.notifications import NotificationDispatcher

logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="Anonymous, location-based activity posts",
    version=settings.app_version,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Add GZip middleware for compression
app.add_middleware(GZipMiddleware)

# Every request carries an anonymous session id
app.add_middleware(AnonymousSessionMiddleware)

# Include API routers
app.include_router(posts_router, prefix="/api/v1")
app.include_router(notifications_router, prefix="/api/v1")
app.include_router(location_router, prefix="/api/v1")


def _field_name(loc: tuple[object, ...]) -> str:
    parts = [str(part) for part in loc if part not in ("body", "query", "path")]
    return ".".join(parts) or "request"


@app.exception_handler(RequestValidationError)
async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors: dict[str, str] = {}
    for error in exc.errors():
        errors.setdefault(_field_name(tuple(error.get("loc", ()))), str(error.get("msg", "")))
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Invalid input", "errors": errors},
    )


@app.exception_handler(PostValidationError)
async def post_validation_handler(request: Request, exc: PostValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Invalid input", "errors": exc.field_errors},
    )


@app.exception_handler(PostNotFoundError)
async def post_not_found_handler(request: Request, exc: PostNotFoundError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"detail": "Post not found"},
    )


@app.exception_handler(PostForbiddenError)
async def post_forbidden_handler(request: Request, exc: PostForbiddenError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_403_FORBIDDEN,
        content={"detail": "You can only delete your own posts"},
    )


@app.exception_handler(StorageFailure)
async def storage_failure_handler(request: Request, exc: StorageFailure) -> JSONResponse:
    logger.error("Storage failure on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Something went wrong, please try again"},
    )


@app.on_event("startup")
async def on_startup() -> None:
    setup_logging(settings.log_level)
    dispatcher = NotificationDispatcher()
    await dispatcher.start()
    app.state.notification_dispatcher = dispatcher
    if not settings.push_configured:
        logger.info("VAPID keys not configured; push notifications disabled")


@app.on_event("shutdown")
async def on_shutdown() -> None:
    dispatcher: NotificationDispatcher | None = getattr(
        app.state, "notification_dispatcher", None
    )
    if dispatcher:
        await dispatcher.stop()
    await get_geocoding_client().close()


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "description": "Anonymous, location-based activity posts",
        "docs": "/docs",
        "redoc": "/redoc",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("huddle.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
