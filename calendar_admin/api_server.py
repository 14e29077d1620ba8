"""FastAPI server for the booking calendar.

Features:
- Read API for blocked dates (no auth)
- Admin API to block/unblock dates (X-API-Secret header)
- Real-time snapshots over WebSocket (/ws) and Server-Sent Events
- Global exception handling with {success, message} error bodies
- Structured logging with request IDs

Usage:
    uvicorn calendar_admin.api_server:app --port 5000
"""
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Body, Depends, FastAPI, Query, Request, WebSocket, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, StreamingResponse

from calendar_admin import __version__
from calendar_admin.api.dependencies import (
    get_notification_channel,
    get_registry,
    verify_api_secret,
)
from calendar_admin.api.models import (
    BookedDatesResponse,
    DateRequest,
    ErrorResponse,
    MutationResponse,
)
from calendar_admin.api.streaming import serve_websocket, stream_snapshots
from calendar_admin.auth import InvalidAPISecretError, SecretVerifier
from calendar_admin.config import Settings, load_settings
from calendar_admin.date_validator import InvalidDateError, sanitize_date, validate_date
from calendar_admin.logging_config import RequestIDMiddleware, get_logger, setup_structured_logging
from calendar_admin.notifications import NotificationChannel
from calendar_admin.registry import AlreadyBlockedError, DateRegistry, NotBlockedError
from calendar_admin.store import BlockedDateStore, PersistenceError

logger = get_logger(__name__)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(message=message).model_dump()
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load the registry from storage before serving, dispose on shutdown."""
    settings: Settings = app.state.settings

    logger.info("server_starting", version=__version__)

    store = None
    try:
        store = BlockedDateStore(settings.database_url, settings.database_timeout_seconds)
        registry = DateRegistry(store)
        loaded = await registry.reload()
    except Exception:
        logger.error("database_initialization_failed", exc_info=True)
        if store is not None:
            store.close()
        raise

    verifier = SecretVerifier(settings.api_secret)
    if not verifier.is_configured:
        logger.warning("api_secret_not_configured", detail="all admin requests will be rejected")

    app.state.registry = registry
    app.state.notifications = NotificationChannel()
    app.state.secret_verifier = verifier
    logger.info("registry_loaded", total=loaded)

    yield

    store.close()
    logger.info("server_stopped")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Explicit settings (defaults to environment)

    Returns:
        Configured FastAPI app; storage is opened in the lifespan
    """
    settings = settings or load_settings()
    setup_structured_logging(settings.log_level)

    app = FastAPI(
        title="Booking Calendar API",
        description="Blocked-date registry with real-time updates",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(RequestIDMiddleware)

    _register_exception_handlers(app)
    _register_routes(app)
    return app


def _register_exception_handlers(app: FastAPI):

    @app.exception_handler(InvalidAPISecretError)
    async def invalid_secret_handler(request: Request, exc: InvalidAPISecretError):
        logger.warning("api_secret_rejected", path=request.url.path, method=request.method)
        return _error(status.HTTP_401_UNAUTHORIZED, "Invalid API secret")

    @app.exception_handler(InvalidDateError)
    async def invalid_date_handler(request: Request, exc: InvalidDateError):
        return _error(status.HTTP_400_BAD_REQUEST, str(exc))

    @app.exception_handler(AlreadyBlockedError)
    async def already_blocked_handler(request: Request, exc: AlreadyBlockedError):
        return _error(status.HTTP_400_BAD_REQUEST, str(exc))

    @app.exception_handler(NotBlockedError)
    async def not_blocked_handler(request: Request, exc: NotBlockedError):
        return _error(status.HTTP_400_BAD_REQUEST, str(exc))

    @app.exception_handler(PersistenceError)
    async def persistence_handler(request: Request, exc: PersistenceError):
        logger.error("persistence_failed", path=request.url.path, exc_info=exc)
        return _error(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Could not save the change. Please try again later."
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.warning("request_validation_failed", path=request.url.path, errors=str(exc.errors()))
        return _error(status.HTTP_400_BAD_REQUEST, "Invalid request body")

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error("unexpected_error", path=request.url.path, exc_info=exc)
        return _error(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "An unexpected error occurred. Please try again later."
        )


def _register_routes(app: FastAPI):

    @app.get("/health", tags=["Health"])
    async def health_check():
        """Health check endpoint for load balancers."""
        return {"status": "OK"}

    @app.get("/", tags=["Root"])
    async def root():
        return {
            "message": "Booking Calendar API",
            "version": __version__,
            "docs": "/docs",
            "health": "/health"
        }

    @app.get("/api/booked-dates", tags=["Calendar"], response_model=BookedDatesResponse)
    async def list_booked_dates(registry: DateRegistry = Depends(get_registry)):
        """All blocked dates, oldest first."""
        dates = registry.list()
        return BookedDatesResponse(dates=dates, total=len(dates))

    @app.get("/api/booked-dates/events", tags=["Calendar"])
    async def booked_dates_events(
        request: Request,
        registry: DateRegistry = Depends(get_registry),
        channel: NotificationChannel = Depends(get_notification_channel),
    ):
        """
        Server-Sent Events stream of blocked-date snapshots.

        Response Format:
            event: updateDates
            data: ["15-03-2025", ...]
        """
        return StreamingResponse(
            stream_snapshots(request, registry, channel),
            media_type="text/event-stream",
            headers={
                "Cache-Control": "no-cache",
                "Connection": "keep-alive",
                "X-Accel-Buffering": "no",
            }
        )

    @app.websocket("/ws")
    async def booked_dates_socket(websocket: WebSocket):
        """WebSocket stream of updateDates frames."""
        await serve_websocket(
            websocket,
            websocket.app.state.registry,
            websocket.app.state.notifications,
        )

    @app.post(
        "/api/admin/block-date",
        tags=["Admin"],
        response_model=MutationResponse,
        dependencies=[Depends(verify_api_secret)],
    )
    async def block_date(
        payload: DateRequest,
        registry: DateRegistry = Depends(get_registry),
        channel: NotificationChannel = Depends(get_notification_channel),
    ):
        """
        Block a date.

        Raises:
            401: Missing or wrong X-API-Secret
            400: Invalid date or already blocked
            500: Storage failure
        """
        value = sanitize_date(validate_date(payload.date))

        await registry.add(value)
        dates = registry.list()
        channel.publish(dates)

        logger.info("date_blocked", date=value, total=len(dates))
        return MutationResponse(message=f"Date {value} blocked", dates=dates)

    @app.delete(
        "/api/admin/unblock-date",
        tags=["Admin"],
        response_model=MutationResponse,
        dependencies=[Depends(verify_api_secret)],
    )
    async def unblock_date(
        payload: Optional[DateRequest] = Body(None),
        date: Optional[str] = Query(None, max_length=32, description="Date in DD-MM-YYYY format"),
        registry: DateRegistry = Depends(get_registry),
        channel: NotificationChannel = Depends(get_notification_channel),
    ):
        """
        Unblock a date. The date may come in the JSON body or as ?date=.

        Raises:
            401: Missing or wrong X-API-Secret
            400: Invalid date or not blocked
            500: Storage failure
        """
        raw = payload.date if payload is not None and payload.date is not None else date
        value = sanitize_date(validate_date(raw))

        await registry.remove(value)
        dates = registry.list()
        channel.publish(dates)

        logger.info("date_unblocked", date=value, total=len(dates))
        return MutationResponse(message=f"Date {value} unblocked", dates=dates)


app = create_app()


def main():
    """Run the API server with uvicorn."""
    import uvicorn

    settings = app.state.settings
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
