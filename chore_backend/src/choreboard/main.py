from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import AsyncIterator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .device import DeviceLoop
from .joystick import JoystickConfig, JoystickMachine
from .logging_setup import setup_logging
from .ports import (
    LoggingDisplay,
    LoggingSignalOutput,
    RestingInput,
    SystemClock,
    TcpConnectivityProbe,
    TimeSource,
)
from .repositories import get_repository
from .routers import status as status_router
from .routers import tasks as tasks_router
from .routers import users as users_router
from .service import ChoreService
from .settings import Settings, get_settings

logger = logging.getLogger(__name__)

openapi_tags = [
    {"name": "health", "description": "Service health and status endpoints."},
    {"name": "tasks", "description": "Recurring chores: listing, completion toggling and editing."},
    {"name": "users", "description": "Household members and their point balances."},
    {"name": "status", "description": "Board-wide status signal."},
]


def _build_device_loop(service: ChoreService, settings: Settings, time_source: TimeSource) -> DeviceLoop:
    return DeviceLoop(
        service=service,
        machine=JoystickMachine(JoystickConfig(display_width=settings.display_width)),
        input_source=RestingInput(),
        display=LoggingDisplay(),
        signal_output=LoggingSignalOutput(),
        time_source=time_source,
        connectivity=TcpConnectivityProbe(settings.connectivity_host, settings.connectivity_port),
        poll_interval_ms=settings.poll_interval_ms,
        sweep_interval_s=settings.sweep_interval_s,
        clock_sync_interval_s=settings.clock_sync_interval_s,
    )


# PUBLIC_INTERFACE
def create_app(
    settings: Optional[Settings] = None,
    service: Optional[ChoreService] = None,
    time_source: Optional[TimeSource] = None,
    configure_logging: bool = False,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Settings to use; loaded from the environment when omitted.
        service: Pre-built ChoreService (tests inject one with a fixed clock).
        time_source: Wall clock shared by the service and the device loop, which
            resyncs it. Defaults to the system clock.
        configure_logging: Install the console/file handlers on startup.
    """
    settings = settings or get_settings()
    time_source = time_source or SystemClock()
    service = service or ChoreService(get_repository(settings), clock=time_source.now)

    @contextlib.asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if configure_logging:
            setup_logging(level=settings.log_level, log_file=settings.log_file)
        device_task = None
        if settings.device_enabled:
            loop = _build_device_loop(service, settings, time_source)
            device_task = asyncio.create_task(loop.run())
        logger.info("Chore board ready (backend=%s)", settings.persistence_backend)
        yield
        if device_task is not None:
            device_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await device_task

    app = FastAPI(
        title="Chore Board",
        description="Recurring household chores with a shared points ledger.",
        version="0.1.0",
        openapi_tags=openapi_tags,
        lifespan=lifespan,
    )
    app.state.service = service
    app.state.settings = settings

    # Configure CORS based on settings (.env -> CORS_ALLOW_ORIGINS), with '*' fallback
    allow_all = (settings.cors_allow_origins == ["*"]) or (len(settings.cors_allow_origins) == 0)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if allow_all else settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    # Global exception handlers for consistent JSON on validation errors
    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        """
        Return a consistent JSON structure for request validation errors.

        Response format:
            {
                "error": "ValidationError",
                "detail": [... pydantic/fastapi error details ...],
                "message": "Request validation failed"
            }
        """
        return JSONResponse(
            status_code=422,
            content={
                "error": "ValidationError",
                "message": "Request validation failed",
                "detail": exc.errors(),
            },
        )

    # PUBLIC_INTERFACE
    @app.get("/", summary="Health Check", tags=["health"])
    def health_check():
        """
        Health check endpoint.

        Returns:
            A JSON object indicating service health.
        """
        return {"message": "Healthy", "backend": settings.persistence_backend}

    app.include_router(tasks_router.router)
    app.include_router(users_router.router)
    app.include_router(status_router.router)
    return app


app = create_app(configure_logging=True)
