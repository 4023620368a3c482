"""
FastAPI application entry point.

Sets up the application with:
- Lifespan management (startup/shutdown)
- Route registration
- Middleware configuration
- Error handling
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.routes import (
    admin_router,
    applications_router,
    auth_router,
    contact_router,
    events_router,
    health_router,
    members_router,
    news_router,
)
from api.schemas.common import REQUIRED_MESSAGE
from core.config import Settings, settings as default_settings
from core.exceptions import PortalError
from core.logging import bind_request_context, clear_request_context, configure_logging, get_logger
from core.storage import create_storage_context
from services.credentials import CredentialService
from services.scheduler import BootstrapScheduler


logger = get_logger(__name__)

VALUE_ERROR_PREFIX = "Value error, "


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    Startup: pick the storage backend (MongoDB or in-memory fallback) once,
    then schedule the default admin bootstrap.
    Shutdown: stop the scheduler and close storage connections.
    """
    settings: Settings = app.state.settings

    configure_logging(settings)
    settings.validate_runtime()

    logger.info(
        "Starting KARE ACM SIGBED API...",
        storage_backend=settings.storage_backend,
        environment=settings.environment,
    )

    storage = await create_storage_context(settings)
    credentials = CredentialService(storage.users, settings)
    app.state.storage = storage
    app.state.credentials = credentials

    scheduler = BootstrapScheduler(credentials)
    await scheduler.start()
    app.state.scheduler = scheduler

    logger.info(
        "KARE ACM SIGBED API started",
        host=settings.server_host,
        port=settings.server_port,
        storage_mode=storage.mode.value,
    )

    yield

    # =========================================
    # Shutdown
    # =========================================
    logger.info("Shutting down KARE ACM SIGBED API...")

    await scheduler.shutdown()
    await storage.close()

    logger.info("KARE ACM SIGBED API stopped")


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors or any(error.get("type") == "missing" for error in errors):
        return REQUIRED_MESSAGE

    message = str(errors[0].get("msg") or REQUIRED_MESSAGE)
    if message.startswith(VALUE_ERROR_PREFIX):
        message = message[len(VALUE_ERROR_PREFIX):]
    return message


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Application factory.

    Creates and configures the FastAPI application. Tests pass their own
    settings; the module-level app uses the environment.
    """
    settings = settings or default_settings

    app = FastAPI(
        title="KARE ACM SIGBED API",
        description=(
            "Content and recruitment backend for the KARE ACM SIGBED student chapter.\n\n"
            "Serves events, news, members, contact messages and membership applications."
        ),
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.settings = settings

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def request_logging(request: Request, call_next):
        request_id = bind_request_context(request.method, request.url.path)
        try:
            response = await call_next(request)
            response.headers["X-Request-ID"] = request_id
            logger.info("Request handled", status_code=response.status_code)
            return response
        finally:
            clear_request_context()

    # Register routes
    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(applications_router)
    app.include_router(events_router)
    app.include_router(news_router)
    app.include_router(members_router)
    app.include_router(contact_router)
    app.include_router(admin_router)

    @app.exception_handler(PortalError)
    async def portal_error_handler(request: Request, exc: PortalError):
        if exc.status_code >= 500:
            logger.error("Request failed", error=exc.message, status_code=exc.status_code)
        else:
            logger.info("Request rejected", error=exc.message, status_code=exc.status_code)
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        message = "Route not found" if exc.status_code == 404 else str(exc.detail)
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "message": message},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        message = _validation_message(exc)
        logger.info("Validation failed", error=message)
        return JSONResponse(
            status_code=400,
            content={"success": False, "message": message},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(
            "Unhandled exception",
            path=request.url.path,
            method=request.method,
            error=str(exc),
            exc_info=True,
        )
        content = {"success": False, "message": "Something went wrong!"}
        if settings.expose_errors:
            content["error"] = str(exc)
        return JSONResponse(status_code=500, content=content)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "api.server:app",
        host=default_settings.server_host,
        port=default_settings.server_port,
        reload=default_settings.debug,
    )
