"""
FastAPI application entry point.

Configures the application with:
- Lifespan handler building the in-memory stores and services
- CORS middleware
- Correlation ID middleware
- Domain exception handlers and guard redirects
- Health check
- API routes
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse
from pydantic import BaseModel

from condo_gate.api import api_router
from condo_gate.api.deps import NavigationRedirect
from condo_gate.application.authentication import AuthenticationError
from condo_gate.application.container import ServiceContainer, build_container
from condo_gate.core.config import Settings, get_settings
from condo_gate.core.logging import (
    get_correlation_id,
    get_logger,
    set_correlation_id,
    setup_logging,
)
from condo_gate.domain.exceptions import (
    EntityNotFoundError,
    PreconditionError,
    ValidationError,
)

logger = get_logger(__name__)


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str = "1.0.0"
    events: int


def register_exception_handlers(app: FastAPI) -> None:
    """Map domain errors and guard redirects to HTTP responses."""

    @app.exception_handler(NavigationRedirect)
    async def navigation_redirect_handler(
        request: Request, exc: NavigationRedirect
    ) -> RedirectResponse:
        return RedirectResponse(exc.location, status_code=status.HTTP_303_SEE_OTHER)

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
        logger.warning("validation_failed", invariant=exc.invariant, error=exc.message)
        return JSONResponse(
            status_code=422,
            content={"detail": exc.message, "invariant": exc.invariant},
        )

    @app.exception_handler(PreconditionError)
    async def precondition_error_handler(request: Request, exc: PreconditionError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": str(exc)},
        )

    @app.exception_handler(EntityNotFoundError)
    async def not_found_handler(request: Request, exc: EntityNotFoundError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"detail": str(exc), "entity": exc.entity},
        )

    @app.exception_handler(AuthenticationError)
    async def authentication_error_handler(
        request: Request, exc: AuthenticationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"detail": str(exc)},
            headers={"WWW-Authenticate": "Bearer"},
        )


def create_app(
    settings: Settings | None = None,
    container: ServiceContainer | None = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Settings to use. Defaults to the cached settings.
        container: Prebuilt services, e.g. for tests. Built at startup
            when omitted.

    Returns:
        FastAPI: Configured application instance.
    """
    settings = settings or get_settings()
    setup_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info("application_starting", app_name=settings.app_name)
        if getattr(app.state, "container", None) is None:
            app.state.container = build_container(settings)
        logger.info("application_started", timezone=settings.timezone)

        yield

        logger.info("application_shutdown_complete")

    app = FastAPI(
        title=settings.app_name,
        description="Condominium gate access control: registration, history and administration",
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )
    app.state.container = container

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.debug else ["http://localhost:3000"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Content-Disposition", "X-Correlation-ID", "X-Record-Count"],
    )

    # Correlation ID middleware
    @app.middleware("http")
    async def correlation_id_middleware(request: Request, call_next):
        """Add correlation ID to each request."""
        set_correlation_id(request.headers.get("X-Correlation-ID"))

        response = await call_next(request)

        response.headers["X-Correlation-ID"] = get_correlation_id()
        return response

    register_exception_handlers(app)

    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["health"],
    )
    async def health_check(request: Request) -> HealthResponse:
        """
        Basic liveness check.

        Returns 200 if the application is running.
        """
        services = request.app.state.container
        return HealthResponse(status="healthy", events=len(services.ledger) if services else 0)

    app.include_router(api_router)

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    _settings = get_settings()
    uvicorn.run(
        "condo_gate.main:app",
        host=_settings.host,
        port=_settings.port,
        reload=_settings.debug,
    )
