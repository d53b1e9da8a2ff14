from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI

from app.config import collect_env_errors, get_log_level
from app.schemas.fabric_validation import HealthResponse

SERVICE_NAME = "SAN Fabric Validator API"
SERVICE_VERSION = "1.0.0"


def _validate_env() -> None:
    """
    Validate environment variables at startup.

    Raises RuntimeError listing every invalid variable so the operator can
    fix all problems in one restart cycle.
    """

    errors = collect_env_errors()
    if errors:
        raise RuntimeError(
            "Startup validation failed, invalid environment variables:\n"
            + "\n".join(f"  - {e}" for e in errors)
        )


def _configure_logging() -> None:
    """
    Configure root logging once for the API process.
    """

    logging.basicConfig(
        level=get_log_level(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


@asynccontextmanager
async def _lifespan(application: FastAPI) -> AsyncIterator[None]:
    """Log service readiness on boot and shutdown on exit."""
    logging.getLogger(__name__).info("%s %s ready", SERVICE_NAME, SERVICE_VERSION)
    try:
        yield
    finally:
        logging.getLogger(__name__).info("%s shut down", SERVICE_NAME)


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.
    """

    _validate_env()
    _configure_logging()

    application = FastAPI(
        title=SERVICE_NAME,
        version=SERVICE_VERSION,
        lifespan=_lifespan,
    )

    from app.api.routers import fabric_validation_router

    application.include_router(fabric_validation_router)

    @application.get("/health")
    def healthcheck() -> HealthResponse:
        return HealthResponse(service=SERVICE_NAME, version=SERVICE_VERSION)

    return application


app = create_app()
