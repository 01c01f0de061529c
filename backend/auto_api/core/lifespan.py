"""
Application lifespan handler.
Manages startup and shutdown events for the FastAPI application.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from auto_api.models import Base
from auto_api.seed import seed
from shared.config.logging import auto_api_logger as logger, setup_logging
from shared.config.settings import settings
from shared.infrastructure.db import engine, get_db_context


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.
    Runs on startup and shutdown.
    """
    # Initialize logging
    setup_logging()

    # Validate production secrets before startup
    secret_errors = settings.validate_production_secrets()
    if secret_errors:
        for error in secret_errors:
            logger.error("Configuration error: %s", error)
        if settings.environment == "production":
            raise RuntimeError(
                f"Production configuration errors: {'; '.join(secret_errors)}. "
                "Server will not start with insecure configuration."
            )
        else:
            logger.warning(
                "Running with insecure defaults (acceptable for development only)"
            )

    logger.info("Starting Auto API", port=settings.rest_api_port, env=settings.environment)

    if settings.db_populate:
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created/verified")

        with get_db_context() as db:
            seed(db)

    yield

    logger.info("Shutting down Auto API")
    engine.dispose()
