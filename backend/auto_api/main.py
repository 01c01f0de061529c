"""
Auto API main application.
Entry point for the FastAPI server (REST under /rest, GraphQL under /graphql).
"""

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from auto_api.core import (
    configure_cors,
    lifespan,
    register_exception_handlers,
    register_middlewares,
)
from auto_api.graphql import graphql_router
from auto_api.routers.auto import router as auto_router
from shared.config.settings import settings
from shared.infrastructure.db import get_db


# Create FastAPI application
app = FastAPI(
    title="Auto API",
    description="REST and GraphQL service for Autos with engine, repairs and attachment",
    version="0.1.0",
    lifespan=lifespan,
)

configure_cors(app)
register_middlewares(app)
register_exception_handlers(app)


# =============================================================================
# Health Check
# =============================================================================


@app.get("/api/health")
def health_check():
    """Basic health check endpoint."""
    return {
        "status": "healthy",
        "service": "auto-api",
        "environment": settings.environment,
    }


@app.get("/api/health/detailed")
def detailed_health_check(db: Session = Depends(get_db)):
    """Health check that verifies database connectivity."""
    checks = {
        "service": "auto-api",
        "environment": settings.environment,
        "dependencies": {},
    }

    try:
        db.execute(text("SELECT 1"))
        checks["dependencies"]["database"] = {"status": "healthy"}
        checks["status"] = "healthy"
    except SQLAlchemyError as e:
        checks["dependencies"]["database"] = {"status": "unhealthy", "error": str(e)}
        checks["status"] = "degraded"
        return JSONResponse(content=checks, status_code=503)

    return checks


# =============================================================================
# Include Routers
# =============================================================================

app.include_router(auto_router)
app.include_router(graphql_router)


# =============================================================================
# Development entry point
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "auto_api.main:app",
        host="0.0.0.0",
        port=settings.rest_api_port,
        reload=True,
    )
