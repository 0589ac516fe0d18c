"""Health check endpoints router for monitoring service availability."""

from typing import Any

from fastapi import APIRouter, Depends, Request
from starlette.responses import JSONResponse

from src.bookstore.api.http.deps import get_database_service
from src.bookstore.core.services import DbSessionService

router = APIRouter(prefix="/health", tags=["health"])


def _database_type(database_service: DbSessionService) -> str:
    return database_service.engine.dialect.name


@router.get("")
async def health() -> dict[str, str]:
    """Basic health check endpoint - checks if app is running.

    This is a liveness probe that returns 200 OK as long as the application
    process is running. It does not check dependencies.
    """
    return {"status": "healthy", "service": "api"}


@router.get("/ready", response_model=None)
def readiness(
    request: Request,
    database_service: DbSessionService = Depends(get_database_service),
) -> dict[str, Any] | JSONResponse:
    """Readiness check: 200 when the database answers, 503 otherwise."""
    db_healthy = database_service.health_check()
    response = {
        "status": "ready" if db_healthy else "not_ready",
        "environment": request.app.state.config.app.environment,
        "checks": {
            "database": {
                "status": "healthy" if db_healthy else "unhealthy",
                "type": _database_type(database_service),
            }
        },
    }

    if not db_healthy:
        return JSONResponse(status_code=503, content=response)

    return response


@router.get("/database", response_model=None)
def health_database(
    database_service: DbSessionService = Depends(get_database_service),
) -> dict[str, Any] | JSONResponse:
    """Database-specific health check with connection pool status."""
    if not database_service.health_check():
        return JSONResponse(
            status_code=503,
            content={"status": "unhealthy", "type": _database_type(database_service)},
        )

    return {
        "status": "healthy",
        "type": _database_type(database_service),
        "pool": database_service.get_pool_status(),
    }
