"""FastAPI dependency implementations."""

from __future__ import annotations

from collections.abc import Iterator

from fastapi import Request
from sqlmodel import Session

from src.bookstore.api.http.app_data import ApplicationDependencies
from src.bookstore.core.services import DbSessionService


def get_database_service(request: Request) -> DbSessionService:
    """Get the database service instance."""
    app_deps: ApplicationDependencies = request.app.state.app_dependencies
    return app_deps.database_service


def get_db_session(request: Request) -> Iterator[Session]:
    """Yield a request-scoped session; rolled back if the handler raises."""
    database_service = get_database_service(request)
    with database_service.session_scope() as session:
        yield session
