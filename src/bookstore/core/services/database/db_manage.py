"""Schema management for the bookstore database."""

from loguru import logger
from sqlalchemy import Engine
from sqlmodel import SQLModel

from src.bookstore.core.services.database.db_session import DbSessionService


class DbManageService:
    def __init__(self, engine: Engine | None = None):
        self._engine = engine or DbSessionService().engine

    def create_all(self) -> None:
        """Create all database tables."""
        from src.bookstore.entities.service.book import BookTable  # noqa: F401

        SQLModel.metadata.create_all(self._engine)
        logger.info("Database initialized with tables.")

    def drop_all(self) -> None:
        """Drop all database tables."""
        from src.bookstore.entities.service.book import BookTable  # noqa: F401

        SQLModel.metadata.drop_all(self._engine)
        logger.warning("Database tables dropped.")
