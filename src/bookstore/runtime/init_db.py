"""Database initialization script."""

from src.bookstore.api.utils.app_startup import configure_logging
from src.bookstore.core.services import DbManageService


def init_db() -> None:
    """Create all database tables."""
    configure_logging()
    DbManageService().create_all()


if __name__ == "__main__":
    init_db()
