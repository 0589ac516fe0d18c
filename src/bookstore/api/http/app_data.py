from dataclasses import dataclass

from src.bookstore.core.services import DbSessionService


@dataclass
class ApplicationDependencies:
    database_service: DbSessionService
    # False when the engine was injected by the caller, who then disposes it
    owns_database: bool = True
