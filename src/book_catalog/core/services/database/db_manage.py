"""Schema management for the book store."""

from loguru import logger
from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, create_engine

from src.book_catalog.runtime.context import get_config


class DbManageService:
    def __init__(self, engine: Engine | None = None):
        self._engine = engine or create_engine(
            get_config().database.connection_string, echo=False
        )

    def create_all(self) -> None:
        """Create all database tables."""
        from src.book_catalog.entities.book import BookTable  # noqa: F401

        SQLModel.metadata.create_all(self._engine)
        logger.info("Database initialized with tables.")

    def drop_all(self) -> None:
        """Drop all database tables."""
        from src.book_catalog.entities.book import BookTable  # noqa: F401

        SQLModel.metadata.drop_all(self._engine)
        logger.info("Database tables dropped.")
