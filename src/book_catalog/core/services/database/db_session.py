"""Database engine and session factory used across the application."""

from loguru import logger
from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, create_engine

from src.book_catalog.runtime.config.config_data import ConfigData
from src.book_catalog.runtime.context import get_config


class DbSessionService:
    def __init__(self, engine: Engine | None = None):
        """Initialize the shared database engine and session factory.

        An already built engine may be passed in (tests use an in-memory one);
        otherwise it is created from the active configuration.
        """
        if engine is not None:
            self._engine = engine
            return

        logger.info("Setting up database engine and session factory")
        main_config = get_config()
        db_config = main_config.database

        engine_kwargs = {
            "pool_pre_ping": True,  # Validate connections before use
            "echo": db_config.echo,
            "connect_args": self._get_connect_args(main_config),
        }

        self._engine = create_engine(db_config.connection_string, **engine_kwargs)
        logger.info(
            "Database engine initialized for {} environment",
            main_config.app.environment,
        )

    @property
    def engine(self) -> Engine:
        return self._engine

    def _get_connect_args(self, config: ConfigData) -> dict:
        """Get database-specific connection arguments."""
        connect_args = {}

        if "postgresql" in config.database.url:
            connect_args.update(
                {
                    # Application name for connection tracking
                    "application_name": f"{config.app.environment}_book_catalog",
                    "connect_timeout": 30,
                }
            )

        elif "sqlite" in config.database.url:
            connect_args.update(
                {
                    "check_same_thread": False,  # Sessions cross the threadpool
                    "timeout": 20,  # Lock timeout
                }
            )

            if config.app.environment == "production":
                logger.warning(
                    "SQLite is not recommended for production use. "
                    "Consider PostgreSQL for better performance and reliability."
                )

        return connect_args

    def get_session(self) -> Session:
        """Return a new SQLModel session bound to the shared engine."""
        return Session(
            self._engine,
            expire_on_commit=False,  # Prevent lazy loading issues
            autoflush=True,
        )

    def health_check(self) -> bool:
        """Perform a health check on the database connection."""
        try:
            with self._engine.connect() as connection:
                connection.execute(text("SELECT 1"))
                return True
        except SQLAlchemyError as e:
            logger.bind(error_type=type(e).__name__).error(
                "Database health check failed: {}", e
            )
            return False
