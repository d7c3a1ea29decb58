"""
Database Session Management

Provides database connection pooling and session management.
"""
from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine, event, exc, pool, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from config.settings import settings
from src.realty.utils.logger import get_logger

logger = get_logger(__name__)


def build_engine(database_url: str = None, **kwargs) -> Engine:
    """
    Create a database engine for the configured backend.

    SQLite engines get thread-shareable connections and foreign key
    enforcement; other backends get the pooled configuration.

    Args:
        database_url: Override the configured database URL
        **kwargs: Extra create_engine arguments

    Returns:
        SQLAlchemy engine
    """
    url = database_url or settings.database_url

    if url.startswith("sqlite"):
        connect_args = kwargs.pop("connect_args", {})
        connect_args.setdefault("check_same_thread", False)
        new_engine = create_engine(
            url,
            connect_args=connect_args,
            echo=settings.database_echo,
            **kwargs,
        )
        enable_sqlite_foreign_keys(new_engine)
        return new_engine

    return create_engine(
        url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
        pool_timeout=settings.database_pool_timeout,
        pool_recycle=settings.database_pool_recycle,
        pool_pre_ping=True,  # Verify connections before using
        echo=settings.database_echo,  # Log SQL queries if enabled
        **kwargs,
    )


def enable_sqlite_foreign_keys(target: Engine) -> None:
    """
    Turn on SQLite foreign key enforcement for every new connection.

    Args:
        target: SQLite engine
    """
    @event.listens_for(target, "connect")
    def receive_connect(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()
        logger.debug("sqlite_foreign_keys_enabled")


# Create database engine
engine = build_engine()


@event.listens_for(engine, "checkout")
def receive_checkout(dbapi_conn, connection_record, connection_proxy):
    """
    Event listener for connection checkout from pool.

    Logs when a connection is retrieved from the pool.
    """
    logger.debug("database_connection_checkout")


@event.listens_for(pool.Pool, "invalidate")
def receive_invalidate(dbapi_conn, connection_record, exception):
    """
    Event listener for connection invalidation.

    Logs when a connection is marked as invalid and removed from pool.
    """
    logger.warning(
        "database_connection_invalidated",
        exception=str(exception) if exception else None
    )


# Create session factory
SessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
    expire_on_commit=False
)


@contextmanager
def get_db_session() -> Generator[Session, None, None]:
    """
    Get database session with automatic cleanup.

    Usage:
        with get_db_session() as session:
            # Perform database operations
            result = session.query(Model).all()

    Yields:
        Database session

    Raises:
        Exception: Re-raises any exception after rollback
    """
    session = SessionLocal()
    try:
        logger.debug("database_session_created")
        yield session
        session.commit()
        logger.debug("database_session_committed")
    except exc.SQLAlchemyError as e:
        session.rollback()
        logger.error(
            "database_session_rollback",
            error=str(e),
            error_type=type(e).__name__
        )
        raise
    except Exception as e:
        session.rollback()
        logger.error(
            "database_session_error",
            error=str(e),
            error_type=type(e).__name__
        )
        raise
    finally:
        session.close()
        logger.debug("database_session_closed")


def health_check(session: Session) -> bool:
    """
    Check database connection health.

    Args:
        session: Database session

    Returns:
        True if database is accessible, False otherwise
    """
    try:
        session.execute(text("SELECT 1"))
        return True
    except exc.SQLAlchemyError as e:
        logger.error(
            "database_health_check_failed",
            error=str(e),
            error_type=type(e).__name__
        )
        return False


def close_connections():
    """
    Close all database connections and dispose of the engine.

    Should be called on application shutdown.
    """
    logger.info("closing_database_connections")
    engine.dispose()
    logger.info("database_connections_closed")


def create_all_tables(bind: Engine = None):
    """
    Create all database tables defined in models.

    Alembic migrations are the production path; this is used for local
    SQLite setups and tests.
    """
    from src.realty.db.base import Base, import_all_models

    logger.info("creating_database_tables")

    import_all_models()
    Base.metadata.create_all(bind=bind or engine)

    logger.info("database_tables_created")


def drop_all_tables(bind: Engine = None):
    """
    Drop all database tables.

    WARNING: This will delete all data! Only use in development/testing.
    """
    from src.realty.db.base import Base, import_all_models

    logger.warning("dropping_all_database_tables")

    import_all_models()
    Base.metadata.drop_all(bind=bind or engine)

    logger.warning("all_database_tables_dropped")
