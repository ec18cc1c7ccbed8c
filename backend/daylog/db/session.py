"""
Database session management.

The engine owns the process-wide connection pool. Sessions check a
connection out for the span of one request and return it on close.
"""
import logging
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from daylog.core.config import settings
from daylog.db.base import Base

logger = logging.getLogger(__name__)


def _engine_options(url: str) -> dict:
    options = {
        "echo": settings.DB_ECHO,
        "pool_pre_ping": True,
        "pool_recycle": 3600,
    }
    if url.startswith("sqlite"):
        # Requests run in FastAPI's threadpool
        options["connect_args"] = {"check_same_thread": False}
    else:
        options["pool_size"] = settings.DB_POOL_SIZE
        options["max_overflow"] = settings.DB_MAX_OVERFLOW
    return options


engine = create_engine(settings.DATABASE_URL, **_engine_options(settings.DATABASE_URL))

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Session:
    """Dependency for getting database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    """Initialize database tables."""
    # Models must be registered on Base.metadata before create_all
    import daylog.models  # noqa: F401
    Base.metadata.create_all(bind=engine)


def dispose_engine():
    """Drain the connection pool."""
    logger.info("Disposing database engine")
    engine.dispose()
