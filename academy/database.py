"""
Database engine, session factory and declarative base
"""
import logging

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from academy.config import settings

logger = logging.getLogger(__name__)


def _build_database_url(url: str) -> str:
    """
    Normalize the configured database URL.

    Legacy postgres:// URLs are rewritten to the driver-qualified form
    SQLAlchemy 2.x expects.
    """
    url = url.strip()
    if url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql+psycopg2://", 1)
    return url


DATABASE_URL = _build_database_url(settings.DATABASE_URL)

connect_args = {}
if DATABASE_URL.startswith("sqlite"):
    # Needed for SQLite when used with FastAPI in a single process
    connect_args = {"check_same_thread": False}

engine = create_engine(DATABASE_URL, connect_args=connect_args, pool_pre_ping=True)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """FastAPI dependency yielding a database session per request"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    """Create all tables that do not exist yet"""
    # Import models so they register with the metadata
    import academy.models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    logger.info(f"Database ready: backend={engine.url.get_backend_name()}")
