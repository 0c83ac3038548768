from sqlmodel import SQLModel, create_engine, Session
from sqlalchemy.engine import Engine
import logging
from .core.config import settings

logger = logging.getLogger(__name__)


def build_engine(db_url: str, **overrides) -> Engine:
    """Create an engine whose connections fail within DATABASE_TIMEOUT_SECONDS."""
    engine_kwargs = {}

    if db_url.startswith("sqlite"):
        # SQLite specific connect args; timeout bounds waits on the file lock
        engine_kwargs.update({
            "connect_args": {
                "check_same_thread": False,
                "timeout": settings.DATABASE_TIMEOUT_SECONDS,
            }
        })
    else:
        # Better resiliency for managed Postgres
        engine_kwargs.update({
            "pool_pre_ping": True,
            "pool_recycle": 300,
            "pool_size": 5,
            "max_overflow": 10,
            "pool_timeout": settings.DATABASE_TIMEOUT_SECONDS,
            "connect_args": {"connect_timeout": settings.DATABASE_TIMEOUT_SECONDS},
        })

    engine_kwargs.update(overrides)
    return create_engine(db_url, echo=settings.DEBUG, **engine_kwargs)


engine = build_engine(settings.DATABASE_URL)


def create_db_and_tables(bind: Engine = None):
    # Import models so their tables are registered on SQLModel.metadata
    from .db import models  # noqa: F401

    SQLModel.metadata.create_all(bind or engine)
    logger.info("Database tables ensured")


def get_session():
    with Session(engine) as session:
        yield session
