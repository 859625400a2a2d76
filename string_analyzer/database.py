from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool
import logging

logger = logging.getLogger(__name__)

Base = declarative_base()


# ------------------------------------------------------------------------------
# DATABASE ENGINE & SESSION
# ------------------------------------------------------------------------------
def create_db_engine(database_url: str) -> Engine:
    """Build an engine; in-memory SQLite gets a single shared connection."""
    if database_url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            # Every session must see the same in-memory database
            kwargs["poolclass"] = StaticPool
    else:
        kwargs = {"pool_pre_ping": True, "pool_recycle": 280}

    try:
        return create_engine(database_url, **kwargs)
    except Exception as e:
        logger.error(f"❌ Failed to create SQLAlchemy engine: {e}")
        raise


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


# ------------------------------------------------------------------------------
# INITIALIZATION
# ------------------------------------------------------------------------------
def init_db(engine: Engine) -> None:
    """Create tables for every registered model."""
    from string_analyzer import models  # noqa: F401  ensure models are imported
    Base.metadata.create_all(bind=engine)
    logger.info("✅ Database tables created successfully.")
