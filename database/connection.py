from contextlib import contextmanager
import logging

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool
from sqlalchemy.exc import SQLAlchemyError

import config

logger = logging.getLogger(__name__)

# Create base class for models
Base = declarative_base()

if config.DB_TYPE == 'postgresql':
    # PostgreSQL connection
    DATABASE_URL = (
        f"postgresql://{config.DB_USER}:{config.DB_PASSWORD}"
        f"@{config.DB_HOST}:{config.DB_PORT}/{config.DB_NAME}"
    )

    engine = create_engine(
        DATABASE_URL,
        echo=config.DB_ECHO,  # Set DB_ECHO=True for SQL logging
        pool_pre_ping=True,
        pool_size=10,
        max_overflow=20
    )
else:
    # SQLite connection (default)
    DATABASE_URL = f"sqlite:///{config.SQLITE_PATH}"

    engine = create_engine(
        DATABASE_URL,
        echo=config.DB_ECHO,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )

# Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@contextmanager
def get_db_session():
    """
    Get a database session that commits on success. Use as context manager:

    with get_db_session() as session:
        # do work
    """
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except SQLAlchemyError as e:
        logger.error(f"Database error: {e}")
        session.rollback()
        raise
    finally:
        session.close()


def get_db():
    """Get a database session (for non-context manager usage)"""
    return SessionLocal()
