#!/usr/bin/env python3
"""
Database initialization script.
Run this to create all tables.
"""

from .connection import engine, Base, DATABASE_URL
from . import models  # noqa: F401  (registers the tables on Base.metadata)
import logging

import config

logger = logging.getLogger(__name__)

EXPECTED_TABLES = {'profiles', 'courses', 'assignments', 'enrollments', 'submissions'}


def init_database(drop_existing=False, bind=None):
    """
    Initialize the database by creating all tables.

    Args:
        drop_existing (bool): If True, drop all existing tables first (DANGER!)
        bind: Optional engine to use instead of the configured one
    """
    bind = bind or engine
    logger.info(f"Initializing database at: {bind.url}")

    if drop_existing:
        logger.warning("Dropping all existing tables...")
        Base.metadata.drop_all(bind=bind)
        logger.info("Tables dropped.")

    logger.info("Creating tables...")
    Base.metadata.create_all(bind=bind)
    logger.info("Tables created successfully!")

    logger.info("Created tables:")
    for table in Base.metadata.sorted_tables:
        logger.info(f"  - {table.name}")


def verify_database(bind=None):
    """Verify database connection and tables exist"""
    from sqlalchemy import inspect

    inspector = inspect(bind or engine)
    tables = inspector.get_table_names()

    logger.info(f"Database contains {len(tables)} tables:")
    for table in tables:
        logger.info(f"  - {table}")

    missing_tables = EXPECTED_TABLES - set(tables)

    if missing_tables:
        logger.error(f"Missing tables: {missing_tables}")
        return False

    logger.info("All expected tables exist!")
    return True


if __name__ == '__main__':
    import sys

    logging.basicConfig(level=config.LOG_LEVEL)

    # Check for --drop flag
    drop = '--drop' in sys.argv

    if drop:
        confirm = input("⚠️  This will DELETE ALL DATA. Are you sure? (yes/no): ")
        if confirm.lower() != 'yes':
            print("Aborted.")
            sys.exit(0)

    logger.info(f"Using {DATABASE_URL}")
    init_database(drop_existing=drop)
    verify_database()
