#!/usr/bin/env python3
"""
Migration: add created/updated timestamps to jobs.

SQLite cannot add a column with a non-constant default, so the columns
are added nullable there and existing rows are backfilled.
"""
import logging
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from sqlalchemy import text

from migrations.utils import (
    column_exists, get_engine, index_exists, is_postgres, table_exists, timestamp_type
)

logger = logging.getLogger(__name__)

TIMESTAMP_COLUMNS = ('created', 'updated')


def migrate(engine=None) -> bool:
    """Add created and updated columns plus the created index."""
    engine = get_engine(engine)
    logger.info("Starting migration: Add timestamps to jobs")

    try:
        if not table_exists(engine, 'jobs'):
            logger.error("'jobs' table does not exist, run migrate_create_jobs first")
            return False

        column_type = timestamp_type(engine)
        default = " NOT NULL DEFAULT now()" if is_postgres(engine) else ""

        with engine.begin() as connection:
            for column in TIMESTAMP_COLUMNS:
                if column_exists(connection, 'jobs', column):
                    logger.info(f"'{column}' column already exists")
                    continue
                logger.info(f"Adding '{column}' column...")
                connection.execute(text(f"ALTER TABLE jobs ADD COLUMN {column} {column_type}{default}"))
                connection.execute(text(
                    f"UPDATE jobs SET {column} = CURRENT_TIMESTAMP WHERE {column} IS NULL"
                ))

            if not index_exists(connection, 'jobs', 'idx_jobs_created'):
                logger.info("Creating index 'idx_jobs_created'...")
                connection.execute(text("CREATE INDEX idx_jobs_created ON jobs (created)"))

        logger.info("Migration completed successfully!")
        return True

    except Exception as e:
        logger.error(f"Migration failed: {e}")
        return False


def rollback(engine=None) -> bool:
    """Drop the timestamp columns and their index."""
    engine = get_engine(engine)
    try:
        with engine.begin() as connection:
            if index_exists(connection, 'jobs', 'idx_jobs_created'):
                connection.execute(text("DROP INDEX idx_jobs_created"))
            for column in reversed(TIMESTAMP_COLUMNS):
                if column_exists(connection, 'jobs', column):
                    connection.execute(text(f"ALTER TABLE jobs DROP COLUMN {column}"))
        logger.info("Rolled back timestamp columns")
        return True
    except Exception as e:
        logger.error(f"Rollback failed: {e}")
        return False


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    success = rollback() if "--rollback" in sys.argv else migrate()
    sys.exit(0 if success else 1)
