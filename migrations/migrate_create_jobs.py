#!/usr/bin/env python3
"""
Migration: create the jobs table.

Creates the initial jobs collection: extracted vacancy fields, provenance
(url, original_text) and the source message coordinates used for
deduplication (channel_id, message_id).
"""
import logging
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from sqlalchemy import text

from migrations.utils import get_engine, json_type, table_exists, uuid_type

logger = logging.getLogger(__name__)


def migrate(engine=None) -> bool:
    """Create the jobs table if it does not exist."""
    engine = get_engine(engine)
    logger.info("Starting migration: Create jobs table")

    try:
        if table_exists(engine, 'jobs'):
            logger.info("'jobs' table already exists, skipping")
            return True

        with engine.begin() as connection:
            connection.execute(text(f"""
                CREATE TABLE jobs (
                    id {uuid_type(engine)} PRIMARY KEY,
                    channel_id TEXT,
                    message_id BIGINT,
                    is_vacancy BOOLEAN NOT NULL DEFAULT FALSE,
                    title TEXT NOT NULL DEFAULT '',
                    company TEXT NOT NULL DEFAULT '',
                    grade TEXT NOT NULL DEFAULT '',
                    location TEXT NOT NULL DEFAULT '',
                    description TEXT NOT NULL DEFAULT '',
                    salary_min INTEGER NOT NULL DEFAULT 0,
                    salary_max INTEGER NOT NULL DEFAULT 0,
                    currency TEXT NOT NULL DEFAULT '',
                    skills {json_type(engine)} NOT NULL,
                    is_remote BOOLEAN NOT NULL DEFAULT FALSE,
                    url TEXT,
                    original_text TEXT NOT NULL,
                    CONSTRAINT uq_jobs_source_message UNIQUE (channel_id, message_id)
                )
            """))
            connection.execute(text("CREATE INDEX idx_jobs_is_remote ON jobs (is_remote)"))

        logger.info("Migration completed successfully!")
        return True

    except Exception as e:
        logger.error(f"Migration failed: {e}")
        return False


def rollback(engine=None) -> bool:
    """Drop the jobs table."""
    engine = get_engine(engine)
    try:
        if not table_exists(engine, 'jobs'):
            logger.info("'jobs' table does not exist, nothing to drop")
            return True
        with engine.begin() as connection:
            connection.execute(text("DROP TABLE jobs"))
        logger.info("Dropped 'jobs' table")
        return True
    except Exception as e:
        logger.error(f"Rollback failed: {e}")
        return False


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    success = rollback() if "--rollback" in sys.argv else migrate()
    sys.exit(0 if success else 1)
