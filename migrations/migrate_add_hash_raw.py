#!/usr/bin/env python3
"""
Migration: add content hash and raw extraction payload to jobs.

- hash: SHA-256 of the normalized message text, unique, used to catch
  reposts of the same text under new message ids
- raw: the extraction payload exactly as the model returned it

Existing rows are backfilled with the hash of their original_text. When
several existing rows share a text, the earliest message keeps it and the
rest keep a NULL hash, which the unique index allows. No rows are removed.
"""
import logging
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from sqlalchemy import text

from core.utils import MessageFingerprinter
from migrations.utils import column_exists, get_engine, index_exists, json_type, table_exists

logger = logging.getLogger(__name__)


def _backfill_hashes(connection) -> int:
    rows = connection.execute(
        text("SELECT id, original_text FROM jobs WHERE hash IS NULL ORDER BY channel_id, message_id")
    ).fetchall()

    seen = {
        row[0] for row in connection.execute(
            text("SELECT hash FROM jobs WHERE hash IS NOT NULL")
        )
    }
    updated = 0
    for job_id, original_text in rows:
        content_hash = MessageFingerprinter.calculate(original_text or "")
        if content_hash in seen:
            logger.warning(f"Job {job_id} duplicates an earlier message text, leaving its hash empty")
            continue
        seen.add(content_hash)
        connection.execute(
            text("UPDATE jobs SET hash = :hash WHERE id = :id"),
            {"hash": content_hash, "id": job_id}
        )
        updated += 1
    return updated


def migrate(engine=None) -> bool:
    """Add hash and raw columns and the unique hash index."""
    engine = get_engine(engine)
    logger.info("Starting migration: Add hash and raw columns to jobs")

    try:
        if not table_exists(engine, 'jobs'):
            logger.error("'jobs' table does not exist, run migrate_create_jobs first")
            return False

        with engine.begin() as connection:
            if column_exists(connection, 'jobs', 'hash'):
                logger.info("'hash' column already exists")
            else:
                logger.info("Adding 'hash' column...")
                connection.execute(text("ALTER TABLE jobs ADD COLUMN hash TEXT"))

            if column_exists(connection, 'jobs', 'raw'):
                logger.info("'raw' column already exists")
            else:
                logger.info("Adding 'raw' column...")
                connection.execute(text(f"ALTER TABLE jobs ADD COLUMN raw {json_type(engine)}"))

        with engine.begin() as connection:
            updated = _backfill_hashes(connection)
            logger.info(f"Backfilled hash for {updated} existing jobs")

            if index_exists(connection, 'jobs', 'uq_jobs_hash'):
                logger.info("'uq_jobs_hash' index already exists")
            else:
                logger.info("Creating unique index 'uq_jobs_hash'...")
                connection.execute(text("CREATE UNIQUE INDEX uq_jobs_hash ON jobs (hash)"))

        logger.info("Migration completed successfully!")
        return True

    except Exception as e:
        logger.error(f"Migration failed: {e}")
        return False


def rollback(engine=None) -> bool:
    """Drop the hash index and the hash and raw columns."""
    engine = get_engine(engine)
    try:
        with engine.begin() as connection:
            if index_exists(connection, 'jobs', 'uq_jobs_hash'):
                connection.execute(text("DROP INDEX uq_jobs_hash"))
            for column in ('raw', 'hash'):
                if column_exists(connection, 'jobs', column):
                    connection.execute(text(f"ALTER TABLE jobs DROP COLUMN {column}"))
        logger.info("Rolled back hash and raw columns")
        return True
    except Exception as e:
        logger.error(f"Rollback failed: {e}")
        return False


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    success = rollback() if "--rollback" in sys.argv else migrate()
    sys.exit(0 if success else 1)
