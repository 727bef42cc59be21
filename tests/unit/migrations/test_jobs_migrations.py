#!/usr/bin/env python3
"""
Unit tests for the jobs table migrations (in-memory SQLite).

Tests verify:
- Migrations run in order and are idempotent
- Hash backfill keeps every row; repeated texts are left without a hash
- Rollback undoes each step
- The migrated table accepts rows written through the ORM
"""

import uuid

import pytest
from sqlalchemy import inspect, text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker

from core.utils import MessageFingerprinter
from database.repositories import JobRepository
from migrations import MIGRATIONS, run_migrations
from migrations import migrate_add_hash_raw, migrate_add_timestamps, migrate_create_jobs
from tests import create_test_engine


@pytest.fixture
def engine():
    engine = create_test_engine("sqlite://")
    yield engine
    engine.dispose()


def _columns(engine):
    return {col['name'] for col in inspect(engine).get_columns('jobs')}


def _indexes(engine):
    return {idx['name'] for idx in inspect(engine).get_indexes('jobs')}


def _insert_legacy_row(engine, original_text, message_id):
    with engine.begin() as connection:
        connection.execute(
            text(
                "INSERT INTO jobs (id, channel_id, message_id, original_text, skills) "
                "VALUES (:id, '-100', :message_id, :original_text, '[]')"
            ),
            {"id": uuid.uuid4().hex, "message_id": message_id, "original_text": original_text}
        )


class TestCreateJobs:

    def test_creates_table(self, engine):
        assert migrate_create_jobs.migrate(engine)

        columns = _columns(engine)
        assert {'id', 'channel_id', 'message_id', 'is_vacancy', 'title', 'skills', 'original_text'} <= columns
        assert 'hash' not in columns
        assert 'idx_jobs_is_remote' in _indexes(engine)

    def test_is_idempotent(self, engine):
        assert migrate_create_jobs.migrate(engine)
        assert migrate_create_jobs.migrate(engine)

    def test_rollback(self, engine):
        migrate_create_jobs.migrate(engine)

        assert migrate_create_jobs.rollback(engine)
        assert not inspect(engine).has_table('jobs')
        assert migrate_create_jobs.rollback(engine)


class TestAddHashRaw:

    def test_requires_jobs_table(self, engine):
        assert migrate_add_hash_raw.migrate(engine) is False

    def test_adds_columns_and_unique_index(self, engine):
        migrate_create_jobs.migrate(engine)

        assert migrate_add_hash_raw.migrate(engine)
        assert {'hash', 'raw'} <= _columns(engine)
        assert 'uq_jobs_hash' in _indexes(engine)
        assert migrate_add_hash_raw.migrate(engine)

    def test_backfill_keeps_rows_with_duplicate_text(self, engine):
        migrate_create_jobs.migrate(engine)
        _insert_legacy_row(engine, "Ищем Go разработчика", 1)
        _insert_legacy_row(engine, "  ищем go   разработчика ", 2)
        _insert_legacy_row(engine, "Check out our new product launch!", 3)

        assert migrate_add_hash_raw.migrate(engine)

        with engine.connect() as connection:
            rows = connection.execute(
                text("SELECT message_id, hash FROM jobs ORDER BY message_id")
            ).fetchall()
        assert [tuple(row) for row in rows] == [
            (1, MessageFingerprinter.calculate("Ищем Go разработчика")),
            (2, None),
            (3, MessageFingerprinter.calculate("Check out our new product launch!")),
        ]
        assert migrate_add_hash_raw.migrate(engine)

    def test_rollback(self, engine):
        migrate_create_jobs.migrate(engine)
        migrate_add_hash_raw.migrate(engine)

        assert migrate_add_hash_raw.rollback(engine)
        assert not {'hash', 'raw'} & _columns(engine)
        assert 'uq_jobs_hash' not in _indexes(engine)


class TestAddTimestamps:

    def test_adds_and_backfills(self, engine):
        migrate_create_jobs.migrate(engine)
        _insert_legacy_row(engine, "Go developer wanted", 1)

        assert migrate_add_timestamps.migrate(engine)
        assert {'created', 'updated'} <= _columns(engine)
        assert 'idx_jobs_created' in _indexes(engine)
        with engine.connect() as connection:
            created, updated = connection.execute(text("SELECT created, updated FROM jobs")).one()
        assert created is not None
        assert updated is not None
        assert migrate_add_timestamps.migrate(engine)

    def test_rollback(self, engine):
        migrate_create_jobs.migrate(engine)
        migrate_add_timestamps.migrate(engine)

        assert migrate_add_timestamps.rollback(engine)
        assert not {'created', 'updated'} & _columns(engine)


class TestRunMigrations:

    def test_order(self):
        assert MIGRATIONS[0].endswith('migrate_create_jobs')

    def test_full_schema_works_with_orm(self, engine):
        assert run_migrations(engine)

        session = sessionmaker(bind=engine)()
        try:
            repo = JobRepository(session)
            job = repo.create({
                'channel_id': '-100', 'message_id': 1, 'hash': 'h',
                'is_vacancy': True, 'title': 'Go Developer', 'original_text': 'Go developer wanted',
            })
            session.commit()
            assert repo.get_by_source('-100', 1).id == job.id

            with pytest.raises(IntegrityError):
                repo.create({'message_id': 2, 'channel_id': '-100', 'hash': 'h', 'original_text': 'again'})
            session.rollback()
        finally:
            session.close()

    def test_rollback_all(self, engine):
        run_migrations(engine)

        assert run_migrations(engine, rollback=True)
        assert not inspect(engine).has_table('jobs')
