"""
Pytest configuration and fixtures.

This file provides pytest-specific configuration and fixtures.
For standard test utilities, see tests/__init__.py
"""

import os

# database.database builds its engine from DATABASE_URL at import time
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from unittest.mock import MagicMock
from sqlalchemy.orm import sessionmaker

from core.llm.openai_service import OpenAIService
from database.models import Base
from tests import create_test_engine


@pytest.fixture
def db_engine():
    """Engine with all tables created, dropped after the test."""
    engine = create_test_engine()
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.rollback()
    session.close()


@pytest.fixture
def openai_service():
    """OpenAIService whose HTTP client is a MagicMock."""
    service = OpenAIService(
        api_key="test",
        model_config={
            'extraction_model': 'extract-model',
            'generation_model': 'write-model',
            'request_timeout_seconds': 30.0,
        },
        offer_persona={
            'sender_name': 'Jane Doe',
            'greeting_name_en': 'Jane',
            'greeting_name_ru': 'Яна',
            'portfolio_url': 'https://example.dev',
        },
    )
    service.client = MagicMock()
    return service
