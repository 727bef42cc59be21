#!/usr/bin/env python3
"""
Test suite configuration and utilities.

All tests run without network access or a live model: the OpenAI client is
replaced with a MagicMock and the store is an in-memory SQLite database.

    # Run all tests
    python -m pytest tests/ -v

    # Using unittest
    python -m unittest discover tests -v

Set TEST_DATABASE_URL to run the store tests against another database
(e.g. a disposable PostgreSQL).
"""

import json
import os
from typing import Any, Dict, Optional
from unittest.mock import MagicMock

TEST_DB_URL = os.environ.get("TEST_DATABASE_URL", "sqlite://")


def create_test_engine(url: Optional[str] = None):
    """
    Create an engine for tests.

    In-memory SQLite gets a single shared connection so every session in a
    test sees the same database, including sessions opened on other threads.
    """
    from database.database import create_db_engine

    return create_db_engine(url or TEST_DB_URL)


def vacancy_payload(**overrides: Any) -> Dict[str, Any]:
    """A complete, schema-valid extraction payload (camelCase keys)."""
    payload = {
        "isVacancy": True,
        "title": "Senior Golang Developer",
        "company": "",
        "salaryMin": 120000,
        "salaryMax": 150000,
        "currency": "USD",
        "skills": ["Golang", "Docker", "Kubernetes"],
        "isRemote": True,
        "grade": "Senior",
        "location": "",
        "description": "Senior Golang developer, remote, Docker/K8s a plus.",
    }
    payload.update(overrides)
    return payload


def non_vacancy_payload() -> Dict[str, Any]:
    return vacancy_payload(
        isVacancy=False,
        title="",
        salaryMin=0,
        salaryMax=0,
        currency="",
        skills=[],
        isRemote=False,
        grade="",
        description="",
    )


def make_completion(content: Optional[str]) -> MagicMock:
    """Build a chat completion response with a single choice."""
    mock_message = MagicMock()
    mock_message.content = content
    mock_choice = MagicMock()
    mock_choice.message = mock_message
    mock_response = MagicMock()
    mock_response.choices = [mock_choice]
    return mock_response


def make_json_completion(payload: Any) -> MagicMock:
    return make_completion(json.dumps(payload, ensure_ascii=False))


def make_empty_completion() -> MagicMock:
    """Build a chat completion response with no choices."""
    mock_response = MagicMock()
    mock_response.choices = []
    return mock_response
