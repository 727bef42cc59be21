#!/usr/bin/env python3
"""
FastAPI dependencies for dependency injection.
"""

import os
from functools import lru_cache
from typing import Generator

from sqlalchemy.orm import Session

from core.app_context import AppContext
from core.config_loader import AppConfig, load_config
from etl.orchestrator import JobETLService


@lru_cache()
def get_config() -> AppConfig:
    """Load configuration once per process."""
    config = load_config()
    # database.database reads the URL when first imported
    os.environ["DATABASE_URL"] = config.database.url
    return config


@lru_cache()
def get_app_context() -> AppContext:
    """Build the application context once per process."""
    return AppContext.build(get_config())


def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency that yields a database session.
    
    Usage:
        @app.get("/endpoint")
        def my_endpoint(db: Session = Depends(get_db)):
            ...
    
    Yields:
        Session: Database session that will be automatically closed.
    """
    get_config()
    from database.database import SessionLocal

    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


def get_etl_service() -> JobETLService:
    """FastAPI dependency returning the shared ingestion service."""
    return get_app_context().job_etl_service
