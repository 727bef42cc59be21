#!/usr/bin/env python3
"""
jobfeed API - FastAPI Application

Browse extracted jobs, ingest channel messages and draft outreach messages.

Usage:
    python main.py serve

Then open:
    - http://localhost:8080/docs - API Documentation (Swagger UI)
    - http://localhost:8080/redoc - Alternative API Documentation
"""

import logging

from fastapi import FastAPI, HTTPException

from core.llm.errors import LLMServiceError, ProviderError
from .exceptions import (
    ServiceException,
    service_exception_handler,
    llm_exception_handler,
    provider_exception_handler,
    http_exception_handler,
    general_exception_handler
)
from .routers import jobs_router

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="jobfeed API",
    description="API for extracted job postings and outreach drafts",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

# Register exception handlers
app.add_exception_handler(ServiceException, service_exception_handler)
app.add_exception_handler(LLMServiceError, llm_exception_handler)
app.add_exception_handler(ProviderError, provider_exception_handler)
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(Exception, general_exception_handler)

# Include routers
app.include_router(jobs_router)


@app.get("/health")
def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "jobfeed-api"}
