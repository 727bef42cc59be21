#!/usr/bin/env python3
"""
Custom exceptions and error handlers for the web application.
"""

import logging
from fastapi import Request, HTTPException
from fastapi.responses import JSONResponse

from core.llm.errors import LLMServiceError, ProviderError, SchemaViolation

logger = logging.getLogger(__name__)


class ServiceException(Exception):
    """Base exception for service layer errors."""
    pass


class JobNotFoundException(ServiceException):
    """Raised when a job is not found."""
    pass


class InvalidMessageException(ServiceException):
    """Raised when an inbound message cannot be ingested."""
    pass


async def service_exception_handler(
    request: Request,
    exc: ServiceException
) -> JSONResponse:
    """
    Handle service layer exceptions.
    
    Args:
        request: The FastAPI request.
        exc: The service exception.
    
    Returns:
        JSONResponse with error details.
    """
    logger.error(f"Service error in {request.url.path}: {exc}")
    
    status_code = 500
    if isinstance(exc, JobNotFoundException):
        status_code = 404
    elif isinstance(exc, InvalidMessageException):
        status_code = 422
    
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "error": str(exc),
            "type": exc.__class__.__name__
        }
    )


async def llm_exception_handler(
    request: Request,
    exc: LLMServiceError
) -> JSONResponse:
    """
    Handle unusable LLM output (schema violations, empty responses).

    The raw payload is logged, not returned.
    """
    content = {
        "success": False,
        "error": str(exc),
        "type": exc.__class__.__name__
    }
    if isinstance(exc, SchemaViolation):
        content["details"] = exc.errors
    logger.error(f"LLM error in {request.url.path}: {exc}. Raw payload: {getattr(exc, 'raw_payload', None)!r}")

    return JSONResponse(status_code=502, content=content)


async def provider_exception_handler(
    request: Request,
    exc: ProviderError
) -> JSONResponse:
    """
    Handle failures reported by the LLM provider (auth, rate limit, transport).
    """
    logger.error(f"LLM provider error in {request.url.path}: {exc}")

    return JSONResponse(
        status_code=502,
        content={
            "success": False,
            "error": "LLM provider request failed",
            "type": exc.__class__.__name__
        }
    )


async def http_exception_handler(
    request: Request,
    exc: HTTPException
) -> JSONResponse:
    """
    Handle FastAPI HTTP exceptions with consistent format.
    """
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "error": exc.detail,
            "type": "HTTPException"
        }
    )


async def general_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """
    Handle unexpected exceptions.
    """
    logger.exception(f"Unexpected error in {request.url.path}")
    
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "Internal server error",
            "type": "InternalError"
        }
    )
