"""API route handlers."""

from .jobs import router as jobs_router
