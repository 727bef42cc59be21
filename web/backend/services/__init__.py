"""Service layer for the jobs API."""

from .job_service import JobService

__all__ = ['JobService']
