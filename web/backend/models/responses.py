#!/usr/bin/env python3
"""
Response models for API endpoints.
"""

from pydantic import BaseModel, ConfigDict
from typing import List, Optional, Dict, Any


class JobSummary(BaseModel):
    """Summary of a stored job."""
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "job_id": "550e8400-e29b-41d4-a716-446655440000",
                "is_vacancy": True,
                "title": "Senior Golang Developer",
                "company": "Acme",
                "grade": "Senior",
                "location": "",
                "is_remote": True,
                "salary_min": 120000,
                "salary_max": 150000,
                "currency": "USD",
                "skills": ["Golang", "Docker", "Kubernetes"],
                "url": "https://t.me/somechannel/42",
                "created_at": "2026-02-01T12:00:00"
            }
        }
    )

    job_id: str
    is_vacancy: bool
    title: str
    company: str
    grade: str
    location: str
    is_remote: bool
    salary_min: int
    salary_max: int
    currency: str
    skills: List[str]
    url: Optional[str]
    created_at: Optional[str]


class JobDetail(JobSummary):
    """Full job record including provenance."""
    description: str
    channel_id: Optional[str]
    message_id: Optional[int]
    hash: Optional[str]
    original_text: str
    raw: Optional[Dict[str, Any]]
    updated_at: Optional[str]


class JobsResponse(BaseModel):
    """Response for job listing."""
    success: bool
    count: int
    jobs: List[JobSummary]


class JobDetailResponse(BaseModel):
    """Response for a single job."""
    success: bool
    job: JobDetail


class IngestResponse(BaseModel):
    """Outcome of ingesting one message."""
    success: bool
    status: str
    job_id: Optional[str]
    matched_by: Optional[str] = None


class OfferResponse(BaseModel):
    """Generated first-touch message; empty when nothing was produced."""
    success: bool
    job_id: str
    message: str
    language: str


class DeleteResponse(BaseModel):
    """Response for job deletion."""
    success: bool
    job_id: str
