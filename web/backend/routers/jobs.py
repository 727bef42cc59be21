#!/usr/bin/env python3
"""
Job endpoints - browse stored jobs, ingest messages, draft offers.
"""

import uuid
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, HTTPException
from sqlalchemy.orm import Session

from core.llm.language import detect_language
from database.repositories import JobRepository
from etl.orchestrator import InboundMessage, JobETLService, JobNotFoundError
from ..dependencies import get_db, get_etl_service
from ..exceptions import InvalidMessageException, JobNotFoundException
from ..services.job_service import JobService
from ..models.requests import IngestRequest, OfferRequest
from ..models.responses import (
    JobsResponse,
    JobDetailResponse,
    IngestResponse,
    OfferResponse,
    DeleteResponse
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/jobs", tags=["jobs"])


def validate_uuid(job_id: str) -> str:
    """Validate that job_id is a valid UUID format."""
    try:
        uuid.UUID(job_id)
        return job_id
    except ValueError:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid job_id format: {job_id}. Must be a valid UUID."
        )


@router.get("", response_model=JobsResponse)
def get_jobs(
    search: Optional[str] = Query(default=None, description="Search in title, company and description"),
    remote: Optional[bool] = Query(default=None, description="Filter by remote flag"),
    grade: Optional[str] = Query(default=None, description="Filter by grade (substring)"),
    include_non_vacancies: bool = Query(default=False, description="Include messages classified as non-vacancies"),
    limit: int = Query(default=100, ge=1, le=500, description="Maximum results to return"),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db)
):
    """
    List stored jobs, newest first.
    """
    service = JobService(db)
    jobs = service.get_jobs(
        search=search,
        is_remote=remote,
        grade=grade,
        vacancies_only=not include_non_vacancies,
        limit=limit,
        offset=offset
    )
    return JobsResponse(success=True, count=len(jobs), jobs=jobs)


@router.get("/{job_id}", response_model=JobDetailResponse)
def get_job(job_id: str, db: Session = Depends(get_db)):
    """
    Get a stored job with its original text and raw extraction payload.
    """
    validate_uuid(job_id)
    service = JobService(db)
    return JobDetailResponse(success=True, job=service.get_job_detail(job_id))


@router.post("/ingest", response_model=IngestResponse)
def ingest_message(
    request: IngestRequest,
    etl: JobETLService = Depends(get_etl_service)
):
    """
    Ingest one message: dedup, extract, persist.

    A message whose channel/message ids or text were already ingested is a
    no-op and reports status "duplicate".
    """
    message = InboundMessage(
        text=request.text,
        channel_id=request.channel_id or None,
        message_id=request.message_id,
        url=request.url
    )
    try:
        result = etl.ingest(message)
    except ValueError as e:
        raise InvalidMessageException(str(e))

    return IngestResponse(
        success=True,
        status=result.status.value,
        job_id=str(result.job_id) if result.job_id else None,
        matched_by=result.matched_by
    )


@router.post("/{job_id}/offer", response_model=OfferResponse)
def draft_offer(
    job_id: str,
    request: OfferRequest,
    db: Session = Depends(get_db),
    etl: JobETLService = Depends(get_etl_service)
):
    """
    Draft a first-touch message for a stored job from the given CV.
    """
    validate_uuid(job_id)
    repo = JobRepository(db)
    try:
        message = etl.draft_offer(repo, job_id, request.cv)
    except JobNotFoundError as e:
        raise JobNotFoundException(str(e))

    return OfferResponse(
        success=True,
        job_id=job_id,
        message=message,
        language=detect_language(message) if message else ""
    )


@router.delete("/{job_id}", response_model=DeleteResponse)
def delete_job(job_id: str, db: Session = Depends(get_db)):
    """
    Delete a stored job. Its dedup keys are released with it.
    """
    validate_uuid(job_id)
    JobService(db).delete_job(job_id)
    return DeleteResponse(success=True, job_id=job_id)
