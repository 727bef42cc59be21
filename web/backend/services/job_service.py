#!/usr/bin/env python3
"""
Job service - read and delete operations for the jobs API.
"""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from database.models import Job
from database.repositories import JobRepository
from ..exceptions import JobNotFoundException
from ..models.responses import JobSummary, JobDetail

logger = logging.getLogger(__name__)


def _iso(value) -> Optional[str]:
    return value.isoformat() if value else None


def to_summary(job: Job) -> JobSummary:
    return JobSummary(
        job_id=str(job.id),
        is_vacancy=job.is_vacancy,
        title=job.title,
        company=job.company,
        grade=job.grade,
        location=job.location,
        is_remote=job.is_remote,
        salary_min=job.salary_min,
        salary_max=job.salary_max,
        currency=job.currency,
        skills=list(job.skills or []),
        url=job.url,
        created_at=_iso(job.created),
    )


def to_detail(job: Job) -> JobDetail:
    return JobDetail(
        **to_summary(job).model_dump(),
        description=job.description,
        channel_id=job.channel_id,
        message_id=job.message_id,
        hash=job.hash,
        original_text=job.original_text,
        raw=job.raw,
        updated_at=_iso(job.updated),
    )


class JobService:
    """Service for browsing stored jobs."""

    def __init__(self, db: Session):
        self.db = db
        self.repo = JobRepository(db)

    def get_jobs(
        self,
        search: Optional[str] = None,
        is_remote: Optional[bool] = None,
        grade: Optional[str] = None,
        vacancies_only: bool = True,
        limit: int = 100,
        offset: int = 0
    ) -> List[JobSummary]:
        jobs = self.repo.list_jobs(
            search=search,
            is_remote=is_remote,
            grade=grade,
            vacancies_only=vacancies_only,
            limit=limit,
            offset=offset
        )
        return [to_summary(job) for job in jobs]

    def get_job_detail(self, job_id: str) -> JobDetail:
        job = self.repo.get_by_id(job_id)
        if job is None:
            raise JobNotFoundException(f"Job {job_id} not found")
        return to_detail(job)

    def delete_job(self, job_id: str) -> None:
        job = self.repo.get_by_id(job_id)
        if job is None:
            raise JobNotFoundException(f"Job {job_id} not found")
        self.repo.delete(job)
        self.db.commit()
        logger.info(f"Deleted job {job_id}")
