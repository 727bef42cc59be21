import logging
import uuid
from typing import List, Optional, Dict, Any, Union

from sqlalchemy import select, or_

from database.models import Job
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)

JOB_COLUMNS = frozenset(c.name for c in Job.__table__.columns) - {'id', 'created', 'updated'}


def _as_uuid(job_id: Union[str, uuid.UUID]) -> Optional[uuid.UUID]:
    if isinstance(job_id, uuid.UUID):
        return job_id
    try:
        return uuid.UUID(str(job_id))
    except ValueError:
        return None


class JobRepository(BaseRepository):
    """Create/update/find/delete access to the jobs collection."""

    def get_by_id(self, job_id: Union[str, uuid.UUID]) -> Optional[Job]:
        key = _as_uuid(job_id)
        if key is None:
            return None
        stmt = select(Job).where(Job.id == key)
        return self.db.execute(stmt).scalar_one_or_none()

    def get_by_source(self, channel_id: str, message_id: int) -> Optional[Job]:
        stmt = select(Job).where(
            Job.channel_id == str(channel_id),
            Job.message_id == int(message_id)
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def get_by_hash(self, content_hash: str) -> Optional[Job]:
        stmt = select(Job).where(Job.hash == content_hash)
        return self.db.execute(stmt).scalar_one_or_none()

    def create(self, fields: Dict[str, Any]) -> Job:
        """Insert a job and flush so unique constraints are checked now.

        Raises:
            ValueError: unknown column names or empty original_text
            sqlalchemy.exc.IntegrityError: a record with the same dedup key exists
        """
        unknown = set(fields) - JOB_COLUMNS
        if unknown:
            raise ValueError(f"Unknown job fields: {sorted(unknown)}")
        if not (fields.get('original_text') or '').strip():
            raise ValueError("original_text must not be empty")

        job = Job(**fields)
        self.db.add(job)
        self.flush()
        return job

    def update(self, job: Job, fields: Dict[str, Any]) -> Job:
        unknown = set(fields) - JOB_COLUMNS
        if unknown:
            raise ValueError(f"Unknown job fields: {sorted(unknown)}")
        if 'original_text' in fields and not (fields['original_text'] or '').strip():
            raise ValueError("original_text must not be empty")

        for name, value in fields.items():
            setattr(job, name, value)
        self.flush()
        return job

    def delete(self, job: Job) -> None:
        self.db.delete(job)
        self.flush()

    def list_jobs(
        self,
        search: Optional[str] = None,
        is_remote: Optional[bool] = None,
        grade: Optional[str] = None,
        vacancies_only: bool = True,
        limit: int = 100,
        offset: int = 0
    ) -> List[Job]:
        """List jobs newest first.

        Args:
            search: case-insensitive substring over title, company and description
            is_remote: exact match when not None
            grade: case-insensitive substring match on grade
            vacancies_only: hide records classified as non-vacancies
        """
        stmt = select(Job)

        if vacancies_only:
            stmt = stmt.where(Job.is_vacancy.is_(True))

        if search:
            stmt = stmt.where(or_(
                Job.title.icontains(search, autoescape=True),
                Job.company.icontains(search, autoescape=True),
                Job.description.icontains(search, autoescape=True),
            ))

        if is_remote is not None:
            stmt = stmt.where(Job.is_remote.is_(is_remote))

        if grade:
            stmt = stmt.where(Job.grade.icontains(grade, autoescape=True))

        stmt = stmt.order_by(Job.created.desc(), Job.id).limit(limit).offset(offset)
        return list(self.db.execute(stmt).scalars().all())
