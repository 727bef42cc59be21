import contextlib
import logging
from typing import Callable, Iterator, Optional

from sqlalchemy.orm import Session

from database.repositories import JobRepository

logger = logging.getLogger(__name__)


@contextlib.contextmanager
def job_uow(session_factory: Optional[Callable[[], Session]] = None) -> Iterator[JobRepository]:
    """Per-unit-of-work transaction scope.

    Yields a JobRepository bound to a fresh Session. Commits on success,
    rolls back on exception, always closes.

    Usage:
        with job_uow() as repo:
            job = repo.get_by_id(job_id)
            # perform operations...
        # commit happens automatically on successful exit
    """
    if session_factory is None:
        from database.database import SessionLocal
        session_factory = SessionLocal

    session = session_factory()
    try:
        repo = JobRepository(session)
        yield repo
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
