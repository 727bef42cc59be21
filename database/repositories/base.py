from sqlalchemy.orm import Session


class BaseRepository:
    """Wraps the session of one unit of work.

    Repositories flush so constraint errors surface at the call site;
    committing is left to job_uow() or the caller that owns the session.
    """

    def __init__(self, db: Session):
        self.db = db

    def flush(self) -> None:
        self.db.flush()

    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()
