import uuid

from sqlalchemy import Column, Integer, BigInteger, Text, TIMESTAMP, Boolean, JSON, Uuid, UniqueConstraint, Index, func
from sqlalchemy.dialects.postgresql import JSONB

from .base import Base

# JSONB on Postgres, plain JSON elsewhere (SQLite in tests)
JSONType = JSON().with_variant(JSONB(), "postgresql")


class Job(Base):
    __tablename__ = 'jobs'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    # Source message coordinates (dedup by identifier pair)
    channel_id = Column(Text)
    message_id = Column(BigInteger)
    # Content fingerprint (dedup by text)
    hash = Column(Text)

    # Classification
    is_vacancy = Column(Boolean, nullable=False, default=False)

    # Descriptive fields
    title = Column(Text, nullable=False, default='')
    company = Column(Text, nullable=False, default='')
    grade = Column(Text, nullable=False, default='')
    location = Column(Text, nullable=False, default='')
    description = Column(Text, nullable=False, default='')

    # Compensation (0 = unspecified)
    salary_min = Column(Integer, nullable=False, default=0)
    salary_max = Column(Integer, nullable=False, default=0)
    currency = Column(Text, nullable=False, default='')

    skills = Column(JSONType, nullable=False, default=list)
    is_remote = Column(Boolean, nullable=False, default=False)

    # Provenance
    url = Column(Text)
    original_text = Column(Text, nullable=False)
    raw = Column(JSONType)

    created = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())
    updated = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        UniqueConstraint('channel_id', 'message_id', name='uq_jobs_source_message'),
        Index('uq_jobs_hash', 'hash', unique=True),
        Index('idx_jobs_created', 'created'),
        Index('idx_jobs_is_remote', 'is_remote'),
    )

    def __repr__(self) -> str:
        return f"<Job id={self.id} title={self.title!r} vacancy={self.is_vacancy}>"
