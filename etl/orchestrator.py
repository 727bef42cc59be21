from typing import Any, Callable, ContextManager, Dict, Iterable, List, Optional, Tuple, Union
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
import logging
import json
import os
import uuid

from sqlalchemy.exc import IntegrityError

from core.llm.errors import VacancyRuleViolation
from core.llm.interfaces import LLMProvider
from core.llm.language import foreign_cta_fragments
from core.llm.retry import llm_retrying
from core.locks import KeyedLock
from core.utils import MessageFingerprinter
from database.models import Job
from database.repositories import JobRepository
from database.uow import job_uow

logger = logging.getLogger(__name__)

MATCHED_BY_SOURCE = "source_message"
MATCHED_BY_HASH = "hash"


class JobNotFoundError(LookupError):
    """Raised when a job id does not exist in the store."""


@dataclass
class InboundMessage:
    """A raw message as it arrives from a channel."""
    text: str
    channel_id: Optional[str] = None
    message_id: Optional[int] = None
    url: Optional[str] = None

    @property
    def source_key(self) -> Optional[str]:
        return MessageFingerprinter.source_key(self.channel_id, self.message_id)

    @property
    def content_hash(self) -> str:
        return MessageFingerprinter.calculate(self.text)

    def lock_keys(self) -> List[str]:
        keys = [f"hash:{self.content_hash}"]
        if self.source_key:
            keys.append(f"source:{self.source_key}")
        return keys

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "InboundMessage":
        message_id = data.get('message_id')
        return cls(
            text=data.get('text') or '',
            channel_id=str(data['channel_id']) if data.get('channel_id') not in (None, '') else None,
            message_id=int(message_id) if message_id not in (None, '') else None,
            url=data.get('url'),
        )


class IngestStatus(str, Enum):
    CREATED = "created"
    DUPLICATE = "duplicate"
    FAILED = "failed"


@dataclass
class IngestResult:
    status: IngestStatus
    job_id: Optional[uuid.UUID] = None
    matched_by: Optional[str] = None
    error: Optional[str] = None


def load_cv(path: str) -> Union[str, Dict[str, Any]]:
    """Load a CV file: JSON files are parsed, anything else is read as text."""
    with open(path, 'r', encoding='utf-8') as f:
        content = f.read()
    if os.path.splitext(path)[1].lower() == '.json':
        return json.loads(content)
    return content


class JobETLService:
    """Service for ingesting messages and drafting offers.

    Per-item methods (``ingest_one``, ``draft_offer``) expect a repository
    from a job_uow() context and leave commits to the UoW. ``ingest`` and
    ``ingest_many`` open their own units of work.

    Usage:
        service = JobETLService(ai_service)
        result = service.ingest(InboundMessage(text, channel_id="-100123", message_id=42))
    """

    def __init__(
        self,
        ai_service: LLMProvider,
        uow_factory: Callable[[], ContextManager[JobRepository]] = job_uow,
        max_retries: int = 1,
        locks: Optional[KeyedLock] = None
    ):
        self.ai = ai_service
        self.uow_factory = uow_factory
        self.max_retries = max_retries
        self.locks = locks or KeyedLock()

    def _call_llm(self, fn: Callable[..., Any], *args) -> Any:
        return llm_retrying(self.max_retries)(fn, *args)

    def find_duplicate(
        self,
        repo: JobRepository,
        message: InboundMessage,
        content_hash: Optional[str] = None
    ) -> Tuple[Optional[Job], Optional[str]]:
        """Look up an existing job for this message.

        The (channel, message) pair is checked first when both are present;
        the content hash is checked next so reposts of identical text under
        new ids are caught too.

        Returns:
            (job, matched_by) or (None, None)
        """
        if message.source_key:
            job = repo.get_by_source(message.channel_id, message.message_id)
            if job is not None:
                return job, MATCHED_BY_SOURCE

        job = repo.get_by_hash(content_hash or message.content_hash)
        if job is not None:
            return job, MATCHED_BY_HASH

        return None, None

    def ingest_one(self, repo: JobRepository, message: InboundMessage) -> IngestResult:
        """Ingest a single message.

        Args:
            repo: JobRepository instance (provided by UoW)
            message: Raw inbound message

        Raises:
            ValueError: message text is empty
            SchemaViolation, EmptyResponse: extraction output unusable
            VacancyRuleViolation: vacancy without a title
            openai.OpenAIError: provider failure after retries
        """
        if not message.text or not message.text.strip():
            raise ValueError("Message text is empty")

        # 1. Fingerprint
        content_hash = message.content_hash

        # 2. Duplicate Check (before any LLM call)
        existing, matched_by = self.find_duplicate(repo, message, content_hash)
        if existing is not None:
            logger.info(f"Duplicate message ({matched_by}) for job {existing.id}, skipping")
            return IngestResult(IngestStatus.DUPLICATE, existing.id, matched_by)

        # 3. Extraction
        analysis = self._call_llm(self.ai.analyze_vacancy, message.text)
        data = analysis.data
        if data.is_vacancy and not data.title.strip():
            raise VacancyRuleViolation(
                "Extraction marked the message as a vacancy but returned an empty title",
                raw_payload=analysis.raw,
            )

        # 4. Persist
        fields = data.to_job_fields()
        fields.update(
            channel_id=message.channel_id,
            message_id=message.message_id,
            hash=content_hash,
            url=message.url,
            original_text=message.text,
            raw=analysis.raw,
        )
        try:
            job = repo.create(fields)
        except IntegrityError:
            # Another writer stored the same dedup key first.
            repo.rollback()
            existing, matched_by = self.find_duplicate(repo, message, content_hash)
            if existing is None:
                raise
            logger.info(f"Lost insert race ({matched_by}) for job {existing.id}, skipping")
            return IngestResult(IngestStatus.DUPLICATE, existing.id, matched_by)

        if data.is_vacancy:
            logger.info(f"New vacancy: {job.title} at {job.company or 'unknown company'} ({job.id})")
        else:
            logger.info(f"Stored non-vacancy message {job.id}")
        return IngestResult(IngestStatus.CREATED, job.id)

    def ingest(self, message: InboundMessage) -> IngestResult:
        """Ingest one message in its own unit of work.

        The message's dedup keys are locked for the whole check-extract-commit
        sequence, so concurrent calls for the same source run one at a time.
        """
        with self.locks.hold(*message.lock_keys()):
            with self.uow_factory() as repo:
                return self.ingest_one(repo, message)

    def _ingest_safely(self, message: InboundMessage) -> IngestResult:
        try:
            return self.ingest(message)
        except Exception as e:
            logger.error(f"Failed to ingest message {message.source_key or message.content_hash[:16]}: {e}")
            return IngestResult(IngestStatus.FAILED, error=str(e))

    def ingest_many(self, messages: Iterable[InboundMessage], max_workers: int = 1) -> List[IngestResult]:
        """Ingest a batch; failures are logged and reported per message."""
        messages = list(messages)
        if max_workers <= 1:
            results = [self._ingest_safely(m) for m in messages]
        else:
            with ThreadPoolExecutor(max_workers=max_workers) as executor:
                results = list(executor.map(self._ingest_safely, messages))

        created = sum(1 for r in results if r.status == IngestStatus.CREATED)
        duplicates = sum(1 for r in results if r.status == IngestStatus.DUPLICATE)
        failed = sum(1 for r in results if r.status == IngestStatus.FAILED)
        logger.info(f"Ingested {len(results)} messages: {created} new, {duplicates} duplicates, {failed} failed")
        return results

    def draft_offer(self, repo: JobRepository, job_id: Any, cv: Union[str, Dict[str, Any]]) -> str:
        """Generate a first-touch message for a stored job.

        The job's original text is used as the job description.

        Raises:
            JobNotFoundError: no job with this id
        """
        job = repo.get_by_id(job_id)
        if job is None:
            raise JobNotFoundError(f"Job {job_id} not found")
        if not job.is_vacancy:
            logger.warning(f"Job {job.id} is not classified as a vacancy, drafting anyway")

        message = self._call_llm(self.ai.generate_offer, cv, job.original_text)
        if not message:
            logger.info(f"No offer produced for job {job.id}")
            return message

        foreign = foreign_cta_fragments(message, job.original_text)
        if foreign:
            logger.warning(f"Offer for job {job.id} mixes languages, found: {foreign}")
        return message
