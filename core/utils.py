import hashlib
import logging
import re
import unicodedata
from typing import Any, Optional

logger = logging.getLogger(__name__)

_WHITESPACE_RE = re.compile(r"\s+")


class MessageFingerprinter:
    """
    Pure logic for creating deterministic dedup keys for source messages.
    """

    @staticmethod
    def normalize(text: str) -> str:
        """
        Normalize message text before hashing.
        Steps: Unicode NFKC, casefold, collapse whitespace runs to one space, strip.
        """
        normalized = unicodedata.normalize("NFKC", text or "")
        normalized = normalized.casefold()
        return _WHITESPACE_RE.sub(" ", normalized).strip()

    @staticmethod
    def calculate(text: str) -> str:
        """
        Create a deterministic hash of the message content.
        Formula: SHA256(normalize(text)), hex encoded.
        """
        return hashlib.sha256(MessageFingerprinter.normalize(text).encode('utf-8')).hexdigest()

    @staticmethod
    def source_key(channel_id: Any, message_id: Any) -> Optional[str]:
        """
        Key for the (channel, message) pair, or None unless both are present.
        """
        channel = str(channel_id).strip() if channel_id is not None else ""
        message = str(message_id).strip() if message_id is not None else ""
        if not channel or not message:
            return None
        return f"{channel}:{message}"
