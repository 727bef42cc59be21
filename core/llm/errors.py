"""
LLM service errors.

Provider failures (transport, auth, rate limit) are not wrapped: the
``openai`` exceptions reach the caller unchanged. ``ProviderError`` is the
root of that hierarchy, exported here so callers can catch it without
importing the SDK.
"""
from typing import Any, List, Optional

from openai import OpenAIError

ProviderError = OpenAIError


class LLMServiceError(Exception):
    """Base class for errors raised by the LLM layer itself."""


class SchemaViolation(LLMServiceError):
    """The model's response does not decode into the expected structure."""

    def __init__(self, message: str, raw_payload: Any, errors: Optional[List[str]] = None):
        super().__init__(message)
        self.raw_payload = raw_payload
        self.errors = errors or []


class EmptyResponse(LLMServiceError):
    """The provider returned no completion choices."""


class VacancyRuleViolation(LLMServiceError):
    """A decoded payload breaks a business rule (vacancy without a title)."""

    def __init__(self, message: str, raw_payload: Any):
        super().__init__(message)
        self.raw_payload = raw_payload
