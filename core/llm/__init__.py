"""LLM Module - LLM services and interfaces."""
from core.llm.errors import (
    EmptyResponse,
    LLMServiceError,
    ProviderError,
    SchemaViolation,
    VacancyRuleViolation,
)
from core.llm.interfaces import LLMProvider
from core.llm.openai_service import OpenAIService

__all__ = [
    'LLMProvider',
    'OpenAIService',
    'LLMServiceError',
    'ProviderError',
    'SchemaViolation',
    'EmptyResponse',
    'VacancyRuleViolation',
]
