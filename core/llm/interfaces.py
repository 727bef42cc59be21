"""
LLM Provider Interface - Abstract base for AI service providers.

This module defines the interface the ingestion pipeline relies on, so any
OpenAI-compatible backend (OpenAI, LiteLLM proxy, Ollama, etc.) can be
swapped in.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, Union

from etl.schema_models import VacancyAnalysis


class LLMProvider(ABC):
    """
    Abstract Interface for AI Service Providers.
    """

    @abstractmethod
    def analyze_vacancy(self, text: str) -> VacancyAnalysis:
        """
        Extract structured vacancy fields from raw message text.

        Raises:
            SchemaViolation: the response does not match the job parser schema
            EmptyResponse: the provider returned no choices
        """
        pass

    @abstractmethod
    def generate_offer(self, cv: Union[str, Dict[str, Any]], job_description: str) -> str:
        """
        Generate a first-touch message for a job description.

        Returns an empty string when the provider produced no choices.
        """
        pass
