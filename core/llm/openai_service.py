"""
OpenAI Service - LLM implementation using an OpenAI-compatible chat API.

Provides schema-constrained vacancy extraction and free-form offer
generation. Provider errors are propagated unchanged; retrying is the
caller's job (see core/llm/retry.py).
"""
from typing import Dict, Any, Optional, Tuple, Union
import json
import logging
import copy

from openai import OpenAI
from pydantic import ValidationError

from core.llm.errors import EmptyResponse, SchemaViolation
from core.llm.interfaces import LLMProvider
from core.llm.system_prompts import (
    DEFAULT_PROMPT_VERSION,
    get_vacancy_parser_prompt,
    render_offer_prompt,
)
from etl.schemas import JOB_PARSER_SCHEMA
from etl.schema_models import JobParsedData, VacancyAnalysis

logger = logging.getLogger(__name__)


def _unwrap_schema_spec(spec: Dict[str, Any]) -> Tuple[str, bool, Dict[str, Any]]:
    """Unwrap a schema spec to extract name, strict flag, and raw JSON schema.

    Args:
        spec: Either a wrapped spec {'name': str, 'strict': bool, 'schema': {...}}
              or a raw JSON schema dict

    Returns:
        Tuple of (name, strict, raw_schema)
    """
    if isinstance(spec, dict) and "schema" in spec and "name" in spec:
        return spec.get("name", "extraction_response"), bool(spec.get("strict", False)), spec["schema"]
    return "extraction_response", False, spec


def _format_validation_errors(exc: ValidationError) -> list:
    return [
        f"{'.'.join(str(part) for part in err['loc']) or '<root>'}: {err['msg']}"
        for err in exc.errors()
    ]


class OpenAIService(LLMProvider):
    """
    OpenAI LLM Service.

    One instance is built at startup (see core/app_context.py) and passed to
    whatever needs it; it holds the HTTP client and its connection pool.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        model_config: Optional[Dict[str, Any]] = None,
        offer_persona: Optional[Dict[str, str]] = None,
    ):
        # Explicit values win; otherwise the SDK reads OPENAI_API_KEY / OPENAI_BASE_URL.
        client_kwargs = {}
        if api_key:
            client_kwargs['api_key'] = api_key
        if base_url:
            client_kwargs['base_url'] = base_url

        self.client = OpenAI(**client_kwargs)

        self.model_config = model_config or {}
        self.extraction_model = self.model_config.get('extraction_model', 'gpt-4o-mini')
        self.generation_model = self.model_config.get('generation_model') or self.extraction_model
        self.extraction_temperature = self.model_config.get('extraction_temperature', 0.0)
        self.request_timeout = self.model_config.get('request_timeout_seconds', 60.0)

        self.vacancy_prompt = get_vacancy_parser_prompt(
            self.model_config.get('vacancy_prompt_version', DEFAULT_PROMPT_VERSION)
        )
        persona = offer_persona or {}
        self.offer_prompt = render_offer_prompt(
            sender_name=persona.get('sender_name', ''),
            greeting_name_en=persona.get('greeting_name_en', ''),
            greeting_name_ru=persona.get('greeting_name_ru', ''),
            portfolio_url=persona.get('portfolio_url', ''),
            version=self.model_config.get('offer_prompt_version', DEFAULT_PROMPT_VERSION),
        )

    def close(self) -> None:
        """Release the underlying HTTP connection pool."""
        self.client.close()

    def __enter__(self) -> "OpenAIService":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def analyze_vacancy(self, text: str) -> VacancyAnalysis:
        """Send message text to the LLM and return validated vacancy fields.

        Args:
            text: Raw message text, passed to the model verbatim

        Returns:
            VacancyAnalysis with the validated JobParsedData and the decoded payload

        Raises:
            EmptyResponse: the provider returned no choices
            SchemaViolation: the payload is not JSON or does not match the schema
        """
        name, strict, raw_schema = _unwrap_schema_spec(JOB_PARSER_SCHEMA)

        response = self.client.chat.completions.create(
            model=self.extraction_model,
            messages=[
                {"role": "system", "content": self.vacancy_prompt},
                {"role": "user", "content": text},
            ],
            temperature=self.extraction_temperature,
            response_format={
                "type": "json_schema",
                "json_schema": {
                    "name": name,
                    "schema": copy.deepcopy(raw_schema),
                    "strict": strict,
                },
            },
            timeout=self.request_timeout,
        )

        if not response.choices:
            raise EmptyResponse(f"No choices returned by {self.extraction_model} for vacancy analysis")

        content = response.choices[0].message.content
        return self._decode_vacancy(content)

    def _decode_vacancy(self, content: Optional[str]) -> VacancyAnalysis:
        if content is None:
            raise SchemaViolation("Vacancy analysis returned no content", raw_payload=None)

        try:
            payload = json.loads(content)
        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse vacancy analysis response: {e}. Raw payload: {content!r}")
            raise SchemaViolation(f"Response is not valid JSON: {e}", raw_payload=content) from e

        if not isinstance(payload, dict):
            logger.error(f"Vacancy analysis response is not an object. Raw payload: {content!r}")
            raise SchemaViolation("Response is not a JSON object", raw_payload=content)

        try:
            data = JobParsedData.model_validate(payload)
        except ValidationError as e:
            errors = _format_validation_errors(e)
            logger.error(f"Vacancy analysis response violates schema: {errors}. Raw payload: {content!r}")
            raise SchemaViolation(
                f"Response does not match the job parser schema ({len(errors)} errors)",
                raw_payload=content,
                errors=errors,
            ) from e

        logger.debug(f"Vacancy analysis ({self.extraction_model}): is_vacancy={data.is_vacancy} title={data.title!r}")
        return VacancyAnalysis(data=data, raw=payload)

    def generate_offer(self, cv: Union[str, Dict[str, Any]], job_description: str) -> str:
        """Create a personalized first-touch message.

        Args:
            cv: CV text, or a structured CV that is serialised to JSON
            job_description: Job description text

        Returns:
            The model's message text verbatim, or "" if no choice came back
        """
        if not isinstance(cv, str):
            cv = json.dumps(cv, ensure_ascii=False)

        response = self.client.chat.completions.create(
            model=self.generation_model,
            messages=[
                {"role": "system", "content": self.offer_prompt},
                {"role": "user", "content": f"CV: {cv}\n\nJob Description: {job_description}"},
            ],
            timeout=self.request_timeout,
        )

        if not response.choices:
            logger.info("Offer generation returned no choices, nothing to send")
            return ""

        return response.choices[0].message.content or ""
