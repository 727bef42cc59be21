from dataclasses import dataclass

from core.config_loader import AppConfig, LlmConfig, OfferConfig
from core.llm.openai_service import OpenAIService
from etl.orchestrator import JobETLService


@dataclass
class AppContext:
    """Application context container that holds all wired dependencies.

    Built once at startup; the AI service is an explicit value passed to the
    ETL service rather than a process-wide client. DB access should be
    obtained via job_uow() inside each operation.
    """
    config: AppConfig
    ai_service: OpenAIService
    job_etl_service: JobETLService

    @classmethod
    def build(cls, config: AppConfig) -> "AppContext":
        """Build an AppContext from config.

        Args:
            config: Loaded application configuration

        Returns:
            Fully wired AppContext instance (no DB session attached)
        """
        ai_service = cls._build_ai_service(config.llm, config.offer)

        # ETL Service (does not hold repo - repo passed per-operation)
        job_etl_service = JobETLService(ai_service, max_retries=config.llm.max_retries)

        return cls(
            config=config,
            ai_service=ai_service,
            job_etl_service=job_etl_service,
        )

    @staticmethod
    def _build_ai_service(llm_config: LlmConfig, offer_config: OfferConfig) -> OpenAIService:
        """Build OpenAI service from LLM configuration."""
        model_config = {
            'extraction_model': llm_config.extraction_model,
            'generation_model': llm_config.generation_model,
            'extraction_temperature': llm_config.extraction_temperature,
            'request_timeout_seconds': llm_config.request_timeout_seconds,
            'vacancy_prompt_version': llm_config.vacancy_prompt_version,
            'offer_prompt_version': llm_config.offer_prompt_version,
        }

        return OpenAIService(
            api_key=llm_config.api_key,
            base_url=llm_config.base_url,
            model_config=model_config,
            offer_persona=offer_config.persona(),
        )

    def close(self) -> None:
        self.ai_service.close()
