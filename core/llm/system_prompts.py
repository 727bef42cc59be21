"""
System prompts for the vacancy parser and the offer writer.

Prompt text lives in versioned template files under ``core/llm/prompts``
(``<name>.<version>.txt``) so wording changes are reviewed like any other
data change. This module only loads and renders them.
"""
from functools import lru_cache
from pathlib import Path

PROMPTS_DIR = Path(__file__).parent / "prompts"

VACANCY_PARSER_PROMPT = "vacancy_parser"
OFFER_WRITER_PROMPT = "offer_writer"

DEFAULT_PROMPT_VERSION = "v1"

# Fixed phrases the offer writer is told to use, per language.
OFFER_CTA_FRAGMENTS = {
    "en": ["Open to chat?"],
    "ru": ["Буду рад пообщаться."],
}


@lru_cache(maxsize=None)
def load_prompt(name: str, version: str = DEFAULT_PROMPT_VERSION) -> str:
    """Read a prompt template from disk.

    Raises:
        FileNotFoundError: if no template exists for ``name`` and ``version``.
    """
    path = PROMPTS_DIR / f"{name}.{version}.txt"
    if not path.exists():
        raise FileNotFoundError(f"Prompt template not found: {path.name}")
    return path.read_text(encoding="utf-8").strip()


def get_vacancy_parser_prompt(version: str = DEFAULT_PROMPT_VERSION) -> str:
    return load_prompt(VACANCY_PARSER_PROMPT, version)


def render_offer_prompt(
    sender_name: str,
    greeting_name_en: str,
    greeting_name_ru: str,
    portfolio_url: str,
    version: str = DEFAULT_PROMPT_VERSION,
) -> str:
    """Render the offer-writer prompt with the sender's persona."""
    template = load_prompt(OFFER_WRITER_PROMPT, version)
    return template.format(
        sender_name=sender_name,
        greeting_name_en=greeting_name_en,
        greeting_name_ru=greeting_name_ru,
        portfolio_url=portfolio_url,
    )
