"""Script-based language detection for offer drafts."""
from typing import List

from core.llm.system_prompts import OFFER_CTA_FRAGMENTS

SUPPORTED_LANGUAGES = ("en", "ru")


def _is_cyrillic(ch: str) -> bool:
    return "Ѐ" <= ch <= "ӿ"


def detect_language(text: str) -> str:
    """Return 'ru' when Cyrillic letters outnumber Latin ones, else 'en'.

    Only letters are counted, so tech names ("Docker", "K8s") in a Russian
    posting do not flip the result unless they dominate.
    """
    cyrillic = latin = 0
    for ch in text or "":
        if not ch.isalpha():
            continue
        if _is_cyrillic(ch):
            cyrillic += 1
        elif ch.isascii():
            latin += 1
    return "ru" if cyrillic > latin else "en"


def foreign_cta_fragments(message: str, job_description: str) -> List[str]:
    """CTA phrases from the wrong language template found in ``message``.

    The expected language is the job description's. An empty list means the
    draft does not mix template phrases across languages.
    """
    expected = detect_language(job_description)
    found = []
    for language, fragments in OFFER_CTA_FRAGMENTS.items():
        if language == expected:
            continue
        found.extend(f for f in fragments if f.casefold() in (message or "").casefold())
    return found
