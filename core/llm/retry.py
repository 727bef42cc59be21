"""
Caller-side retry policy for LLM API calls.

The LLM clients never retry on their own; the ingestion pipeline wraps each
provider call with ``llm_retrying`` so transient failures (rate limits,
timeouts, dropped connections, 5xx) back off and try again.
"""
import logging
import re

import openai
from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

logger = logging.getLogger(__name__)

RETRYABLE_ERRORS = (
    openai.RateLimitError,
    openai.APITimeoutError,
    openai.APIConnectionError,
    openai.InternalServerError,
)

MAX_RATE_LIMIT_WAIT_SECONDS = 120


def is_retryable(exc: BaseException) -> bool:
    """Return True for transient errors that are worth retrying."""
    return isinstance(exc, RETRYABLE_ERRORS)


def _log_retry(retry_state: RetryCallState) -> None:
    """Log a warning before each retry sleep."""
    exc = retry_state.outcome.exception()
    wait = retry_state.next_action.sleep if retry_state.next_action else 0
    if isinstance(exc, openai.RateLimitError):
        logger.warning(
            "Rate limit hit (attempt %s). Waiting %.1fs before retry. Details: %s",
            retry_state.attempt_number, wait, exc,
        )
    else:
        logger.warning(
            "Transient API error (attempt %s). Waiting %.1fs before retry. Details: %s",
            retry_state.attempt_number, wait, exc,
        )


def parse_reset_duration(value: str) -> float:
    """Parse a reset-timer header value like '1s', '500ms', '1m30s' into seconds."""
    total = 0.0
    for amount, unit in re.findall(r"([\d.]+)(ms|s|m|h)", value or ""):
        a = float(amount)
        if unit == "ms":
            total += a / 1000
        elif unit == "s":
            total += a
        elif unit == "m":
            total += a * 60
        else:  # h
            total += a * 3600
    return total


def wait_from_rate_limit_headers(exc: openai.RateLimitError) -> float:
    """Extract the longest declared wait from rate-limit response headers.

    Reads ``retry-after`` (plain seconds), ``x-ratelimit-reset-requests`` and
    ``x-ratelimit-reset-tokens`` and returns the maximum, or 0.0 if none is
    usable.
    """
    response = getattr(exc, "response", None)
    if response is None:
        return 0.0
    headers = response.headers
    candidates = []

    retry_after = headers.get("retry-after", "")
    if retry_after:
        try:
            candidates.append(float(retry_after))
        except ValueError:
            logger.debug(f"Ignoring non-numeric retry-after header: {retry_after!r}")

    for header in ("x-ratelimit-reset-requests", "x-ratelimit-reset-tokens"):
        parsed = parse_reset_duration(headers.get(header, ""))
        if parsed > 0:
            candidates.append(parsed)

    return max(candidates) if candidates else 0.0


def wait_respecting_retry_after(retry_state: RetryCallState) -> float:
    """Return how long to sleep before the next attempt.

    Rate limits honour server-declared timers (capped); everything else
    falls back to exponential backoff 2 -> 4 -> 8 ... capped at 60s.
    """
    exc = retry_state.outcome.exception()
    if isinstance(exc, openai.RateLimitError):
        wait = wait_from_rate_limit_headers(exc)
        if wait > 0:
            wait = min(wait, MAX_RATE_LIMIT_WAIT_SECONDS)
            logger.info("Rate limit headers indicate %.1fs wait.", wait)
            return wait

    exp = wait_exponential(multiplier=1, min=2, max=60)
    return exp(retry_state)


def llm_retrying(max_attempts: int = 5, **kwargs) -> Retrying:
    """Build a tenacity ``Retrying`` for LLM calls.

    Usage:
        result = llm_retrying(3)(ai.analyze_vacancy, text)

    ``max_attempts=1`` makes a single attempt. The last error is re-raised
    unchanged once attempts run out.
    """
    return Retrying(
        retry=retry_if_exception_type(RETRYABLE_ERRORS),
        wait=wait_respecting_retry_after,
        stop=stop_after_attempt(max(1, max_attempts)),
        before_sleep=_log_retry,
        reraise=True,
        **kwargs,
    )
