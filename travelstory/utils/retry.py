"""Retry policy for calls to the text generation service.

Applied as a decorator on the raw backend call of LLMClient so the
pipeline functions stay free of retry logic. Transient failures (timeouts,
dropped connections, rate limits, 5xx) are retried; anything else, such as
a rejected prompt or a bad API key, fails on the first attempt.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable

import anthropic
import openai
import requests
from tenacity import (
    after_log,
    before_log,
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

GENERATION_ATTEMPTS = 5
MAX_BACKOFF_SECONDS = 30

# 429 covers provider rate limits and quota throttling
TRANSIENT_STATUS_CODES = frozenset({408, 409, 425, 429})

_TRANSIENT_NETWORK_ERRORS = (
    asyncio.TimeoutError,
    TimeoutError,
    # APITimeoutError subclasses APIConnectionError in both SDKs
    openai.APIConnectionError,
    anthropic.APIConnectionError,
    requests.exceptions.Timeout,
    requests.exceptions.ConnectionError,
    requests.exceptions.ChunkedEncodingError,
)


def _status_of(exception: BaseException):
    """HTTP status carried by an SDK APIStatusError or a requests HTTPError."""
    status = getattr(exception, "status_code", None)
    if status:
        return status
    response = getattr(exception, "response", None)
    return getattr(response, "status_code", None) if response is not None else None


def is_transient_generation_error(exception: BaseException) -> bool:
    """True when retrying the generation call may succeed."""
    if isinstance(exception, _TRANSIENT_NETWORK_ERRORS):
        return True

    status = _status_of(exception)
    return bool(status) and (status >= 500 or status in TRANSIENT_STATUS_CODES)


def llm_retry(attempts: int = GENERATION_ATTEMPTS) -> Callable:
    """Retry decorator for generation service calls.

    Retries transient errors with exponential backoff and reraises the last
    error once `attempts` calls have failed.
    """
    retry_logger = logging.getLogger(f"{__name__}.llm")
    return retry(
        reraise=True,
        stop=stop_after_attempt(attempts),
        wait=wait_exponential(multiplier=1, min=1, max=MAX_BACKOFF_SECONDS),
        retry=retry_if_exception(is_transient_generation_error),
        before=before_log(retry_logger, logging.DEBUG),
        after=after_log(retry_logger, logging.WARNING),
    )
