from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional

import openai
from openai import AsyncOpenAI
from tenacity import AsyncRetrying, RetryError, retry_if_exception_type, stop_after_attempt, wait_exponential

from neuroblog.services.errors import AIServiceUnavailable, AuthorizationDenied, InvalidRequest

logger = logging.getLogger(__name__)

RETRYABLE_STATUS = {503, 529}
RETRYABLE_CODES = {"overloaded", "overloaded_error", "unavailable", "server_overloaded"}
# 1s, 2s, 4s, 8s, then capped at 10s
BACKOFF = wait_exponential(multiplier=1, max=10)


class _RetryableFailure(Exception):
    pass


def _error_code(e: openai.APIStatusError) -> str:
    code = getattr(e, "code", None)
    if not code and isinstance(e.body, dict):
        err = e.body.get("error") if isinstance(e.body.get("error"), dict) else e.body
        code = err.get("code") or err.get("type") or err.get("status")
    return str(code or "").lower()


def classify(e: Exception) -> Exception:
    """
    Map a vendor exception to either a _RetryableFailure (try again)
    or one of our AIServiceUnavailable subclasses (give up now).
    """
    if isinstance(e, (openai.APITimeoutError, asyncio.TimeoutError)):
        return _RetryableFailure(f"timeout: {e}")
    if isinstance(e, openai.BadRequestError):
        return InvalidRequest(str(e))
    if isinstance(e, openai.PermissionDeniedError):
        return AuthorizationDenied(str(e))
    if isinstance(e, openai.APIStatusError):
        if e.status_code in RETRYABLE_STATUS or _error_code(e) in RETRYABLE_CODES:
            return _RetryableFailure(f"status {e.status_code}: {e}")
        return AIServiceUnavailable(f"AI service error {e.status_code}: {e}")
    return AIServiceUnavailable(str(e))


class GenerativeClient:
    def __init__(
        self,
        api_key: str = "",
        model: str = "gpt-4o-mini",
        timeout_s: float = 30.0,
        max_attempts: int = 3,
        client: Any = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.api_key = api_key
        self.client = client
        self.model = model
        self.timeout_s = timeout_s
        self.max_attempts = max_attempts
        self._sleep = sleep

    def _get_client(self):
        # built lazily so a missing key only fails the generation call
        if self.client is None:
            # retries are ours, not the SDK's
            self.client = AsyncOpenAI(api_key=self.api_key or None, max_retries=0)
        return self.client

    def _log_retry(self, retry_state) -> None:
        logger.warning(
            "AI attempt %d failed (%s), retrying in %.1fs",
            retry_state.attempt_number,
            retry_state.outcome.exception(),
            retry_state.next_action.sleep,
        )

    async def _attempt(self, prompt: str, temperature: float, max_tokens: int) -> str:
        try:
            resp = await self._get_client().responses.create(
                model=self.model,
                input=prompt,
                temperature=temperature,
                max_output_tokens=max_tokens,
                timeout=self.timeout_s,
            )
        except Exception as e:
            mapped = classify(e)
            if not isinstance(mapped, _RetryableFailure):
                logger.warning("AI call failed without retry: %s", mapped)
            raise mapped from e

        text = (getattr(resp, "output_text", None) or "").strip()
        if not text:
            raise _RetryableFailure("no valid response")
        return text

    async def generate(
        self,
        prompt: str,
        max_attempts: Optional[int] = None,
        temperature: float = 0.7,
        max_tokens: int = 4096,
    ) -> str:
        attempts = max_attempts or self.max_attempts
        retrying = AsyncRetrying(
            stop=stop_after_attempt(attempts),
            wait=BACKOFF,
            retry=retry_if_exception_type(_RetryableFailure),
            sleep=self._sleep,
            before_sleep=self._log_retry,
        )
        try:
            async for attempt in retrying:
                with attempt:
                    text = await self._attempt(prompt, temperature, max_tokens)
                    logger.info(
                        "AI response received (%d chars, attempt %d)", len(text), attempt.retry_state.attempt_number
                    )
                    return text
        except RetryError as e:
            last = e.last_attempt.exception()
            raise AIServiceUnavailable(f"AI service unavailable after {attempts} attempts: {last}") from last
