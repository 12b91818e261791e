"""
OpenAI chat LLM client (streaming only).
"""

from __future__ import annotations

import logging
from typing import Any, AsyncGenerator, Dict, List, Sequence

import openai
from openai import AsyncOpenAI
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential
from tenacity.wait import wait_base

from f1gpt.errors import RateLimitError, translate_openai_error

DEFAULT_LLM_MODEL = "gpt-4.1-mini"
DEFAULT_TEMPERATURE = 0.0
DEFAULT_MAX_ATTEMPTS = 3

logger = logging.getLogger(__name__)


class LLMClient:
    def __init__(
        self,
        api_key: str | None = None,
        model: str = DEFAULT_LLM_MODEL,
        temperature: float = DEFAULT_TEMPERATURE,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        client: AsyncOpenAI | None = None,
        retry_wait: wait_base | None = None,
    ) -> None:
        self.model = model
        self.temperature = temperature
        self.max_attempts = max_attempts
        self.retry_wait = retry_wait or wait_exponential(multiplier=1, min=1, max=20)
        self.client = client or AsyncOpenAI(api_key=api_key, max_retries=0)

    async def stream_chat(self, messages: Sequence[Dict[str, Any]], system_prompt: str) -> AsyncGenerator[str, None]:
        """
        Open a streamed completion and return an iterator over its text deltas.

        The provider request is made before this coroutine returns, so connection,
        auth and throttling failures surface here rather than mid-stream. The
        returned iterator closes the provider stream when it is closed or cancelled.
        """
        payload: List[Dict[str, Any]] = [{"role": "system", "content": system_prompt}, *messages]

        async for attempt in AsyncRetrying(
            reraise=True,
            stop=stop_after_attempt(self.max_attempts),
            wait=self.retry_wait,
            retry=retry_if_exception_type(RateLimitError),
        ):
            with attempt:
                stream = await self._open_stream(payload)

        logger.info("Generation stream opened", extra={"model": self.model, "messages": len(payload)})
        return self._iter_tokens(stream)

    async def _open_stream(self, payload: List[Dict[str, Any]]):
        try:
            return await self.client.chat.completions.create(
                model=self.model,
                temperature=self.temperature,
                messages=payload,
                stream=True,
            )
        except openai.OpenAIError as exc:
            raise translate_openai_error(exc, "chat completion") from exc

    async def _iter_tokens(self, stream) -> AsyncGenerator[str, None]:
        async with stream:
            try:
                async for event in stream:
                    if not event.choices:
                        continue
                    delta = event.choices[0].delta.content
                    if delta:
                        yield delta
            except openai.OpenAIError as exc:
                raise translate_openai_error(exc, "chat completion stream") from exc


__all__ = ["LLMClient", "DEFAULT_LLM_MODEL", "DEFAULT_TEMPERATURE"]
