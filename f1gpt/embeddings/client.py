"""
OpenAI embeddings client.
"""

from __future__ import annotations

import logging
from typing import List

import openai
from openai import OpenAI
from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential
from tenacity.wait import wait_base

from f1gpt.errors import ProviderError, RateLimitError, translate_openai_error

DEFAULT_EMBEDDING_MODEL = "text-embedding-3-small"
DEFAULT_EMBEDDING_DIMENSION = 1536
DEFAULT_MAX_ATTEMPTS = 3

logger = logging.getLogger(__name__)


class EmbeddingsClient:
    def __init__(
        self,
        api_key: str | None = None,
        model: str = DEFAULT_EMBEDDING_MODEL,
        dimension: int = DEFAULT_EMBEDDING_DIMENSION,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        client: OpenAI | None = None,
        retry_wait: wait_base | None = None,
    ) -> None:
        self.model = model
        self.dimension = dimension
        self.max_attempts = max_attempts
        self.retry_wait = retry_wait or wait_exponential(multiplier=1, min=1, max=20)
        # Retries are owned by embed_text, not by the SDK.
        self.client = client or OpenAI(api_key=api_key, max_retries=0)

    def _embed_once(self, text: str) -> List[float]:
        try:
            response = self.client.embeddings.create(model=self.model, input=text, encoding_format="float")
        except openai.OpenAIError as exc:
            raise translate_openai_error(exc, "embedding") from exc
        return list(response.data[0].embedding)

    def embed_text(self, text: str) -> List[float]:
        """
        Embed one text into a vector of the deployment's fixed dimension.

        Throttling is retried with exponential backoff; anything else propagates.
        """
        for attempt in Retrying(
            reraise=True,
            stop=stop_after_attempt(self.max_attempts),
            wait=self.retry_wait,
            retry=retry_if_exception_type(RateLimitError),
        ):
            with attempt:
                if attempt.retry_state.attempt_number > 1:
                    logger.warning(
                        "Retrying embedding after rate limit",
                        extra={"attempt": attempt.retry_state.attempt_number, "model": self.model},
                    )
                vector = self._embed_once(text)

        if len(vector) != self.dimension:
            raise ProviderError(
                "Embedding dimension mismatch",
                provider="openai",
                details={"model": self.model, "expected": self.dimension, "actual": len(vector)},
            )
        return vector


__all__ = ["EmbeddingsClient", "DEFAULT_EMBEDDING_MODEL", "DEFAULT_EMBEDDING_DIMENSION"]
