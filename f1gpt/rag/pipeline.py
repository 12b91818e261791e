"""
RAG pipeline: extract the question, retrieve context, build the instruction, stream the answer.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import AsyncGenerator, Dict, List, Sequence

from f1gpt.embeddings.client import EmbeddingsClient
from f1gpt.errors import MalformedRequestError
from f1gpt.llm.client import LLMClient
from f1gpt.models.schemas import ConversationMessage, resolve_text
from f1gpt.vector_store.base import SearchResult, VectorStore

logger = logging.getLogger(__name__)

DEFAULT_TOP_K = 5
DEFAULT_TOPIC = "Formula One"
CONTEXT_SEPARATOR = "\n\n"
GENERATION_ROLES = {"system", "user", "assistant"}

SYSTEM_PROMPT_TEMPLATE = """You are an AI assistant who knows everything about {topic}.
Use the below context to augment what you know about {topic}.
The context will provide you with the most recent page data from Wikipedia,
official websites and other sources.

If the context doesn't include the information you need, answer based on your
existing knowledge and don't mention the source of your information or
what the context does or doesn't include.
Format responses using Markdown where applicable and don't return images.

----------

START CONTEXT
{context}
END CONTEXT

----------"""


@dataclass
class PreparedChat:
    query: str
    results: List[SearchResult] = field(default_factory=list)
    context: str = ""
    system_prompt: str = ""


class ChatService:
    """Per-request coordinator of the query path. Holds no per-request state."""

    def __init__(
        self,
        embeddings_client: EmbeddingsClient,
        vector_store: VectorStore,
        llm_client: LLMClient,
        collection_name: str,
        top_k: int = DEFAULT_TOP_K,
        topic: str = DEFAULT_TOPIC,
        logger_: logging.Logger | None = None,
    ) -> None:
        self.embeddings_client = embeddings_client
        self.vector_store = vector_store
        self.llm_client = llm_client
        self.collection_name = collection_name
        self.top_k = top_k
        self.topic = topic
        self.logger = logger_ or logging.getLogger(__name__)

    # --- Public API ---
    def prepare(self, messages: Sequence[ConversationMessage]) -> PreparedChat:
        """Blocking steps of the query path: extract, embed, retrieve, assemble, instruct."""
        query = self.extract_query(messages)
        results = self.retrieve(query)
        context = self.build_context(results)
        return PreparedChat(
            query=query,
            results=results,
            context=context,
            system_prompt=self.build_system_prompt(context),
        )

    async def stream_answer(self, messages: Sequence[ConversationMessage], prepared: PreparedChat) -> AsyncGenerator[str, None]:
        return await self.llm_client.stream_chat(self.to_generation_messages(messages), prepared.system_prompt)

    # --- Steps ---
    @staticmethod
    def extract_query(messages: Sequence[ConversationMessage]) -> str:
        for message in reversed(messages):
            if message.role == "user":
                return resolve_text(message)
        raise MalformedRequestError(details={"messages": len(messages)})

    def retrieve(self, query: str) -> List[SearchResult]:
        if not query.strip():
            self.logger.info("Blank query, skipping retrieval")
            return []

        embedding = self.embeddings_client.embed_text(query)
        results = self.vector_store.search(self.collection_name, embedding, k=self.top_k)
        self.logger.info(
            "Retrieved chunks",
            extra={
                "collection": self.collection_name,
                "requested": self.top_k,
                "returned": len(results),
                "top_score": round(results[0].score, 3) if results else None,
                "first_result": results[0].record.text[:200] if results else None,
            },
        )
        return results

    @staticmethod
    def build_context(results: Sequence[SearchResult]) -> str:
        return CONTEXT_SEPARATOR.join(result.record.text for result in results)

    def build_system_prompt(self, context: str) -> str:
        return SYSTEM_PROMPT_TEMPLATE.format(topic=self.topic, context=context)

    @staticmethod
    def to_generation_messages(messages: Sequence[ConversationMessage]) -> List[Dict[str, str]]:
        converted: List[Dict[str, str]] = []
        for message in messages:
            if message.role not in GENERATION_ROLES:
                continue
            text = resolve_text(message)
            if text:
                converted.append({"role": message.role, "content": text})
        return converted


__all__ = ["ChatService", "PreparedChat", "SYSTEM_PROMPT_TEMPLATE", "DEFAULT_TOP_K"]
