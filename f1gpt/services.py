"""
Long-lived service handles, built once per process and passed around explicitly.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from f1gpt.config import Settings
from f1gpt.embeddings.client import EmbeddingsClient
from f1gpt.indexing.loader import BrowserPageLoader, DocumentLoader
from f1gpt.indexing.pipeline import IngestionService
from f1gpt.llm.client import LLMClient
from f1gpt.rag.pipeline import ChatService
from f1gpt.vector_store import get_vector_store
from f1gpt.vector_store.base import SimilarityMetric, VectorStore

logger = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    settings: Settings
    embeddings_client: EmbeddingsClient
    vector_store: VectorStore
    llm_client: LLMClient

    @property
    def collection_name(self) -> str:
        return self.settings.vector_store_collection or ""

    def chat_service(self, logger_: logging.Logger | None = None) -> ChatService:
        return ChatService(
            embeddings_client=self.embeddings_client,
            vector_store=self.vector_store,
            llm_client=self.llm_client,
            collection_name=self.collection_name,
            top_k=self.settings.retrieval_top_k,
            topic=self.settings.assistant_topic,
            logger_=logger_,
        )

    def ingestion_service(
        self,
        loader: DocumentLoader,
        continue_on_error: bool = False,
        logger_: logging.Logger | None = None,
    ) -> IngestionService:
        return IngestionService(
            loader=loader,
            embeddings_client=self.embeddings_client,
            vector_store=self.vector_store,
            collection_name=self.collection_name,
            dimension=self.settings.embedding_dimension,
            metric=SimilarityMetric(self.settings.similarity_metric),
            chunk_size=self.settings.chunk_size_chars,
            overlap=self.settings.chunk_overlap_chars,
            continue_on_error=continue_on_error,
            logger_=logger_,
        )


def build_services(settings: Settings) -> ServiceContainer:
    """Construct the embedding, vector store and generation clients from settings."""
    api_key = settings.openai_api_key.get_secret_value() if settings.openai_api_key else None
    container = ServiceContainer(
        settings=settings,
        embeddings_client=EmbeddingsClient(
            api_key=api_key,
            model=settings.embedding_model_name,
            dimension=settings.embedding_dimension,
            max_attempts=settings.provider_max_attempts,
        ),
        vector_store=get_vector_store(settings),
        llm_client=LLMClient(
            api_key=api_key,
            model=settings.llm_model_name,
            max_attempts=settings.provider_max_attempts,
        ),
    )
    logger.info(
        "Services initialised",
        extra={"backend": settings.vector_store_backend, "collection": container.collection_name},
    )
    return container


def browser_loader(settings: Settings) -> BrowserPageLoader:
    return BrowserPageLoader(timeout_sec=settings.page_load_timeout_sec)


__all__ = ["ServiceContainer", "build_services", "browser_loader"]
