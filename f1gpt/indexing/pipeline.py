"""
Ingestion pipeline: fetch pages, normalise, chunk, embed, and insert into the vector store.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field, replace
from typing import List, Sequence, Tuple

from tqdm import tqdm

from f1gpt.embeddings.client import EmbeddingsClient
from f1gpt.errors import RagError
from f1gpt.indexing.chunker import DEFAULT_CHUNK_OVERLAP, DEFAULT_CHUNK_SIZE, Chunk, chunk_document
from f1gpt.indexing.loader import DocumentLoader
from f1gpt.indexing.normalizer import normalize
from f1gpt.vector_store.base import SimilarityMetric, StoredRecord, VectorStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IngestionContext:
    """State handed from stage to stage for one source URL."""

    url: str
    text: str = ""
    chunks: Tuple[Chunk, ...] = ()
    indexed: int = 0


@dataclass
class IngestionSummary:
    documents: int = 0
    indexed_chunks: int = 0
    failed_urls: List[str] = field(default_factory=list)
    elapsed_sec: float = 0.0


class IngestionService:
    """
    Sequential ingestion: one document at a time, one chunk at a time.

    With ``continue_on_error`` a failing document is logged and skipped; otherwise
    the first failure aborts the run.
    """

    def __init__(
        self,
        loader: DocumentLoader,
        embeddings_client: EmbeddingsClient,
        vector_store: VectorStore,
        collection_name: str,
        dimension: int,
        metric: SimilarityMetric = SimilarityMetric.DOT_PRODUCT,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        overlap: int = DEFAULT_CHUNK_OVERLAP,
        continue_on_error: bool = False,
        logger_: logging.Logger | None = None,
    ) -> None:
        self.loader = loader
        self.embeddings_client = embeddings_client
        self.vector_store = vector_store
        self.collection_name = collection_name
        self.dimension = dimension
        self.metric = metric
        self.chunk_size = chunk_size
        self.overlap = overlap
        self.continue_on_error = continue_on_error
        self.logger = logger_ or logging.getLogger(__name__)

    # --- Stages ---
    def load(self, context: IngestionContext) -> IngestionContext:
        document = self.loader.fetch(context.url)
        return replace(context, text=document.raw_content)

    def normalize(self, context: IngestionContext) -> IngestionContext:
        return replace(context, text=normalize(context.text))

    def chunk(self, context: IngestionContext) -> IngestionContext:
        chunks = chunk_document(context.url, context.text, self.chunk_size, self.overlap)
        return replace(context, chunks=tuple(chunks))

    def index(self, context: IngestionContext) -> IngestionContext:
        for chunk in context.chunks:
            vector = self.embeddings_client.embed_text(chunk.text)
            self.vector_store.insert(
                self.collection_name,
                StoredRecord(vector=vector, text=chunk.text, source_url=chunk.source_url, sequence=chunk.sequence),
            )
        return replace(context, indexed=len(context.chunks))

    def ingest_document(self, url: str) -> IngestionContext:
        context = IngestionContext(url=url)
        for stage in (self.load, self.normalize, self.chunk, self.index):
            context = stage(context)
        self.logger.info("Document ingested", extra={"url": url, "chunks": context.indexed})
        return context

    # --- Run ---
    def run(self, urls: Sequence[str]) -> IngestionSummary:
        started = time.time()
        self.vector_store.create_collection(self.collection_name, self.dimension, self.metric)

        summary = IngestionSummary()
        for url in tqdm(urls, desc="Ingesting", unit="page"):
            try:
                context = self.ingest_document(url)
            except RagError as exc:
                if not self.continue_on_error:
                    raise
                self.logger.error("Document ingestion failed, skipping", extra={"url": url, "error": exc.to_dict()})
                summary.failed_urls.append(url)
                continue
            summary.documents += 1
            summary.indexed_chunks += context.indexed

        summary.elapsed_sec = time.time() - started
        self.logger.info(
            "Ingestion completed",
            extra={
                "documents": summary.documents,
                "indexed_chunks": summary.indexed_chunks,
                "failed": len(summary.failed_urls),
                "elapsed_sec": round(summary.elapsed_sec, 2),
            },
        )
        return summary


__all__ = ["IngestionContext", "IngestionSummary", "IngestionService"]
