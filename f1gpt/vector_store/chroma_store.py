"""
Chroma-based VectorStore implementation.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any, Callable, Dict, List

import chromadb

from f1gpt.errors import ProviderError
from f1gpt.vector_store.base import RecordCount, SearchResult, SimilarityMetric, StoredRecord, VectorStore

# Chroma names the metrics by their HNSW space.
HNSW_SPACES = {
    SimilarityMetric.DOT_PRODUCT: "ip",
    SimilarityMetric.COSINE: "cosine",
    SimilarityMetric.EUCLIDEAN: "l2",
}

logger = logging.getLogger(__name__)


def _distance_to_score(distance: float, metric: SimilarityMetric) -> float:
    # ip and cosine distances are 1 - similarity; l2 is a squared distance.
    if metric is SimilarityMetric.EUCLIDEAN:
        return -float(distance)
    return 1.0 - float(distance)


class ChromaVectorStore(VectorStore):
    def __init__(self, client: chromadb.api.ClientAPI) -> None:
        self.client = client
        self._collections: Dict[str, Any] = {}

    # --- Collections ---
    def create_collection(self, name: str, dimension: int, metric: SimilarityMetric) -> None:
        metric = SimilarityMetric(metric)
        if self._exists(name):
            self._check_configuration(name, dimension, metric)
            logger.info("Collection already exists", extra={"collection": name})
            return

        metadata = {"hnsw:space": HNSW_SPACES[metric], "dimension": dimension, "similarity_metric": metric.value}
        try:
            self._collections[name] = self.client.create_collection(
                name=name, metadata=metadata, embedding_function=None
            )
        except Exception as exc:
            # Lost a creation race with another writer.
            if self._exists(name):
                self._check_configuration(name, dimension, metric)
                return
            raise ProviderError(f"Failed to create collection {name!r}: {exc}", provider="chroma") from exc

        logger.info(
            "Chroma collection created",
            extra={"collection": name, "dimension": dimension, "metric": metric.value},
        )

    def drop_collection(self, name: str) -> None:
        self._collections.pop(name, None)
        if not self._exists(name):
            logger.info("Collection not present, nothing to drop", extra={"collection": name})
            return
        try:
            self.client.delete_collection(name)
        except Exception as exc:
            raise ProviderError(f"Failed to drop collection {name!r}: {exc}", provider="chroma") from exc
        logger.info("Chroma collection dropped", extra={"collection": name})

    # --- Records ---
    def insert(self, collection_name: str, record: StoredRecord) -> None:
        self._check_dimension(self._get_collection(collection_name), record.vector)

        metadata = {
            key: value
            for key, value in (("source_url", record.source_url), ("sequence", record.sequence))
            if value is not None
        }
        self._call(
            collection_name,
            "Insert into",
            lambda collection: collection.add(
                ids=[uuid.uuid4().hex],
                embeddings=[list(record.vector)],
                documents=[record.text],
                metadatas=[metadata] if metadata else None,
            ),
        )

    def search(self, collection_name: str, query_vector: List[float], k: int) -> List[SearchResult]:
        if k <= 0:
            return []

        collection = self._get_collection(collection_name)
        self._check_dimension(collection, query_vector)
        metric = self._metric_of(collection)

        def query(collection):
            total = collection.count()
            if total == 0:
                return None
            return collection.query(
                query_embeddings=[list(query_vector)],
                n_results=min(k, total),
                include=["documents", "metadatas", "distances"],
            )

        result = self._call(collection_name, "Search in", query)
        if result is None:
            return []

        texts = (result.get("documents") or [[]])[0] or []
        metadatas = (result.get("metadatas") or [[]])[0] or [None] * len(texts)
        distances = (result.get("distances") or [[]])[0] or []

        results = [
            SearchResult(record=self._to_record(text, meta), score=_distance_to_score(distance, metric))
            for text, meta, distance in zip(texts, metadatas, distances)
        ]
        results.sort(key=lambda r: r.score, reverse=True)
        return results[:k]

    def sample(self, collection_name: str, limit: int) -> List[StoredRecord]:
        if limit <= 0:
            return []
        result = self._call(
            collection_name,
            "Sampling",
            lambda collection: collection.get(limit=limit, include=["documents", "metadatas"]),
        )

        texts = result.get("documents") or []
        metadatas = result.get("metadatas") or [None] * len(texts)
        return [self._to_record(text, meta) for text, meta in zip(texts, metadatas)]

    def count(self, collection_name: str, upper_bound: int) -> RecordCount:
        total = self._call(collection_name, "Counting", lambda collection: collection.count())
        if total > upper_bound:
            return RecordCount(count=upper_bound, capped=True)
        return RecordCount(count=total)

    # --- Helpers ---
    def _call(self, name: str, action: str, operation: Callable[[Any], Any]) -> Any:
        """
        Run ``operation`` against the collection handle for ``name``.

        A cached handle goes stale when another process drops and recreates the
        collection, so on failure the handle is looked up again by name and the
        operation retried once.
        """
        collection = self._get_collection(name)
        try:
            return operation(collection)
        except Exception as exc:
            logger.warning("Collection call failed, refreshing handle", extra={"collection": name, "error": str(exc)})
            self._collections.pop(name, None)

        collection = self._get_collection(name)
        try:
            return operation(collection)
        except Exception as exc:
            raise ProviderError(f"{action} {name!r} failed: {exc}", provider="chroma") from exc

    def _exists(self, name: str) -> bool:
        try:
            listed = self.client.list_collections()
        except Exception as exc:
            raise ProviderError(f"Listing collections failed: {exc}", provider="chroma") from exc
        # Depending on the chromadb release this is a list of names or of Collection objects.
        return name in {getattr(item, "name", item) for item in listed}

    def _get_collection(self, name: str):
        collection = self._collections.get(name)
        if collection is not None:
            return collection
        try:
            collection = self.client.get_collection(name=name, embedding_function=None)
        except Exception as exc:
            raise ProviderError(f"Collection {name!r} is not available: {exc}", provider="chroma") from exc
        self._collections[name] = collection
        return collection

    def _check_configuration(self, name: str, dimension: int, metric: SimilarityMetric) -> None:
        collection = self._get_collection(name)
        metadata = collection.metadata or {}
        existing_dimension = metadata.get("dimension")
        existing_metric = self._metric_of(collection)
        if (existing_dimension is not None and int(existing_dimension) != dimension) or existing_metric is not metric:
            raise ProviderError(
                f"Collection {name!r} exists with a different configuration",
                provider="chroma",
                details={
                    "expected": {"dimension": dimension, "metric": metric.value},
                    "actual": {"dimension": existing_dimension, "metric": existing_metric.value},
                },
            )

    @staticmethod
    def _check_dimension(collection, vector: List[float]) -> None:
        expected = (collection.metadata or {}).get("dimension")
        if expected is not None and len(vector) != int(expected):
            raise ProviderError(
                "Vector dimension does not match the collection",
                provider="chroma",
                details={"collection": collection.name, "expected": int(expected), "actual": len(vector)},
            )

    @staticmethod
    def _metric_of(collection) -> SimilarityMetric:
        metadata = collection.metadata or {}
        if metadata.get("similarity_metric"):
            return SimilarityMetric(metadata["similarity_metric"])
        space = metadata.get("hnsw:space", "l2")
        for metric, hnsw_space in HNSW_SPACES.items():
            if hnsw_space == space:
                return metric
        return SimilarityMetric.EUCLIDEAN

    @staticmethod
    def _to_record(text: str | None, metadata: Dict[str, Any] | None) -> StoredRecord:
        metadata = metadata or {}
        return StoredRecord(
            vector=[],
            text=text or "",
            source_url=metadata.get("source_url"),
            sequence=metadata.get("sequence"),
        )


__all__ = ["ChromaVectorStore", "HNSW_SPACES"]
