"""
Vector store interface and shared types.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Protocol


class SimilarityMetric(str, Enum):
    DOT_PRODUCT = "dot_product"
    COSINE = "cosine"
    EUCLIDEAN = "euclidean"


@dataclass(frozen=True)
class StoredRecord:
    vector: List[float]
    text: str
    source_url: Optional[str] = None
    sequence: Optional[int] = None


@dataclass(frozen=True)
class SearchResult:
    record: StoredRecord
    score: float


@dataclass(frozen=True)
class RecordCount:
    count: int
    capped: bool = False

    def __str__(self) -> str:
        return f"{self.count}+" if self.capped else str(self.count)


class VectorStore(Protocol):
    def create_collection(self, name: str, dimension: int, metric: SimilarityMetric) -> None:
        ...

    def drop_collection(self, name: str) -> None:
        ...

    def insert(self, collection_name: str, record: StoredRecord) -> None:
        ...

    def search(self, collection_name: str, query_vector: List[float], k: int) -> List[SearchResult]:
        ...

    def sample(self, collection_name: str, limit: int) -> List[StoredRecord]:
        ...

    def count(self, collection_name: str, upper_bound: int) -> RecordCount:
        ...


__all__ = ["SimilarityMetric", "StoredRecord", "SearchResult", "RecordCount", "VectorStore"]
