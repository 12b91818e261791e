"""
Vector store abstractions and factories.
"""

from __future__ import annotations

from urllib.parse import urlsplit

import chromadb

from f1gpt.config import Settings
from f1gpt.errors import ConfigurationError
from f1gpt.vector_store.base import RecordCount, SearchResult, SimilarityMetric, StoredRecord, VectorStore
from f1gpt.vector_store.chroma_store import ChromaVectorStore


def _chroma_http_client(settings: Settings):
    endpoint = urlsplit(settings.vector_store_api_endpoint or "")
    if not endpoint.hostname:
        raise ConfigurationError("VECTOR_STORE_API_ENDPOINT must be an absolute URL", invalid=["VECTOR_STORE_API_ENDPOINT"])
    ssl = endpoint.scheme == "https"
    host = endpoint.hostname
    port = endpoint.port or (443 if ssl else 8000)

    token = settings.vector_store_application_token
    headers = {"x-chroma-token": token.get_secret_value()} if token else None
    return chromadb.HttpClient(
        host=host,
        port=port,
        ssl=ssl,
        headers=headers,
        tenant=settings.vector_store_tenant,
        database=settings.vector_store_namespace,
    )


def get_vector_store(settings: Settings) -> ChromaVectorStore:
    """
    Factory to obtain configured VectorStore instance.

    Backends:
    - chroma: remote Chroma server at VECTOR_STORE_API_ENDPOINT, database = VECTOR_STORE_NAMESPACE
    - chroma_persistent: local on-disk Chroma at VECTOR_STORE_PATH (development)
    """
    backend = settings.vector_store_backend.lower()
    if backend == "chroma":
        return ChromaVectorStore(_chroma_http_client(settings))
    if backend == "chroma_persistent":
        return ChromaVectorStore(chromadb.PersistentClient(path=settings.vector_store_path))
    raise ConfigurationError(f"Unsupported vector store backend: {backend}", invalid=["VECTOR_STORE_BACKEND"])


__all__ = [
    "get_vector_store",
    "ChromaVectorStore",
    "VectorStore",
    "StoredRecord",
    "SearchResult",
    "RecordCount",
    "SimilarityMetric",
]
