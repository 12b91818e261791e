"""
Shared fixtures: in-memory Chroma, and doubles for the embedding, generation and page-loading services.
"""

import hashlib
import math
import uuid
from typing import Dict, List

import chromadb
import pytest
from chromadb.config import Settings as ChromaSettings

from f1gpt.config import Settings
from f1gpt.errors import NetworkError
from f1gpt.indexing.loader import Document
from f1gpt.services import ServiceContainer
from f1gpt.vector_store.base import SimilarityMetric
from f1gpt.vector_store.chroma_store import ChromaVectorStore

TEST_DIMENSION = 3


def unit(vector: List[float]) -> List[float]:
    norm = math.sqrt(sum(v * v for v in vector)) or 1.0
    return [v / norm for v in vector]


class FakeEmbeddingsClient:
    """Deterministic 3-d unit vectors; known texts can be pinned to exact vectors."""

    def __init__(self, pinned: Dict[str, List[float]] | None = None, dimension: int = TEST_DIMENSION):
        self.pinned = pinned or {}
        self.dimension = dimension
        self.calls: List[str] = []

    def embed_text(self, text: str) -> List[float]:
        self.calls.append(text)
        if text in self.pinned:
            return self.pinned[text]
        digest = hashlib.sha256(text.encode("utf-8")).digest()
        return unit([digest[i] + 1.0 for i in range(self.dimension)])


class FakeLLMClient:
    """Records what it was asked and streams canned tokens."""

    def __init__(self, tokens: List[str] | None = None):
        self.tokens = tokens if tokens is not None else ["Max ", "Verstappen ", "won."]
        self.calls: List[dict] = []

    async def stream_chat(self, messages, system_prompt):
        self.calls.append({"messages": list(messages), "system_prompt": system_prompt})
        return self._iter()

    async def _iter(self):
        for token in self.tokens:
            yield token


class FakeLoader:
    """Serves fixed HTML per URL; unknown URLs fail like a navigation error."""

    def __init__(self, pages: Dict[str, str]):
        self.pages = pages
        self.fetched: List[str] = []
        self.entered = False

    def __enter__(self):
        self.entered = True
        return self

    def __exit__(self, *exc_info):
        self.entered = False

    def fetch(self, url: str) -> Document:
        self.fetched.append(url)
        if url not in self.pages:
            raise NetworkError(url, "Navigation failed")
        return Document(url=url, raw_content=self.pages[url])


@pytest.fixture(scope="session")
def chroma_client():
    return chromadb.EphemeralClient(settings=ChromaSettings(anonymized_telemetry=False))


@pytest.fixture
def store(chroma_client):
    return ChromaVectorStore(chroma_client)


@pytest.fixture
def collection_name():
    return f"test_{uuid.uuid4().hex[:16]}"


@pytest.fixture
def collection(store, collection_name):
    store.create_collection(collection_name, TEST_DIMENSION, SimilarityMetric.DOT_PRODUCT)
    yield collection_name
    store.drop_collection(collection_name)


@pytest.fixture
def settings(collection_name):
    return Settings(
        _env_file=None,
        OPENAI_API_KEY="sk-test",
        VECTOR_STORE_BACKEND="chroma_persistent",
        VECTOR_STORE_COLLECTION=collection_name,
        EMBEDDING_DIMENSION=TEST_DIMENSION,
        CHUNK_SIZE_CHARS=120,
        CHUNK_OVERLAP_CHARS=20,
        COUNT_UPPER_BOUND=1000,
    )


@pytest.fixture
def fake_embeddings():
    return FakeEmbeddingsClient()


@pytest.fixture
def fake_llm():
    return FakeLLMClient()


@pytest.fixture
def services(settings, fake_embeddings, store, fake_llm):
    return ServiceContainer(
        settings=settings,
        embeddings_client=fake_embeddings,
        vector_store=store,
        llm_client=fake_llm,
    )
