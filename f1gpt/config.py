"""
Application configuration loaded from environment variables.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Literal

from pydantic import Field, SecretStr, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from f1gpt.errors import ConfigurationError

DEFAULT_SOURCE_URLS = [
    "https://www.formula1.com",
    "https://www.formula1.com/en/timing/f1-live.html",
    "https://en.wikipedia.org/wiki/Formula_One",
    "https://en.wikipedia.org/wiki/Formula_One_World_Championship",
    "https://www.autosport.com/f1/",
    "https://www.motorsport.com/f1/",
    "https://www.espn.com/f1/",
    "https://www.racing-reference.info/f1-series/",
    "https://www.statsf1.com/en/default.aspx",
    "https://tracinginsights.com/data/",
]

REMOTE_BACKENDS = {"chroma"}


class Settings(BaseSettings):
    """Centralised application settings."""

    model_config = SettingsConfigDict(
        env_file=(".env",),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    openai_api_key: SecretStr | None = Field(default=None, alias="OPENAI_API_KEY")
    llm_model_name: str = Field(default="gpt-4.1-mini", alias="LLM_MODEL_NAME")
    embedding_model_name: str = Field(default="text-embedding-3-small", alias="EMBEDDING_MODEL_NAME")
    embedding_dimension: int = Field(default=1536, gt=0, alias="EMBEDDING_DIMENSION")
    provider_max_attempts: int = Field(default=3, ge=1, alias="PROVIDER_MAX_ATTEMPTS")

    vector_store_backend: str = Field(default="chroma", alias="VECTOR_STORE_BACKEND")
    vector_store_api_endpoint: str | None = Field(default=None, alias="VECTOR_STORE_API_ENDPOINT")
    vector_store_application_token: SecretStr | None = Field(default=None, alias="VECTOR_STORE_APPLICATION_TOKEN")
    vector_store_tenant: str = Field(default="default_tenant", alias="VECTOR_STORE_TENANT")
    vector_store_namespace: str | None = Field(default=None, alias="VECTOR_STORE_NAMESPACE")
    vector_store_collection: str | None = Field(default=None, alias="VECTOR_STORE_COLLECTION")
    vector_store_path: str = Field(default="./data/vector_store", alias="VECTOR_STORE_PATH")
    similarity_metric: Literal["dot_product", "cosine", "euclidean"] = Field(default="dot_product", alias="SIMILARITY_METRIC")
    count_upper_bound: int = Field(default=1000, gt=0, alias="COUNT_UPPER_BOUND")

    source_urls: List[str] = Field(default_factory=lambda: list(DEFAULT_SOURCE_URLS), alias="SOURCE_URLS")
    page_load_timeout_sec: float = Field(default=30.0, gt=0, alias="PAGE_LOAD_TIMEOUT_SEC")

    chunk_size_chars: int = Field(default=512, gt=0, alias="CHUNK_SIZE_CHARS")
    chunk_overlap_chars: int = Field(default=100, ge=0, alias="CHUNK_OVERLAP_CHARS")

    retrieval_top_k: int = Field(default=5, gt=0, alias="RETRIEVAL_TOP_K")
    assistant_topic: str = Field(default="Formula One", alias="ASSISTANT_TOPIC")

    app_host: str = Field(default="0.0.0.0", alias="APP_HOST")
    app_port: int = Field(default=8000, alias="APP_PORT")

    def missing_required(self) -> List[str]:
        """Names of required variables that have no value."""
        required = {
            "OPENAI_API_KEY": self.openai_api_key,
            "VECTOR_STORE_COLLECTION": self.vector_store_collection,
        }
        if self.vector_store_backend.lower() in REMOTE_BACKENDS:
            required.update(
                {
                    "VECTOR_STORE_NAMESPACE": self.vector_store_namespace,
                    "VECTOR_STORE_API_ENDPOINT": self.vector_store_api_endpoint,
                    "VECTOR_STORE_APPLICATION_TOKEN": self.vector_store_application_token,
                }
            )

        missing = []
        for name, value in required.items():
            if isinstance(value, SecretStr):
                value = value.get_secret_value()
            if not value:
                missing.append(name)
        return missing


def load_settings(**overrides: Any) -> Settings:
    """
    Build settings and fail fast when the deployment is incomplete.

    Raises:
        ConfigurationError: a required value is missing or a value cannot be parsed.
    """
    try:
        settings = Settings(**overrides)
    except ValidationError as exc:
        invalid = [".".join(str(p) for p in err["loc"]) for err in exc.errors()]
        raise ConfigurationError("Invalid configuration values", invalid=invalid) from exc

    if settings.chunk_overlap_chars >= settings.chunk_size_chars:
        raise ConfigurationError(
            "CHUNK_OVERLAP_CHARS must be smaller than CHUNK_SIZE_CHARS",
            invalid=["CHUNK_OVERLAP_CHARS"],
        )

    missing = settings.missing_required()
    if missing:
        raise ConfigurationError("Required configuration is missing", missing=missing)
    return settings


def setup_logging() -> logging.Logger:
    """
    Configure base logging for the app.
    """
    logging.basicConfig(
        level=logging.INFO,
        format="[%(asctime)s] [%(levelname)s] %(name)s - %(message)s",
    )
    return logging.getLogger("f1gpt")


def public_settings(settings: Settings) -> Dict[str, Any]:
    """
    Return settings without secrets for safe logging/inspection.
    """
    return settings.model_dump(
        exclude={"openai_api_key", "vector_store_application_token"},
        exclude_none=True,
    )


__all__ = ["Settings", "load_settings", "setup_logging", "public_settings", "DEFAULT_SOURCE_URLS"]
