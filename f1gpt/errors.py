"""Exception taxonomy shared by the ingestion and query paths."""

from typing import Any, Dict, List, Optional

import openai


class RagError(Exception):
    """Base exception for all f1gpt errors."""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to a dictionary for structured logging."""
        return {"message": self.message, "code": self.code, "details": self.details}


class NetworkError(RagError):
    """A page could not be fetched or rendered."""

    def __init__(self, url: str, message: str = "Page fetch failed", details: Optional[Dict[str, Any]] = None):
        self.url = url
        error_details = details or {}
        error_details["url"] = url
        super().__init__(message=f"{message}: {url}", code="NETWORK_ERROR", details=error_details)


class RateLimitError(RagError):
    """Transient throttling from a model provider. Safe to retry."""

    def __init__(
        self,
        message: str = "Provider rate limit exceeded",
        provider: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        error_details = details or {}
        if provider:
            error_details["provider"] = provider
        super().__init__(message=message, code="RATE_LIMITED", details=error_details)


class ProviderError(RagError):
    """Non-transient failure from an embedding, generation or vector store provider."""

    def __init__(
        self,
        message: str = "Provider request failed",
        provider: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        error_details = details or {}
        if provider:
            error_details["provider"] = provider
        super().__init__(message=message, code="PROVIDER_ERROR", details=error_details)


class ConfigurationError(RagError):
    """A required deployment value is missing or invalid."""

    def __init__(
        self,
        message: str = "Invalid configuration",
        missing: Optional[List[str]] = None,
        invalid: Optional[List[str]] = None,
    ):
        details: Dict[str, Any] = {}
        if missing:
            details["missing"] = missing
            message = f"{message}: {', '.join(missing)}"
        if invalid:
            details["invalid"] = invalid
            message = f"{message}: {', '.join(invalid)}"
        super().__init__(message=message, code="CONFIGURATION_ERROR", details=details)


class MalformedRequestError(RagError):
    """The conversation does not contain a user message."""

    def __init__(self, message: str = "Conversation has no user message", details: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, code="MALFORMED_REQUEST", details=details)


def translate_openai_error(exc: Exception, operation: str) -> RagError:
    """Map an OpenAI SDK exception onto the taxonomy."""
    if isinstance(exc, openai.RateLimitError):
        return RateLimitError(f"OpenAI {operation} throttled: {exc}", provider="openai")
    return ProviderError(f"OpenAI {operation} failed: {exc}", provider="openai")


__all__ = [
    "RagError",
    "NetworkError",
    "RateLimitError",
    "ProviderError",
    "ConfigurationError",
    "MalformedRequestError",
    "translate_openai_error",
]
