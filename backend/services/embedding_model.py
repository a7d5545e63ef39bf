"""Embedding provider integration with the OpenAI embeddings API."""
import time
import logging
from dataclasses import dataclass
from typing import List, Optional
import httpx
import numpy as np
from config import OPENAI_API_KEY, EMBEDDING_API_URL, EMBEDDING_TIMEOUT, DEFAULT_EMBEDDING_DIMENSIONS
from services.errors import CollaboratorError, CollaboratorFailure

logger = logging.getLogger(__name__)


class EmbeddingError(CollaboratorError):
    """Embedding provider failure."""


@dataclass
class EmbeddingStatistics:
    """Summary of an embedding vector and the text it came from."""
    text_length: int
    word_count: int
    vector_magnitude: float
    min_value: float
    max_value: float


def vector_statistics(text: str, embedding: List[float]) -> EmbeddingStatistics:
    """Magnitude and value range of ``embedding``."""
    vector = np.asarray(embedding, dtype=float)
    has_values = vector.size > 0
    return EmbeddingStatistics(
        text_length=len(text),
        word_count=len(text.split()),
        vector_magnitude=float(np.linalg.norm(vector)),
        min_value=float(vector.min()) if has_values else 0.0,
        max_value=float(vector.max()) if has_values else 0.0
    )


def mock_embedding(dimensions: int = DEFAULT_EMBEDDING_DIMENSIONS, seed: Optional[int] = None) -> List[float]:
    """Demo vector of uniform values in [-1, 1) for callers without an API key."""
    if dimensions <= 0:
        raise ValueError("Dimensions must be positive")
    rng = np.random.default_rng(seed)
    return rng.uniform(-1.0, 1.0, size=dimensions).tolist()


class EmbeddingModel:
    """Wrapper for the OpenAI embeddings HTTP API."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model_name: str = "text-embedding-3-small",
        api_url: str = EMBEDDING_API_URL,
        timeout: float = EMBEDDING_TIMEOUT
    ):
        """
        Initialize the embedding model client.

        Args:
            api_key: OpenAI API key (defaults to OPENAI_API_KEY from environment)
            model_name: Embedding model identifier
            api_url: Embeddings endpoint
            timeout: Request timeout in seconds
        """
        self.api_key = api_key or OPENAI_API_KEY
        if not self.api_key:
            raise ValueError("OPENAI_API_KEY must be provided or set in environment")

        self.model_name = model_name
        self.api_url = api_url
        self.timeout = timeout

        logger.debug(f"Initialized EmbeddingModel with model: {model_name}")

    def embed_text(self, text: str, dimensions: Optional[int] = None) -> List[float]:
        """
        Generate embedding for a single text string.

        Args:
            text: Text to embed
            dimensions: Requested vector size (models that support shortening only)

        Returns:
            Embedding vector as list of floats

        Raises:
            ValueError: If text is empty
            EmbeddingError: If the API request fails
        """
        if not text or not text.strip():
            raise ValueError("Text cannot be empty")

        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json"
        }

        payload = {"input": text, "model": self.model_name}
        if dimensions:
            payload["dimensions"] = int(dimensions)

        start_time = time.time()
        try:
            with httpx.Client(timeout=self.timeout) as client:
                response = client.post(self.api_url, headers=headers, json=payload)
        except httpx.TimeoutException as e:
            raise self._failure("TIMEOUT_ERROR", f"Request timeout after {self.timeout}s", e)
        except httpx.RequestError as e:
            raise self._failure("NETWORK_ERROR", f"Network error: {str(e)}", e)

        elapsed = time.time() - start_time

        if response.status_code != 200:
            raise self._failure(
                "API_ERROR",
                f"OpenAI error: {response.text}",
                status_code=response.status_code
            )

        try:
            embedding = response.json()["data"][0]["embedding"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise self._failure("INVALID_RESPONSE", "Embedding missing from provider response", e)

        logger.info(
            f"Generated embedding: model={self.model_name}, dimensions={len(embedding)}, "
            f"elapsed={elapsed:.2f}s"
        )
        return embedding

    def _failure(
        self,
        code: str,
        message: str,
        original: Optional[Exception] = None,
        status_code: Optional[int] = None
    ) -> EmbeddingError:
        details = {"model": self.model_name}
        if status_code is not None:
            details["status_code"] = status_code
        if original is not None:
            details["original_error"] = str(original)

        logger.error(f"{code}: {message}", extra={"error_code": code, "error_details": details})
        return EmbeddingError(CollaboratorFailure(code=code, message=message, details=details))
