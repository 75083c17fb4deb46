"""
Line Embedding Service
Generates embeddings for feedback lines using sentence-transformers or Ollama
"""

from typing import Optional

import httpx
import numpy as np
import structlog

from shared import config
from shared.errors import EmbeddingError

logger = structlog.get_logger()


class LineEmbedder:
    """
    Generates one fixed-length embedding per feedback line.

    Supports two backends:
    1. Sentence-transformers (default, runs locally)
    2. Ollama (remote server)
    """

    # Survey answers are short; anything longer is truncated before embedding
    MAX_TEXT_LENGTH = 8000

    def __init__(
        self,
        ollama_url: str = config.OLLAMA_URL,
        model: str = config.EMBED_MODEL,
        use_local: bool = True,
        local_model: str = config.LOCAL_MODEL,
        max_length: int = None,
        timeout: float = 120.0,
    ):
        """
        Args:
            ollama_url: URL of Ollama server
            model: Ollama embedding model
            use_local: If True, use sentence-transformers locally
            local_model: sentence-transformers model name
            max_length: Max text length (default: MAX_TEXT_LENGTH)
            timeout: HTTP timeout for Ollama calls
        """
        self.ollama_url = ollama_url.rstrip("/")
        self.model = model
        self.use_local = use_local
        self.local_model_name = local_model
        self.max_length = max_length or self.MAX_TEXT_LENGTH
        self.timeout = timeout
        self._local_model = None
        self._dimension: Optional[int] = None

    @property
    def dimension(self) -> Optional[int]:
        """Embedding dimension, known after the first batch"""
        return self._dimension

    def embed_batch(self, lines: list[str], batch_size: int = 32) -> np.ndarray:
        """
        Embed every line, preserving order.

        Args:
            lines: Lines to embed
            batch_size: Batch size for the local model

        Returns:
            Array of shape (len(lines), dimension)

        Raises:
            EmbeddingError: on any backend failure or malformed output
        """
        if not lines:
            raise EmbeddingError("no lines to embed")

        texts = [self._truncate(line) for line in lines]
        logger.info("Embedding lines", count=len(texts), local=self.use_local)

        try:
            if self.use_local:
                vectors = self._embed_batch_local(texts, batch_size)
            else:
                # Ollama has no batch endpoint, go one by one
                vectors = [self._embed_ollama(text) for text in texts]
        except EmbeddingError:
            raise
        except Exception as e:
            logger.error("Embedding failed", error=str(e), local=self.use_local)
            raise EmbeddingError(str(e)) from e

        return self._validate(vectors, len(lines))

    def _truncate(self, text: str) -> str:
        if len(text) > self.max_length:
            logger.debug("Truncated text", original=len(text), max=self.max_length)
            return text[:self.max_length]
        return text

    def _validate(self, vectors, expected: int) -> np.ndarray:
        try:
            matrix = np.asarray(vectors, dtype=np.float64)
        except ValueError as e:
            raise EmbeddingError(f"vectors have differing lengths: {e}") from e

        if matrix.ndim != 2 or matrix.shape[0] != expected:
            raise EmbeddingError(
                f"expected {expected} vectors, got shape {matrix.shape}"
            )
        self._dimension = matrix.shape[1]
        logger.info("Embedding complete", vectors=matrix.shape[0], dim=self._dimension)
        return matrix

    def _embed_ollama(self, text: str) -> list[float]:
        """Generate embedding using Ollama API"""
        try:
            response = httpx.post(
                f"{self.ollama_url}/api/embeddings",
                json={"model": self.model, "prompt": text},
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            error_text = e.response.text if e.response is not None else str(e)
            logger.error("Ollama HTTP error", status=e.response.status_code, error=error_text[:200])
            raise EmbeddingError(f"Ollama returned {e.response.status_code}") from e
        except httpx.HTTPError as e:
            logger.error("Ollama request failed", error=str(e), model=self.model)
            raise EmbeddingError(f"Ollama request failed: {e}") from e

        embedding = response.json().get("embedding", [])
        if not embedding:
            raise EmbeddingError("empty embedding returned")
        return embedding

    def _embed_batch_local(self, texts: list[str], batch_size: int) -> np.ndarray:
        """Generate batch embeddings using sentence-transformers"""
        if self._local_model is None:
            self._init_local_model()

        return self._local_model.encode(
            texts,
            batch_size=batch_size,
            convert_to_numpy=True,
            show_progress_bar=len(texts) > batch_size,
        )

    def _init_local_model(self):
        """Initialize local sentence-transformer model"""
        try:
            from sentence_transformers import SentenceTransformer
        except ImportError as e:
            raise EmbeddingError(
                "sentence-transformers not installed. "
                "Run: pip install sentence-transformers"
            ) from e
        self._local_model = SentenceTransformer(self.local_model_name)
        logger.info(
            "Initialized local embedding model",
            model=self.local_model_name,
            dim=self._local_model.get_sentence_embedding_dimension(),
        )


def get_embedder(backend: str = config.EMBED_BACKEND, ollama_url: str = config.OLLAMA_URL) -> LineEmbedder:
    """Build an embedder for the named backend ("local" or "ollama")"""
    if backend not in ("local", "ollama"):
        raise ValueError(f"unknown embedding backend: {backend}")
    return LineEmbedder(ollama_url=ollama_url, use_local=backend == "local")
