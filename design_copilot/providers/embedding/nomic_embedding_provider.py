"""Nomic embedding provider adapter (local/free via Ollama).

Wraps the Ollama OpenAI-compatible endpoint to implement
:class:`IEmbeddingProvider` using ``nomic-embed-text`` (768 dimensions).
Runs locally with no API key, which makes it the development default when
no OpenAI key is configured.
"""

from __future__ import annotations

import httpx
import openai
import structlog

from design_copilot.config.settings import Settings
from design_copilot.interfaces.embedding_provider import IEmbeddingProvider
from design_copilot.providers.errors import classify_openai_error
from design_copilot.utils.errors import DimensionMismatchError, EmptyInputError
from design_copilot.utils.retry import RetryPolicy

logger = structlog.get_logger(logger_name=__name__)

_OLLAMA_BATCH_LIMIT = 512


class NomicEmbeddingProvider(IEmbeddingProvider):
    """Embedding provider backed by ``nomic-embed-text`` served via Ollama."""

    def __init__(self, settings: Settings, retry_policy: RetryPolicy | None = None) -> None:
        self._settings = settings
        self._base_url = settings.ollama_base_url
        self._client = openai.AsyncOpenAI(
            base_url=f"{self._base_url}/v1",
            api_key="ollama",  # Ollama ignores the key but the SDK requires one
            timeout=openai.Timeout(settings.provider_timeout_seconds, connect=5.0),
            max_retries=0,
        )
        self._model = "nomic-embed-text"
        self._dimension = 768
        self._retry = retry_policy or RetryPolicy(
            max_attempts=settings.retry_max_attempts,
            base_delay=settings.retry_base_delay,
            max_delay=settings.retry_max_delay,
            jitter=settings.retry_jitter,
        )

    async def embed(self, text: str) -> list[float]:
        result = await self.embed_batch([text])
        return result[0]

    async def embed_batch(self, texts: list[str]) -> list[list[float]]:
        """Embed *texts*, splitting into batches of 512 for the Ollama backend."""
        if not texts:
            return []
        if any(not t or not t.strip() for t in texts):
            raise EmptyInputError(provider_name=self.get_provider_name())

        all_embeddings: list[list[float]] = []
        for start in range(0, len(texts), _OLLAMA_BATCH_LIMIT):
            batch = texts[start : start + _OLLAMA_BATCH_LIMIT]
            all_embeddings.extend(await self._retry.run(self._create, batch))
        return all_embeddings

    def get_dimension(self) -> int:
        """Return 768 (nomic-embed-text dimension)."""
        return self._dimension

    def get_provider_name(self) -> str:
        return "nomic_embedding"

    def is_available(self) -> bool:
        """Return ``True`` if the Ollama server is reachable."""
        if not self._base_url:
            return False
        try:
            response = httpx.get(f"{self._base_url}/api/tags", timeout=3.0)
            return response.status_code == 200
        except (httpx.ConnectError, httpx.TimeoutException):
            return False

    async def _create(self, batch: list[str]) -> list[list[float]]:
        try:
            response = await self._client.embeddings.create(input=batch, model=self._model)
        except openai.APIError as exc:
            logger.warning(
                "nomic_embedding_failed",
                batch_size=len(batch),
                error_type=type(exc).__name__,
            )
            raise classify_openai_error(exc, self.get_provider_name()) from exc

        vectors = [list(item.embedding) for item in sorted(response.data, key=lambda i: i.index)]
        if any(len(v) != self._dimension for v in vectors):
            raise DimensionMismatchError(
                message=f"{self._model} returned an unexpected vector length",
                provider_name=self.get_provider_name(),
            )
        logger.info("nomic_embedding_batch", model=self._model, batch_size=len(batch))
        return vectors
