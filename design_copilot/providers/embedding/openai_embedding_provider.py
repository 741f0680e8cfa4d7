"""OpenAI-compatible embedding provider adapter.

Wraps the ``openai`` async client to implement :class:`IEmbeddingProvider`.
Supports both real OpenAI and OpenAI-compatible providers (TogetherAI,
Azure proxies) via custom ``base_url`` and model name settings.
"""

from __future__ import annotations

import openai
import structlog

from design_copilot.config.settings import Settings
from design_copilot.interfaces.embedding_provider import IEmbeddingProvider
from design_copilot.providers.errors import classify_openai_error
from design_copilot.utils.errors import DimensionMismatchError, EmptyInputError
from design_copilot.utils.retry import RetryPolicy

logger = structlog.get_logger(logger_name=__name__)

_OPENAI_BATCH_LIMIT = 2048

# Known embedding model dimensions.
_MODEL_DIMENSIONS: dict[str, int] = {
    "text-embedding-3-small": 1536,
    "text-embedding-3-large": 3072,
    "text-embedding-ada-002": 1536,
    "BAAI/bge-base-en-v1.5": 768,
    "BAAI/bge-large-en-v1.5": 1024,
}


class OpenAIEmbeddingProvider(IEmbeddingProvider):
    """Embedding provider backed by an OpenAI-compatible embeddings API.

    Uses ``text-embedding-3-small`` (1536 dims) by default.  Throttled
    requests are retried by the injected :class:`RetryPolicy`; every other
    failure is classified and raised on the first attempt.
    """

    def __init__(self, settings: Settings, retry_policy: RetryPolicy | None = None) -> None:
        self._settings = settings
        self._api_key = settings.openai_api_key

        client_kwargs: dict = {
            "api_key": self._api_key,
            "timeout": openai.Timeout(settings.provider_timeout_seconds, connect=5.0),
            # Retrying is the policy's job, not the SDK's.
            "max_retries": 0,
        }
        if settings.openai_base_url:
            client_kwargs["base_url"] = settings.openai_base_url

        self._client = openai.AsyncOpenAI(**client_kwargs)
        self._model = settings.openai_embedding_model or "text-embedding-3-small"
        self._dimension = settings.embedding_dimension or _MODEL_DIMENSIONS.get(self._model, 1536)
        self._provider_label = (
            "openai-compatible_embedding" if settings.openai_base_url else "openai_embedding"
        )
        self._retry = retry_policy or RetryPolicy(
            max_attempts=settings.retry_max_attempts,
            base_delay=settings.retry_base_delay,
            max_delay=settings.retry_max_delay,
            jitter=settings.retry_jitter,
        )

    # ------------------------------------------------------------------
    # IEmbeddingProvider implementation
    # ------------------------------------------------------------------

    async def embed(self, text: str) -> list[float]:
        """Generate an embedding vector for a single text string."""
        result = await self.embed_batch([text])
        return result[0]

    async def embed_batch(self, texts: list[str]) -> list[list[float]]:
        """Generate embedding vectors for a batch of texts.

        Automatically splits into batches of 2048 if the input exceeds the
        per-call limit.
        """
        if not texts:
            return []
        if any(not t or not t.strip() for t in texts):
            raise EmptyInputError(provider_name=self.get_provider_name())

        all_embeddings: list[list[float]] = []
        for start in range(0, len(texts), _OPENAI_BATCH_LIMIT):
            batch = texts[start : start + _OPENAI_BATCH_LIMIT]
            all_embeddings.extend(await self._retry.run(self._create, batch))
        return all_embeddings

    def get_dimension(self) -> int:
        return self._dimension

    def get_provider_name(self) -> str:
        return self._provider_label

    def is_available(self) -> bool:
        """Return ``True`` if an API key is configured."""
        return bool(self._api_key)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    async def _create(self, batch: list[str]) -> list[list[float]]:
        try:
            response = await self._client.embeddings.create(
                input=batch,
                model=self._model,
            )
        except openai.APIError as exc:
            logger.warning(
                "openai_embedding_failed",
                provider=self._provider_label,
                batch_size=len(batch),
                error_type=type(exc).__name__,
                status=getattr(exc, "status_code", None),
            )
            raise classify_openai_error(exc, self.get_provider_name()) from exc

        # Each item carries the ``index`` of its input; sort on it so the
        # output order always matches the input order.
        items = sorted(response.data, key=lambda item: item.index)
        vectors = [list(item.embedding) for item in items]
        for vector in vectors:
            if len(vector) != self._dimension:
                raise DimensionMismatchError(
                    message=(
                        f"{self._model} returned {len(vector)} dims, "
                        f"expected {self._dimension}"
                    ),
                    provider_name=self.get_provider_name(),
                )
        logger.info(
            "openai_embedding_batch",
            model=self._model,
            provider=self._provider_label,
            batch_size=len(batch),
            tokens=response.usage.total_tokens if response.usage else None,
        )
        return vectors
