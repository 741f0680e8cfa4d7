"""Abstract base class for text-embedding service providers.

Defines the contract for turning text into fixed-length vectors.
Implementations may wrap OpenAI ``text-embedding-3-small``, Nomic
``nomic-embed-text`` (local via Ollama), or any other embedding backend.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


# Concrete implementations:
#   OpenAIEmbeddingProvider - text-embedding-3-small (requires API key)
#   NomicEmbeddingProvider  - nomic-embed-text via Ollama (local)
# Located in: design_copilot/providers/embedding/
class IEmbeddingProvider(ABC):
    """Contract for text-embedding services used by ingestion and retrieval.

    The adapter's only job is request/response marshaling and error
    classification.  Failures surface as
    :class:`~design_copilot.utils.errors.ProviderUnavailableError`,
    :class:`~design_copilot.utils.errors.ProviderRateLimitedError` (after
    the adapter's own backoff retries are exhausted), or
    :class:`~design_copilot.utils.errors.ProviderAuthError`.
    """

    @abstractmethod
    async def embed(self, text: str) -> list[float]:
        """Generate an embedding vector for a single text string.

        Parameters
        ----------
        text:
            The text to embed.  Blank text is rejected with
            :class:`~design_copilot.utils.errors.EmptyInputError` before
            any provider call.

        Returns
        -------
        list[float]
            A vector whose length equals :meth:`get_dimension`.
        """

    @abstractmethod
    async def embed_batch(self, texts: list[str]) -> list[list[float]]:
        """Generate embedding vectors for several texts in as few calls as possible.

        Parameters
        ----------
        texts:
            Texts to embed.  Any blank entry rejects the whole batch with
            :class:`~design_copilot.utils.errors.EmptyInputError`.

        Returns
        -------
        list[list[float]]
            Vectors in the same order as *texts*.
        """

    @abstractmethod
    def get_dimension(self) -> int:
        """Return the dimensionality of the embedding vectors.

        Constant for the lifetime of the provider instance; must match the
        dimension already established in the document store.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier, e.g. ``"openai_embedding"``."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if the provider is configured and reachable."""
