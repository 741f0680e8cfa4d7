"""Abstract base class for LLM completion providers.

Implementations wrap the Anthropic Messages API or OpenAI chat completions.
The retrieval service talks only to this interface, so the backing model
can be swapped in ``main.py`` without touching call sites.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from design_copilot.models.llm import ChatMessage, Completion


# Concrete implementations: AnthropicLLMProvider, OpenAILLMProvider
# Located in: design_copilot/providers/llm/
class ILLMProvider(ABC):
    """Contract for completion services."""

    @abstractmethod
    async def complete(
        self,
        system_prompt: str,
        messages: list[ChatMessage],
        temperature: float = 0.2,
        max_tokens: int = 1000,
    ) -> Completion:
        """Generate a completion for a conversation.

        Parameters
        ----------
        system_prompt:
            Instruction that sets the model's behaviour.
        messages:
            Conversation turns, oldest first.  The last one is normally
            the ``user`` turn carrying the question.
        temperature:
            Sampling temperature.
        max_tokens:
            Upper bound on the number of tokens in the response.

        Returns
        -------
        Completion
            Model text (possibly empty) and token usage.

        Raises
        ------
        design_copilot.utils.errors.ProviderError
            Classified as unavailable, rate limited or auth failure.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier, e.g. ``"anthropic"``."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if credentials are configured (no network call)."""

    @abstractmethod
    async def validate_credentials(self) -> bool:
        """Perform a lightweight API call to confirm credentials are valid."""
