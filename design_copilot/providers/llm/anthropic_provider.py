"""Anthropic LLM provider adapter.

Wraps the ``anthropic`` async client to implement :class:`ILLMProvider`.

Key differences from the OpenAI adapter:
    - Uses Anthropic's Messages API (not chat.completions)
    - System prompt is a separate parameter, not a message in the list
    - Response content is a list of blocks, so text blocks are joined
"""

from __future__ import annotations

import anthropic
import structlog

from design_copilot.config.settings import Settings
from design_copilot.interfaces.llm_provider import ILLMProvider
from design_copilot.models.llm import ChatMessage, Completion, TokenUsage
from design_copilot.providers.errors import classify_anthropic_error
from design_copilot.utils.retry import RetryPolicy

logger = structlog.get_logger(logger_name=__name__)


class AnthropicLLMProvider(ILLMProvider):
    """LLM provider backed by the Anthropic Claude API."""

    def __init__(self, settings: Settings, retry_policy: RetryPolicy | None = None) -> None:
        self._settings = settings
        self._api_key = settings.anthropic_api_key
        self._client = anthropic.AsyncAnthropic(
            api_key=self._api_key,
            timeout=settings.provider_timeout_seconds,
            max_retries=0,
        )
        self._model = settings.anthropic_model
        self._retry = retry_policy or RetryPolicy(
            max_attempts=settings.retry_max_attempts,
            base_delay=settings.retry_base_delay,
            max_delay=settings.retry_max_delay,
            jitter=settings.retry_jitter,
        )

    async def complete(
        self,
        system_prompt: str,
        messages: list[ChatMessage],
        temperature: float = 0.2,
        max_tokens: int = 1000,
    ) -> Completion:
        """Generate a completion via the Anthropic Messages API."""
        payload = [{"role": m.role, "content": m.content} for m in messages]
        return await self._retry.run(self._create, system_prompt, payload, temperature, max_tokens)

    def is_available(self) -> bool:
        return bool(self._api_key)

    async def validate_credentials(self) -> bool:
        """Send a one-token request to confirm the API key is accepted."""
        if not self.is_available():
            return False
        try:
            await self._client.messages.create(
                model=self._model,
                max_tokens=1,
                messages=[{"role": "user", "content": "ping"}],
            )
            return True
        except anthropic.APIError:
            return False

    def get_provider_name(self) -> str:
        return "anthropic"

    async def _create(
        self,
        system_prompt: str,
        payload: list[dict[str, str]],
        temperature: float,
        max_tokens: int,
    ) -> Completion:
        try:
            response = await self._client.messages.create(
                model=self._model,
                max_tokens=max_tokens,
                system=system_prompt,
                messages=payload,
                temperature=temperature,
            )
        except anthropic.APIError as exc:
            logger.warning(
                "anthropic_completion_failed",
                model=self._model,
                error_type=type(exc).__name__,
                status=getattr(exc, "status_code", None),
            )
            raise classify_anthropic_error(exc, self.get_provider_name()) from exc

        text_blocks = [block.text for block in response.content if block.type == "text"]
        usage = TokenUsage(
            input_tokens=response.usage.input_tokens,
            output_tokens=response.usage.output_tokens,
        )
        logger.info(
            "anthropic_completion",
            model=self._model,
            input_tokens=usage.input_tokens,
            output_tokens=usage.output_tokens,
        )
        return Completion(text="\n".join(text_blocks), usage=usage, model=self._model)
