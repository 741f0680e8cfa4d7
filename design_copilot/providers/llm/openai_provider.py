"""OpenAI-compatible LLM provider adapter.

Wraps the ``openai`` async client to implement :class:`ILLMProvider`.
When a custom ``openai_base_url`` is configured (TogetherAI, Groq, a local
proxy), the client points at that URL instead of the default endpoint.
"""

from __future__ import annotations

import openai
import structlog

from design_copilot.config.settings import Settings
from design_copilot.interfaces.llm_provider import ILLMProvider
from design_copilot.models.llm import ChatMessage, Completion, TokenUsage
from design_copilot.providers.errors import classify_openai_error
from design_copilot.utils.retry import RetryPolicy

logger = structlog.get_logger(logger_name=__name__)


class OpenAILLMProvider(ILLMProvider):
    """LLM provider backed by an OpenAI-compatible chat completions API.

    Uses ``gpt-4.1-mini`` by default.  The system prompt is sent as the first
    message of the conversation.
    """

    def __init__(self, settings: Settings, retry_policy: RetryPolicy | None = None) -> None:
        self._settings = settings
        self._api_key = settings.openai_api_key

        client_kwargs: dict = {
            "api_key": self._api_key,
            "timeout": openai.Timeout(settings.provider_timeout_seconds, connect=5.0),
            "max_retries": 0,
        }
        if settings.openai_base_url:
            client_kwargs["base_url"] = settings.openai_base_url

        self._client = openai.AsyncOpenAI(**client_kwargs)
        self._text_model = settings.openai_text_model or "gpt-4.1-mini"
        self._provider_label = "openai-compatible" if settings.openai_base_url else "openai"
        self._retry = retry_policy or RetryPolicy(
            max_attempts=settings.retry_max_attempts,
            base_delay=settings.retry_base_delay,
            max_delay=settings.retry_max_delay,
            jitter=settings.retry_jitter,
        )

    # ------------------------------------------------------------------
    # ILLMProvider implementation
    # ------------------------------------------------------------------

    async def complete(
        self,
        system_prompt: str,
        messages: list[ChatMessage],
        temperature: float = 0.2,
        max_tokens: int = 1000,
    ) -> Completion:
        """Generate a completion via the chat completions API."""
        payload = [{"role": "system", "content": system_prompt}]
        payload.extend({"role": m.role, "content": m.content} for m in messages)
        return await self._retry.run(self._create, payload, temperature, max_tokens)

    def is_available(self) -> bool:
        """Return ``True`` if an API key is configured (doesn't verify it works)."""
        return bool(self._api_key)

    async def validate_credentials(self) -> bool:
        """Try listing models to verify the API key works."""
        if not self.is_available():
            return False
        try:
            await self._client.models.list()
            return True
        except openai.APIError:
            return False

    def get_provider_name(self) -> str:
        return self._provider_label

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    async def _create(
        self,
        payload: list[dict[str, str]],
        temperature: float,
        max_tokens: int,
    ) -> Completion:
        try:
            response = await self._client.chat.completions.create(
                model=self._text_model,
                messages=payload,
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except openai.APIError as exc:
            logger.warning(
                "openai_completion_failed",
                model=self._text_model,
                provider=self._provider_label,
                error_type=type(exc).__name__,
                status=getattr(exc, "status_code", None),
            )
            raise classify_openai_error(exc, self.get_provider_name()) from exc

        content = response.choices[0].message.content if response.choices else None
        usage = TokenUsage(
            input_tokens=response.usage.prompt_tokens if response.usage else 0,
            output_tokens=response.usage.completion_tokens if response.usage else 0,
        )
        logger.info(
            "openai_completion",
            model=self._text_model,
            provider=self._provider_label,
            tokens=usage.total_tokens,
        )
        return Completion(text=content or "", usage=usage, model=self._text_model)
