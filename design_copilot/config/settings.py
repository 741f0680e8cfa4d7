"""Application settings loaded from environment variables via pydantic-settings.

# ─── HOW SETTINGS WORK ─────────────────────────────────────────────────
#
# pydantic-settings reads configuration from two sources (in priority order):
#
#   1. **Environment variables** - e.g., OPENAI_API_KEY=sk-abc123
#   2. **.env file** - key=value lines in the project root .env file
#
# Field name `openai_api_key` maps to env var `OPENAI_API_KEY`.
#
# Credentials, paths and provider call policy live here.  Chunking and
# retrieval tuning lives in config/config.yaml (see loader.py).
# ──────────────────────────────────────────────────────────────────────
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Design copilot backend settings.

    Environment variables override defaults. Loaded from .env file when present.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # === Completion / embedding providers ===
    # Empty string = "not configured"; provider selection in main.py skips it.
    openai_api_key: str = ""
    openai_base_url: str = ""  # OpenAI-compatible endpoint (TogetherAI, Azure proxy, ...)
    openai_text_model: str = ""  # Defaults to gpt-4.1-mini when empty
    openai_embedding_model: str = ""  # Defaults to text-embedding-3-small when empty
    embedding_dimension: int = 0  # Needed only for models missing from the known-dimension table
    anthropic_api_key: str = ""
    anthropic_model: str = "claude-sonnet-4-20250514"
    ollama_base_url: str = "http://localhost:11434"

    # === Provider call policy ===
    provider_timeout_seconds: float = 30.0
    retry_max_attempts: int = 3
    retry_base_delay: float = 0.5
    retry_max_delay: float = 8.0
    retry_jitter: float = 0.25

    # === Document store ===
    document_store_path: str = "data/documents.db"

    # === App Config ===
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    app_env: str = "development"
    log_level: str = "INFO"
    # The Figma plugin iframe runs on a null/figma.com origin.
    cors_allowed_origins: list[str] = ["*"]

    def get_available_llm_providers(self) -> list[str]:
        """Return the completion providers that have API keys configured."""
        providers: list[str] = []
        if self.anthropic_api_key:
            providers.append("anthropic")
        if self.openai_api_key:
            providers.append("openai")
        return providers
