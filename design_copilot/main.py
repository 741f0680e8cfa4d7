"""Design copilot FastAPI application entry point.

Wires providers and services together via dependency injection.  Loads
configuration from ``.env`` and ``config/config.yaml`` and configures
structured logging.

:func:`build_components` is shared with the CLI so both entry points use
the same embedding model (the document store rejects any other dimension).
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any

import structlog
import uvicorn
from fastapi import FastAPI

from design_copilot.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    configure_cors,
)
from design_copilot.api.routes import router as api_router
from design_copilot.config.loader import (
    build_ingestion_config,
    build_retrieval_config,
    load_config,
)
from design_copilot.config.settings import Settings
from design_copilot.interfaces.embedding_provider import IEmbeddingProvider
from design_copilot.interfaces.llm_provider import ILLMProvider
from design_copilot.providers.document_store.sqlite_document_store import SQLiteDocumentStore
from design_copilot.providers.embedding.nomic_embedding_provider import NomicEmbeddingProvider
from design_copilot.providers.embedding.openai_embedding_provider import OpenAIEmbeddingProvider
from design_copilot.providers.extractor.registry import ExtractorRegistry
from design_copilot.providers.llm.anthropic_provider import AnthropicLLMProvider
from design_copilot.providers.llm.openai_provider import OpenAILLMProvider
from design_copilot.services.ingestion.chunker import TextChunker
from design_copilot.services.ingestion.ingestion_service import IngestionService
from design_copilot.services.qa_service import QAService
from design_copilot.utils.errors import ConfigurationError
from design_copilot.utils.logging import configure_logging, get_logger

# ---------------------------------------------------------------------------
# Module-level settings & logging
# ---------------------------------------------------------------------------

settings = Settings()
config = load_config(settings=settings)

configure_logging(
    log_level=settings.log_level,
    json_output=(settings.app_env == "production"),
)
_logger: structlog.BoundLogger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Provider selection
# ---------------------------------------------------------------------------


def _build_llm_provider(app_settings: Settings) -> ILLMProvider:
    """Select the first LLM provider with a configured key.

    Priority order: Anthropic -> OpenAI.
    """
    if app_settings.anthropic_api_key:
        return AnthropicLLMProvider(settings=app_settings)
    if app_settings.openai_api_key:
        return OpenAILLMProvider(settings=app_settings)
    raise ConfigurationError(
        "No completion provider configured: set ANTHROPIC_API_KEY or OPENAI_API_KEY"
    )


def _build_embedding_provider(app_settings: Settings) -> IEmbeddingProvider:
    """Select the first available embedding provider.

    Priority: OpenAI/OpenAI-compatible (if API key set) -> Nomic/Ollama
    (if reachable).
    """
    if app_settings.openai_api_key:
        provider: IEmbeddingProvider = OpenAIEmbeddingProvider(settings=app_settings)
        if provider.is_available():
            return provider

    provider = NomicEmbeddingProvider(settings=app_settings)
    if provider.is_available():
        return provider

    raise ConfigurationError(
        "No embedding provider available: set OPENAI_API_KEY or run Ollama at OLLAMA_BASE_URL"
    )


# ---------------------------------------------------------------------------
# Full DI assembly
# ---------------------------------------------------------------------------


def build_components(
    app_settings: Settings,
    app_config: dict[str, Any],
    embedding_provider: IEmbeddingProvider | None = None,
    llm_provider: ILLMProvider | None = None,
) -> dict[str, Any]:
    """Construct every provider and service instance.

    Returns a flat dict of named components to be stored on ``app.state``.
    The document store is returned uninitialised; the caller opens it.
    """
    ingestion_config = build_ingestion_config(app_config)
    retrieval_config = build_retrieval_config(app_config)

    embedder = embedding_provider or _build_embedding_provider(app_settings)
    llm = llm_provider or _build_llm_provider(app_settings)
    store = SQLiteDocumentStore(db_path=app_settings.document_store_path)

    ingestion_service = IngestionService(
        chunker=TextChunker(
            chunk_size=ingestion_config.chunk_size,
            overlap=ingestion_config.chunk_overlap,
        ),
        embedding_provider=embedder,
        document_store=store,
        max_concurrency=ingestion_config.max_concurrency,
        extractors=ExtractorRegistry(),
    )
    qa_service = QAService(
        embedding_provider=embedder,
        document_store=store,
        llm=llm,
        retrieval_config=retrieval_config,
    )

    return {
        "embedding_provider": embedder,
        "llm_provider": llm,
        "document_store": store,
        "ingestion_service": ingestion_service,
        "qa_service": qa_service,
        "ingestion_config": ingestion_config,
        "retrieval_config": retrieval_config,
    }


async def open_store(components: dict[str, Any]) -> None:
    """Open the document store and check it matches the embedder's dimension."""
    store = components["document_store"]
    await store.initialize()
    await store.ensure_dimension(components["embedding_provider"].get_dimension())


# ---------------------------------------------------------------------------
# Application factory
# ---------------------------------------------------------------------------


def create_app(
    app_settings: Settings | None = None,
    components: dict[str, Any] | None = None,
) -> FastAPI:
    """Build and configure the FastAPI application.

    *components* replaces the default :func:`build_components` wiring; tests
    use it to inject stub providers.
    """
    s = app_settings or settings
    version = str(config.get("app", {}).get("version", "0.1.0"))

    @asynccontextmanager
    async def _lifespan(application: FastAPI):  # noqa: ANN202
        built = components if components is not None else build_components(s, config)
        for key, value in built.items():
            setattr(application.state, key, value)

        await open_store(built)

        _logger.info(
            "app_startup",
            version=version,
            environment=s.app_env,
            llm=built["llm_provider"].get_provider_name(),
            embedder=built["embedding_provider"].get_provider_name(),
        )

        yield

        await built["document_store"].close()
        _logger.info("app_shutdown")

    application = FastAPI(
        title="Design Copilot API",
        version=version,
        description=(
            "Upload design documents and ask questions answered from them. "
            "Documents are chunked, embedded and retrieved per owner."
        ),
        lifespan=_lifespan,
    )

    # -- Middleware (order matters: last added = first executed) --
    application.add_middleware(ErrorHandlingMiddleware)
    application.add_middleware(RequestLoggingMiddleware)
    configure_cors(application, allowed_origins=s.cors_allowed_origins)

    application.include_router(api_router)
    return application


def main() -> None:
    """Run the API server with uvicorn."""
    uvicorn.run(
        "design_copilot.main:create_app",
        factory=True,
        host=settings.app_host,
        port=settings.app_port,
        reload=(settings.app_env == "development"),
    )


if __name__ == "__main__":
    main()
