"""Configuration module - exports Settings and the YAML loader helpers."""

from design_copilot.config.loader import (
    build_ingestion_config,
    build_retrieval_config,
    load_config,
)
from design_copilot.config.settings import Settings

__all__ = ["Settings", "build_ingestion_config", "build_retrieval_config", "load_config"]
