"""YAML configuration loader with environment variable overrides.

# ─── CONFIGURATION HIERARCHY ───────────────────────────────────────────
#
#   1. config/config.yaml  - Static defaults checked into the repo
#   2. .env file           - Local developer overrides (not committed)
#   3. Environment vars    - Set at deploy time
#
# load_config() reads the YAML file first, then deep-merges the
# environment-based values on top.  build_ingestion_config() and
# build_retrieval_config() turn the merged dict into validated, frozen
# models so a bad deployment fails at startup instead of mid-request.
# ──────────────────────────────────────────────────────────────────────
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from design_copilot.config.settings import Settings
from design_copilot.models.config import IngestionConfig, RetrievalConfig
from design_copilot.utils.errors import ConfigurationError


def load_config(path: str = "config/config.yaml", settings: Settings | None = None) -> dict:
    """Load YAML config and merge with environment-based Settings.

    Args:
        path: Path to the YAML configuration file.
        settings: Settings instance to take overrides from.  A fresh one
            is built when omitted.

    Returns:
        Fully resolved configuration dictionary.
    """
    config_path = Path(path)
    if config_path.exists():
        with open(config_path) as f:
            yaml_config = yaml.safe_load(f) or {}
    else:
        yaml_config = {}

    settings = settings or Settings()
    env_overrides = {
        "app": {
            "host": settings.app_host,
            "port": settings.app_port,
            "env": settings.app_env,
        },
        "llm": {
            "available_providers": settings.get_available_llm_providers(),
        },
        "document_store": {
            "path": settings.document_store_path,
        },
        "logging": {
            "level": settings.log_level,
        },
    }

    _deep_merge(yaml_config, env_overrides)
    return yaml_config


def build_ingestion_config(config: dict[str, Any]) -> IngestionConfig:
    """Build the validated ingestion section, raising ConfigurationError on bad values."""
    try:
        return IngestionConfig(**config.get("ingestion", {}))
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid ingestion config: {exc}") from exc


def build_retrieval_config(config: dict[str, Any]) -> RetrievalConfig:
    """Build the validated retrieval section, raising ConfigurationError on bad values."""
    try:
        return RetrievalConfig(**config.get("retrieval", {}))
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid retrieval config: {exc}") from exc


def _deep_merge(base: dict, overrides: dict) -> None:
    """Recursively merge overrides into base dict, mutating base in place."""
    for key, value in overrides.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value
