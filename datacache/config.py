"""Helpers to load configuration from YAML."""
from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict

import yaml

from .models import DataCacheConfig


DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / "config" / "default.yaml"
ENV_CONFIG_PATH = "DATACACHE_CONFIG_PATH"
ENV_LOG_LEVEL = "DATACACHE_LOG_LEVEL"


def _normalize_keys(data: Dict[str, Any]) -> Dict[str, Any]:
    """Понижает регистр ключей верхнего уровня."""
    return {str(key).lower(): value for key, value in data.items()}


def load_config(path: Path | None = None) -> DataCacheConfig:
    """Loads config from YAML file."""
    config_path = path or Path(os.getenv(ENV_CONFIG_PATH, DEFAULT_CONFIG_PATH))
    with open(config_path, "r", encoding="utf-8") as fh:
        raw_data: Dict[str, Any] = yaml.safe_load(fh) or {}
    normalized = _normalize_keys(raw_data)

    level = os.getenv(ENV_LOG_LEVEL, "").strip()
    if level:
        logging_section = dict(normalized.get("logging") or {})
        logging_section["level"] = level.upper()
        normalized["logging"] = logging_section
    return DataCacheConfig.model_validate(normalized)
