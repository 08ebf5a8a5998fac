"""Unified configuration layer for providers.

Sources are merged in a predictable order (later wins):

1. Optional external config file (JSON or YAML) named by ``PROVIDERS_CONFIG_FILE``
2. Environment variables: ``<PROVIDER>_MODEL``, ``<PROVIDER>_BASE_URL`` and the
   API key resolved through :mod:`lingyi_providers.config.env`
3. In-code overrides passed to :func:`get_provider_config`

Hard-coded fallbacks are *not* merged here; they live in
:mod:`lingyi_providers.config.defaults` and are applied by the client so that
"not configured" stays distinguishable from "configured to the default".

External config file example::

    lingyi:
      model: yi-lightning
      base_url: https://api.lingyiwanwu.com/v1
      api_key: ${LINGYI_API_KEY}
"""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .defaults import CompletionDefaults
from .env import is_placeholder, resolve_provider_key


ENV_FIELD_MAP = {
    "model": "MODEL",
    "base_url": "BASE_URL",
}


_FILE_CACHE: Optional[Dict[str, Any]] = None


def _load_external_config() -> Dict[str, Any]:
    """Load and cache the file named by ``PROVIDERS_CONFIG_FILE`` (JSON first, then YAML)."""
    global _FILE_CACHE  # noqa: PLW0603 - documented module cache
    if _FILE_CACHE is not None:
        return _FILE_CACHE
    path = os.getenv("PROVIDERS_CONFIG_FILE")
    if not path or not Path(path).is_file():
        _FILE_CACHE = {}
        return _FILE_CACHE
    text = Path(path).read_text(encoding="utf-8")
    try:
        data = json.loads(text)
    except ValueError:
        try:
            data = yaml.safe_load(text) or {}
        except yaml.YAMLError:
            data = {}
    _FILE_CACHE = data if isinstance(data, dict) else {}
    return _FILE_CACHE


def reset_config_cache() -> None:
    """Forget the cached external config file (used by tests)."""
    global _FILE_CACHE  # noqa: PLW0603
    _FILE_CACHE = None


def _env_overrides(provider: str) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    prefix = provider.upper()
    for field, suffix in ENV_FIELD_MAP.items():
        val = os.getenv(f"{prefix}_{suffix}")
        if val:
            out[field] = val
    key, _ = resolve_provider_key(provider)
    if key:
        out["api_key"] = key
    return out


def get_provider_config(provider: str, overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Return merged configuration for a provider.

    Merge order (later wins): external config -> env vars -> overrides.
    Placeholder API keys from the config file are dropped.
    """
    name = (provider or "").lower().strip()
    cfg: Dict[str, Any] = {}

    file_cfg = _load_external_config().get(name)
    if isinstance(file_cfg, dict):
        cfg |= file_cfg
    if is_placeholder(cfg.get("api_key")):
        cfg.pop("api_key", None)

    cfg |= _env_overrides(name)

    if overrides:
        cfg |= {k: v for k, v in overrides.items() if v is not None}

    return cfg


__all__ = [
    "CompletionDefaults",
    "get_provider_config",
    "reset_config_cache",
]
