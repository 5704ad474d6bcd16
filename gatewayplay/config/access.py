"""Process-local cache of loaded configuration.

An entry belongs to one config file and to the GATEWAYPLAY_* environment seen
when it was loaded, so changing an override yields a fresh load.
"""

from __future__ import annotations

import os
import threading
from pathlib import Path

from loguru import logger

from gatewayplay.config.loader import get_config_path, load_config
from gatewayplay.config.schema import Config

ENV_PREFIX = str(Config.model_config.get("env_prefix", "GATEWAYPLAY_")).upper()

CacheKey = tuple[str, tuple[tuple[str, str], ...]]

_lock = threading.RLock()
_entries: dict[CacheKey, Config] = {}


def _resolve(config_path: Path | None) -> Path:
    return Path(config_path or get_config_path()).expanduser().resolve()


def env_overrides() -> tuple[tuple[str, str], ...]:
    """Sorted GATEWAYPLAY_* variables currently set."""
    return tuple(sorted((k, v) for k, v in os.environ.items() if k.upper().startswith(ENV_PREFIX)))


def config_cache_key(config_path: Path | None = None) -> CacheKey:
    return str(_resolve(config_path)), env_overrides()


def get_config(*, config_path: Path | None = None, force_reload: bool = False) -> Config:
    """Return the config for this file and environment, loading it on first use."""
    key = config_cache_key(config_path)
    with _lock:
        config = None if force_reload else _entries.get(key)
        if config is None:
            logger.debug("Loading config from {} ({} env overrides)", key[0], len(key[1]))
            config = load_config(Path(key[0]))
            _entries[key] = config
        return config


def clear_config_cache(*, config_path: Path | None = None) -> None:
    """Forget every entry of one config file, or everything when no path is given."""
    with _lock:
        if config_path is None:
            _entries.clear()
            return
        path = str(_resolve(config_path))
        for key in [key for key in _entries if key[0] == path]:
            del _entries[key]
