from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path
from typing import Any, Dict

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("config.toml")
CONFIG_PATH_ENV = "CLUBCACHE_CONFIG"


def resolve_config_path(path: str | Path | None = None) -> Path:
    """Explicit ``path`` first, then ``$CLUBCACHE_CONFIG``, then ``./config.toml``."""

    if path is not None:
        return Path(path)
    env_path = os.getenv(CONFIG_PATH_ENV)
    return Path(env_path) if env_path else DEFAULT_CONFIG_PATH


def load_raw_config(path: str | Path | None = None) -> Dict[str, Any]:
    """
    Parse the cache's TOML config.

    A missing file is not an error: an empty dict comes back and every option
    falls through to its ``CLUBCACHE_*`` environment variable.
    """
    target = resolve_config_path(path)
    if not target.is_file():
        logger.debug("No config file at %s; using environment only", target)
        return {}

    with target.open("rb") as handle:
        return tomllib.load(handle)


def client_table(raw: Dict[str, Any] | None) -> Dict[str, Any]:
    """Return the ``[clubcache.client]`` table, or ``{}`` when it is absent."""

    return (raw or {}).get("clubcache", {}).get("client", {})


__all__ = ["load_raw_config", "resolve_config_path", "client_table", "DEFAULT_CONFIG_PATH", "CONFIG_PATH_ENV"]
