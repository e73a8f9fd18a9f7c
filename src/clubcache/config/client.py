import logging
import os

from .loader import client_table

logger = logging.getLogger(__name__)

_TRUTHY = {"1", "true", "yes", "on"}


def _as_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in _TRUTHY


def _as_int(name: str, value) -> int:
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid integer for {name}: {value!r}") from exc


class ClientOptions:
    def __init__(self, config: dict | None = None) -> None:
        client_cfg = client_table(config)

        self.BOT: bool = _as_bool(client_cfg.get("bot", os.getenv("CLUBCACHE_BOT", "true")))
        self.SEED_VOICE_CONNECTIONS: bool = _as_bool(
            client_cfg.get("seed_voice_connections", os.getenv("CLUBCACHE_SEED_VOICE_CONNECTIONS", "false"))
        )
        self.USER_CACHE_LIMIT: int = _as_int(
            "USER_CACHE_LIMIT",
            client_cfg.get("user_cache_limit", os.getenv("CLUBCACHE_USER_CACHE_LIMIT", "0")),
        )
        self.LOG_LEVEL: str = str(client_cfg.get("log_level", os.getenv("CLUBCACHE_LOG_LEVEL", "INFO"))).upper()

        if self.USER_CACHE_LIMIT < 0:
            raise ValueError("USER_CACHE_LIMIT must be >= 0")
        if not self.BOT and self.SEED_VOICE_CONNECTIONS:
            logger.info("Voice seeding only runs once deferred voice states are synced (BOT disabled).")
