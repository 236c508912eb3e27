"""Redis-backed option store."""
import json
from typing import Any

import structlog

from ..core.enums import OptionScope
from ..core.exceptions import OptionStoreError
from .base import OptionStoreBase

logger = structlog.get_logger()

_KEY_PREFIX = "wp_php_settings:option:"


def get_redis_client(redis_url: str) -> Any:
    """Return a synchronous Redis client for ``redis_url``."""
    import redis

    return redis.Redis.from_url(redis_url, decode_responses=True)


class RedisOptionStore(OptionStoreBase):
    """Options as JSON strings under ``wp_php_settings:option:<scope>:<key>``."""

    def __init__(self, client: Any, scope: OptionScope = OptionScope.SITE):
        super().__init__(scope)
        self.client = client

    def _rkey(self, key: str) -> str:
        return f"{_KEY_PREFIX}{self.scoped_key(key)}"

    def get(self, key: str, default: Any = None) -> Any:
        try:
            raw = self.client.get(self._rkey(key))
        except Exception as e:
            logger.warning("option_store_redis_error", op="get", key=key, error=str(e))
            raise OptionStoreError(f"Redis get failed for {key}: {e}") from e
        if raw is None:
            return default
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8")
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            raise OptionStoreError(f"Option {key} holds invalid JSON") from e

    def set(self, key: str, value: Any) -> bool:
        try:
            return bool(self.client.set(self._rkey(key), json.dumps(value)))
        except Exception as e:
            logger.warning("option_store_redis_error", op="set", key=key, error=str(e))
            raise OptionStoreError(f"Redis set failed for {key}: {e}") from e

    def delete(self, key: str) -> bool:
        try:
            return bool(self.client.delete(self._rkey(key)))
        except Exception as e:
            logger.warning("option_store_redis_error", op="delete", key=key, error=str(e))
            raise OptionStoreError(f"Redis delete failed for {key}: {e}") from e
