"""Build the configured option store backend."""

from pathlib import Path

from ..core.config import Settings
from ..core.enums import OptionScope
from ..core.exceptions import ConfigurationError
from .base import OptionStoreBase
from .json_file import JsonFileOptionStore
from .memory import InMemoryOptionStore
from .redis import RedisOptionStore, get_redis_client

DEFAULT_JSON_FILE = ".wp-php-settings.json"


def option_scope(settings: Settings) -> OptionScope:
    """Network-wide on multisite installs, per-site otherwise."""
    return OptionScope.NETWORK if settings.options.multisite else OptionScope.SITE


def default_json_path(root_dir: Path) -> Path:
    """Options file beside the WordPress root, never inside the served document root."""
    return Path(root_dir).resolve().parent / DEFAULT_JSON_FILE


def create_option_store(settings: Settings) -> OptionStoreBase:
    opts = settings.options
    scope = option_scope(settings)
    backend = opts.backend.lower()
    if backend == "memory":
        return InMemoryOptionStore(scope)
    if backend == "json":
        path = opts.json_path or default_json_path(settings.paths.root_dir)
        return JsonFileOptionStore(path, scope)
    if backend == "redis":
        return RedisOptionStore(get_redis_client(opts.redis_url), scope)
    raise ConfigurationError(f"Unknown option store backend: {opts.backend!r}")
