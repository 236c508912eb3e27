"""Shared pytest fixtures: a throwaway WordPress root and a wired SettingsService."""

from datetime import datetime
from pathlib import Path

import pytest

from wp_php_settings.core.config import PathSettings, get_settings
from wp_php_settings.core.schemas import Actor, DirectiveInfo
from wp_php_settings.engine.inspector import StaticDirectiveSource
from wp_php_settings.services.settings_service import SettingsService
from wp_php_settings.storage.filesystem import LocalFilesystem
from wp_php_settings.storage.memory import InMemoryOptionStore

WP_CONFIG_TEMPLATE = """<?php
/**
 * The base configuration for WordPress
 */

define( 'DB_NAME', 'wordpress' );
define( 'DB_USER', 'wp' );

$table_prefix = 'wp_';

/* Add any custom values between this line and the "stop editing" line. */



/* That's all, stop editing! Happy publishing. */

/** Absolute path to the WordPress directory. */
if ( ! defined( 'ABSPATH' ) ) {
	define( 'ABSPATH', __DIR__ . '/' );
}

/** Sets up WordPress vars and included files. */
require_once ABSPATH . 'wp-settings.php';
"""

FIXED_NOW = datetime(2024, 5, 1, 12, 30, 0)


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    """Auto-clear the settings LRU cache after each test to prevent pollution."""
    yield
    get_settings.cache_clear()


@pytest.fixture
def wp_root(tmp_path) -> Path:
    """Minimal WordPress install: wp-config.php with the stop-editing marker and wp-content/."""
    (tmp_path / "wp-content").mkdir()
    (tmp_path / "wp-config.php").write_text(WP_CONFIG_TEMPLATE, encoding="utf-8")
    return tmp_path


@pytest.fixture
def paths(wp_root) -> PathSettings:
    return PathSettings(root_dir=wp_root)


@pytest.fixture
def directive_source() -> StaticDirectiveSource:
    """Runtime where memory_limit is changeable and the upload sizes are per-dir only."""
    return StaticDirectiveSource(
        directives={
            "memory_limit": DirectiveInfo(value="128M", access=7),
            "upload_max_filesize": DirectiveInfo(value="2M", access=6),
            "post_max_size": DirectiveInfo(value="8M", access=6),
            "max_execution_time": DirectiveInfo(value="30", access=7),
            "max_input_vars": DirectiveInfo(value="1000", access=6),
            "display_errors": DirectiveInfo(value="1", access=7),
            "error_reporting": DirectiveInfo(value="32767", access=7),
        },
        extensions={
            "Core": "8.2.10",
            "mysqli": "8.2.10",
            "mbstring": "8.2.10",
            "curl": "8.2.10",
            "Zend OPcache": "8.2.10",
            "xdebug": None,
        },
    )


@pytest.fixture
def option_store() -> InMemoryOptionStore:
    return InMemoryOptionStore()


@pytest.fixture
def admin() -> Actor:
    return Actor(user_id="1", user_login="admin", can_manage_options=True)


@pytest.fixture
def viewer() -> Actor:
    return Actor(user_id="2", user_login="editor", can_manage_options=False)


@pytest.fixture
def service(option_store, directive_source, paths) -> SettingsService:
    return SettingsService(
        store=option_store,
        filesystem=LocalFilesystem(),
        source=directive_source,
        paths=paths,
        site_url="https://example.test",
        clock=lambda: FIXED_NOW,
    )


@pytest.fixture
def wp_config_text() -> str:
    return WP_CONFIG_TEMPLATE
