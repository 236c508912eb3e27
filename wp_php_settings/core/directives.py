"""Directive key sets, recommended values and WordPress constant tables."""

from typing import Any

from .enums import SettingType

CUSTOM_INI_KEY = "custom_php_ini"

# Canonical order; generated INI files follow this order, not input order.
PHP_DIRECTIVE_KEYS: tuple[str, ...] = (
    "memory_limit",
    "upload_max_filesize",
    "post_max_size",
    "max_execution_time",
    "max_input_vars",
)

# Editable only in the earliest revision; behind features.error_directives_editable.
ERROR_DIRECTIVE_KEYS: tuple[str, ...] = (
    "display_errors",
    "error_reporting",
)

RECOMMENDED_VALUES: dict[str, str] = {
    "memory_limit": "256M",
    "upload_max_filesize": "128M",
    "post_max_size": "256M",
    "max_execution_time": "300",
    "max_input_vars": "10000",
}

# wp_memory key -> wp-config.php constant
WP_MEMORY_CONSTANTS: dict[str, str] = {
    "wp_memory_limit": "WP_MEMORY_LIMIT",
    "wp_max_memory_limit": "WP_MAX_MEMORY_LIMIT",
}

# debugging key -> wp-config.php constant; patched in this order
DEBUG_CONSTANTS: dict[str, str] = {
    "wp_debug": "WP_DEBUG",
    "wp_debug_log": "WP_DEBUG_LOG",
    "wp_debug_display": "WP_DEBUG_DISPLAY",
    "script_debug": "SCRIPT_DEBUG",
}

# Option store keys
SETTINGS_OPTION = "easy_php_settings_settings"
DEBUGGING_OPTION = "easy_php_settings_debugging_settings"
WP_MEMORY_OPTION = "easy_php_settings_wp_memory_settings"
HISTORY_OPTION = "easy_php_settings_history"
BACKUP_OPTION = "easy_php_settings_backup"

OPTION_FOR_SETTING_TYPE: dict[SettingType, str] = {
    SettingType.PHP_SETTINGS: SETTINGS_OPTION,
    SettingType.WP_MEMORY: WP_MEMORY_OPTION,
    SettingType.DEBUGGING: DEBUGGING_OPTION,
}


def directive_keys(include_error_directives: bool = False) -> tuple[str, ...]:
    """Return the editable directive keys in canonical order."""
    if include_error_directives:
        return PHP_DIRECTIVE_KEYS + ERROR_DIRECTIVE_KEYS
    return PHP_DIRECTIVE_KEYS


def sanitize_php_settings(
    raw: dict[str, Any],
    keys: tuple[str, ...] = PHP_DIRECTIVE_KEYS,
) -> dict[str, str]:
    """Keep only known directive keys (plus the custom blob), stripped to text.

    Unknown and legacy keys are dropped silently. Output order follows
    ``keys``, with the custom block last.
    """
    clean: dict[str, str] = {}
    for key in keys:
        if key in raw and raw[key] is not None:
            clean[key] = " ".join(str(raw[key]).split())
    custom = raw.get(CUSTOM_INI_KEY)
    if custom is not None:
        clean[CUSTOM_INI_KEY] = str(custom).strip()
    return clean


def sanitize_wp_memory(raw: dict[str, Any]) -> dict[str, str]:
    clean: dict[str, str] = {}
    for key in WP_MEMORY_CONSTANTS:
        if key in raw and raw[key] is not None:
            clean[key] = "".join(str(raw[key]).split())
    return clean
