"""Core enums for setting groups, notices, option scopes and directive access."""

from enum import Enum, IntFlag


class SettingType(str, Enum):
    """Group a stored settings blob (and its history entries) belongs to."""

    PHP_SETTINGS = "php_settings"
    WP_MEMORY = "wp_memory"
    DEBUGGING = "debugging"


class NoticeSeverity(str, Enum):
    """Severity of an advisory message shown to the acting user."""

    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class OptionScope(str, Enum):
    """Option storage scope: one site, or network-wide on multisite installs."""

    SITE = "site"
    NETWORK = "network"


class DirectiveAccess(IntFlag):
    """PHP ini access levels as reported by ``ini_get_all(null, true)``."""

    USER = 1  # PHP_INI_USER
    PERDIR = 2  # PHP_INI_PERDIR
    SYSTEM = 4  # PHP_INI_SYSTEM
    ALL = 7  # PHP_INI_ALL
