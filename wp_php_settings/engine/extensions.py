"""Loaded PHP extension inventory (read-only, informational)."""

import structlog

from ..core.exceptions import RuntimeInspectionError
from ..core.schemas import ExtensionInventory
from .inspector import DirectiveSource

logger = structlog.get_logger()

OTHER = "Other"

EXTENSION_CATEGORIES: dict[str, tuple[str, ...]] = {
    "Core": ("Core", "standard", "SPL", "Reflection", "pcre", "date", "libxml"),
    "Database": ("mysqli", "mysqlnd", "pdo", "pdo_mysql", "pdo_sqlite", "sqlite3"),
    "Image": ("gd", "imagick", "exif"),
    "Performance": ("opcache", "Zend OPcache", "apcu", "apc", "memcached", "redis"),
    "XML/JSON": ("xml", "xmlreader", "xmlwriter", "SimpleXML", "json", "soap"),
    "Crypto": ("openssl", "hash", "mcrypt", "sodium"),
    "Compression": ("zlib", "bz2", "zip"),
    "Text": ("mbstring", "iconv", "intl"),
    "Network": ("curl", "ftp", "sockets"),
}

CRITICAL_EXTENSIONS: dict[str, str] = {
    "mysqli": "Required for WordPress database connections",
    "mbstring": "Required for proper text handling",
    "curl": "Required for HTTP requests",
    "zip": "Required for plugin/theme installation",
    "gd": "Required for image processing",
}

RECOMMENDED_EXTENSIONS: dict[str, str] = {
    "imagick": "Better image processing capabilities",
    "intl": "Internationalization support",
    "opcache": "Significant performance improvement",
    "xml": "XML processing for various features",
}


def categorize(loaded: list[str]) -> dict[str, list[str]]:
    """Place each extension in the first category that lists it, else Other.

    Empty categories are dropped, except Other which is always present.
    """
    categorized: dict[str, list[str]] = {name: [] for name in EXTENSION_CATEGORIES}
    categorized[OTHER] = []
    for ext in loaded:
        for name, members in EXTENSION_CATEGORIES.items():
            if ext in members:
                categorized[name].append(ext)
                break
        else:
            categorized[OTHER].append(ext)
    return {name: exts for name, exts in categorized.items() if exts or name == OTHER}


def _is_loaded(name: str, loaded: set[str]) -> bool:
    if name == "opcache":
        return "opcache" in loaded or "Zend OPcache" in loaded
    return name in loaded


def build_inventory(source: DirectiveSource) -> ExtensionInventory:
    try:
        versions = source.extensions()
    except RuntimeInspectionError as e:
        logger.warning("extension_inventory_failed", error=str(e))
        versions = {}
    loaded = list(versions)
    loaded_set = set(loaded)
    return ExtensionInventory(
        categories=categorize(loaded),
        versions={ext: (v or "N/A") for ext, v in versions.items()},
        critical_missing={
            ext: desc for ext, desc in CRITICAL_EXTENSIONS.items() if not _is_loaded(ext, loaded_set)
        },
        recommended=dict(RECOMMENDED_EXTENSIONS),
    )
