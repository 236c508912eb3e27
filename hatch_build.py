"""Hatch build plugin: project version from the WP_PHP_SETTINGS_VERSION env var or the VERSION file."""

import os
from pathlib import Path

from hatchling.metadata.plugin.interface import MetadataHookInterface

VERSION_ENV_VAR = "WP_PHP_SETTINGS_VERSION"


def get_version(root: Path | None = None) -> str:
    """Return the release version; ``root`` defaults to the directory holding this file."""
    if root is None:
        root = Path(__file__).resolve().parent
    return os.environ.get(VERSION_ENV_VAR) or _read_version_file(root) or "0.0.0"


def _read_version_file(root: Path) -> str | None:
    version_file = root / "VERSION"
    if not version_file.is_file():
        return None
    return version_file.read_text().strip() or None


class VersionFileMetadataHook(MetadataHookInterface):
    """Set project version from the environment, then the VERSION file."""

    def update(self, metadata: dict) -> None:
        metadata["version"] = get_version(Path(self.root))
