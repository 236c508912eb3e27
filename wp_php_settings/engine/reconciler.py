"""Write or remove the generated INI files at their target paths."""

from pathlib import Path

import structlog

from ..storage.filesystem import FilesystemBase

logger = structlog.get_logger()


class IniFileReconciler:
    """Persist one rendered INI blob to every target path.

    Each target is attempted independently; a failure on one never stops
    the others and is reported only by absence from the returned list.
    """

    def __init__(self, targets: list[Path], filesystem: FilesystemBase):
        self.targets = [Path(t) for t in targets]
        self.filesystem = filesystem

    def write(self, content: str) -> list[str]:
        """Write ``content`` to every target; return base names of files written."""
        written: list[str] = []
        for path in self.targets:
            try:
                self.filesystem.write(path, content)
            except OSError as e:
                logger.warning("ini_file_write_failed", path=str(path), error=str(e))
                continue
            written.append(path.name)
        return written

    def remove(self) -> list[str]:
        """Delete existing targets; absent files are skipped, not reported."""
        deleted: list[str] = []
        for path in self.targets:
            if not self.filesystem.exists(path):
                continue
            try:
                self.filesystem.delete(path)
            except OSError as e:
                logger.warning("ini_file_delete_failed", path=str(path), error=str(e))
                continue
            deleted.append(path.name)
        return deleted

    def failed(self, written: list[str]) -> list[str]:
        """Base names of targets missing from a ``write``/``remove`` result."""
        return [p.name for p in self.targets if p.name not in written]
