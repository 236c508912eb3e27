"""WordPress debug.log viewer."""

from pathlib import Path

import structlog

from ..core.schemas import LogView
from ..storage.filesystem import FilesystemBase

logger = structlog.get_logger()


class DebugLog:
    def __init__(self, path: Path, filesystem: FilesystemBase):
        self.path = Path(path)
        self.filesystem = filesystem

    def view(self, enabled: bool) -> LogView:
        """Log content; nothing is read while WP_DEBUG_LOG is off."""
        if not enabled:
            return LogView(enabled=False, exists=self.filesystem.exists(self.path))
        if not self.filesystem.exists(self.path):
            return LogView(enabled=True, exists=False)
        try:
            content = self.filesystem.read(self.path)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("debug_log_read_failed", path=str(self.path), error=str(e))
            return LogView(enabled=True, exists=True)
        return LogView(enabled=True, exists=True, content=content)

    def clear(self) -> bool:
        """Truncate the log. False when it is missing or not writable."""
        if not self.filesystem.exists(self.path) or not self.filesystem.is_writable(self.path):
            return False
        try:
            self.filesystem.write(self.path, "")
        except OSError as e:
            logger.warning("debug_log_clear_failed", path=str(self.path), error=str(e))
            return False
        return True
