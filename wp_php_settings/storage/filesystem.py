"""Filesystem abstraction used for INI targets, wp-config.php and debug.log."""

import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path


class FilesystemBase(ABC):
    """Minimal file operations. Failures raise ``OSError``."""

    @abstractmethod
    def exists(self, path: Path) -> bool: ...

    @abstractmethod
    def read(self, path: Path) -> str: ...

    @abstractmethod
    def write(self, path: Path, content: str) -> None: ...

    @abstractmethod
    def delete(self, path: Path) -> None: ...

    @abstractmethod
    def is_writable(self, path: Path) -> bool: ...


class LocalFilesystem(FilesystemBase):
    """Direct access to the local disk."""

    def exists(self, path: Path) -> bool:
        return Path(path).exists()

    def read(self, path: Path) -> str:
        return Path(path).read_text(encoding="utf-8")

    def write(self, path: Path, content: str) -> None:
        """Write atomically via temp file + replace in the same directory."""
        path = Path(path)
        fd, tmp_path = tempfile.mkstemp(
            prefix=f"{path.name}.", suffix=".tmp", dir=path.parent, text=True
        )
        try:
            with open(fd, "w", encoding="utf-8", newline="") as f:
                f.write(content)
            if path.exists():
                os.chmod(tmp_path, path.stat().st_mode & 0o777)
            else:
                os.chmod(tmp_path, 0o644)
            Path(tmp_path).replace(path)
        except Exception:
            Path(tmp_path).unlink(missing_ok=True)
            raise

    def delete(self, path: Path) -> None:
        Path(path).unlink()

    def is_writable(self, path: Path) -> bool:
        path = Path(path)
        if path.exists():
            return os.access(path, os.W_OK)
        return path.parent.is_dir() and os.access(path.parent, os.W_OK)
