"""Option store persisted to a single JSON document on disk."""

import json
import tempfile
import threading
from pathlib import Path
from typing import Any

from ..core.enums import OptionScope
from ..core.exceptions import OptionStoreError
from .base import OptionStoreBase


class JsonFileOptionStore(OptionStoreBase):
    """All options in one JSON object; every write replaces the file atomically."""

    def __init__(self, path: Path, scope: OptionScope = OptionScope.SITE):
        super().__init__(scope)
        self.path = Path(path)
        self._lock = threading.Lock()

    def _load(self) -> dict[str, Any]:
        if not self.path.is_file():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except (OSError, json.JSONDecodeError) as e:
            raise OptionStoreError(f"Cannot read option file {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise OptionStoreError(f"Option file {self.path} does not hold a JSON object")
        return data

    def _dump(self, data: dict[str, Any]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                prefix=f"{self.path.name}.", suffix=".tmp", dir=self.path.parent, text=True
            )
        except OSError as e:
            raise OptionStoreError(f"Cannot write option file {self.path}: {e}") from e
        try:
            with open(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, sort_keys=True)
            Path(tmp_path).replace(self.path)
        except Exception as e:
            Path(tmp_path).unlink(missing_ok=True)
            raise OptionStoreError(f"Cannot write option file {self.path}: {e}") from e

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            return self._load().get(self.scoped_key(key), default)

    def set(self, key: str, value: Any) -> bool:
        with self._lock:
            data = self._load()
            data[self.scoped_key(key)] = value
            self._dump(data)
        return True

    def delete(self, key: str) -> bool:
        with self._lock:
            data = self._load()
            if data.pop(self.scoped_key(key), None) is None:
                return False
            self._dump(data)
        return True
