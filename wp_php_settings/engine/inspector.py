"""Live PHP runtime inspection: directive values, access levels, extensions."""

import json
import subprocess
from abc import ABC, abstractmethod
from collections.abc import Iterable

import structlog

from ..core.enums import DirectiveAccess
from ..core.exceptions import RuntimeInspectionError
from ..core.schemas import DirectiveInfo

logger = structlog.get_logger()

# Only these access levels allow in-process changes (ini_set).
_RUNTIME_CHANGEABLE = frozenset({int(DirectiveAccess.USER), int(DirectiveAccess.ALL)})

_PHP_PROBE = (
    "$d=[];"
    "foreach(ini_get_all(null,true) as $k=>$v){"
    "$d[$k]=['value'=>(string)$v['local_value'],'access'=>$v['access']];}"
    "$e=[];"
    "foreach(get_loaded_extensions() as $x){$e[$x]=phpversion($x)?:null;}"
    "echo json_encode(['directives'=>$d,'extensions'=>$e]);"
)


class DirectiveSource(ABC):
    """Where directive and extension data comes from."""

    @abstractmethod
    def directives(self) -> dict[str, DirectiveInfo]:
        """All directives known to the runtime."""
        ...

    @abstractmethod
    def extensions(self) -> dict[str, str | None]:
        """Loaded extensions mapped to their version (None when unknown)."""
        ...


class PhpCliDirectiveSource(DirectiveSource):
    """Query a PHP binary with a one-shot probe script.

    The CLI reads its own php.ini; point ``php_ini`` at the web SAPI's
    file to see what the web server sees.
    """

    def __init__(self, php_binary: str = "php", php_ini: str | None = None, timeout: float = 10.0):
        self.php_binary = php_binary
        self.php_ini = php_ini
        self.timeout = timeout

    def _probe(self) -> dict:
        cmd = [self.php_binary]
        if self.php_ini:
            cmd += ["-c", self.php_ini]
        cmd += ["-r", _PHP_PROBE]
        try:
            proc = subprocess.run(
                cmd, capture_output=True, text=True, timeout=self.timeout, check=True
            )
        except (OSError, subprocess.SubprocessError) as e:
            raise RuntimeInspectionError(f"php probe failed: {e}") from e
        try:
            data = json.loads(proc.stdout)
        except json.JSONDecodeError as e:
            raise RuntimeInspectionError(f"php probe returned invalid JSON: {e}") from e
        if not isinstance(data, dict):
            raise RuntimeInspectionError("php probe returned unexpected payload")
        return data

    def directives(self) -> dict[str, DirectiveInfo]:
        raw = self._probe().get("directives") or {}
        return {
            name: DirectiveInfo(value=str(item.get("value") or ""), access=int(item.get("access") or 0))
            for name, item in raw.items()
            if isinstance(item, dict)
        }

    def extensions(self) -> dict[str, str | None]:
        raw = self._probe().get("extensions") or {}
        return {str(name): (str(v) if v else None) for name, v in raw.items()}


class StaticDirectiveSource(DirectiveSource):
    """Fixed directive and extension tables (tests, offline use)."""

    def __init__(
        self,
        directives: dict[str, DirectiveInfo] | None = None,
        extensions: dict[str, str | None] | None = None,
    ):
        self._directives = dict(directives or {})
        self._extensions = dict(extensions or {})

    def directives(self) -> dict[str, DirectiveInfo]:
        return dict(self._directives)

    def extensions(self) -> dict[str, str | None]:
        return dict(self._extensions)


class RuntimeDirectiveInspector:
    """Current value and mutability of directives, queried fresh on every call."""

    def __init__(self, source: DirectiveSource):
        self.source = source

    def _query(self) -> dict[str, DirectiveInfo]:
        try:
            return self.source.directives()
        except RuntimeInspectionError as e:
            logger.warning("runtime_inspection_failed", error=str(e))
            return {}

    def inspect(self, keys: Iterable[str]) -> dict[str, DirectiveInfo]:
        """One runtime query for several keys; unknown keys map to an empty DirectiveInfo."""
        live = self._query()
        return {key: live.get(key, DirectiveInfo()) for key in keys}

    def current_value(self, key: str) -> str:
        return self._query().get(key, DirectiveInfo()).value

    def is_changeable_at_runtime(self, key: str) -> bool:
        info = self._query().get(key)
        return info is not None and is_changeable(info.access)


def is_changeable(access: int) -> bool:
    """User-settable and settable-anywhere directives only; startup/system-only are not."""
    return access in _RUNTIME_CHANGEABLE
