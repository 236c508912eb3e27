"""Read and patch ``define()`` constants in wp-config.php.

Line-oriented: a ``define(...)`` call is recognised anywhere in a line as
long as it closes on that same line. Defines behind ``//``, ``#`` or an open
``/*`` on their line, and lines inside a docblock (leading ``*``), are left alone.
"""

import re
from collections.abc import Sequence
from pathlib import Path

import structlog

from ..core.exceptions import AnchorNotFoundError, ConfigFileNotWritableError
from ..storage.filesystem import FilesystemBase

logger = structlog.get_logger()

STOP_EDITING_ANCHOR = "/* That's all, stop editing!"
_WP_SETTINGS_REQUIRE = re.compile(
    r"^\s*require_once\s*\(?\s*ABSPATH\s*\.\s*['\"]wp-settings\.php['\"]\s*\)?\s*;"
)

ConstantValue = bool | str
Assignment = tuple[str, ConstantValue]


def render_php_value(value: ConstantValue) -> str:
    """PHP literal for a constant value: booleans bare, everything else single-quoted."""
    if isinstance(value, bool):
        return "true" if value else "false"
    s = str(value).replace("\\", "\\\\").replace("'", "\\'")
    return f"'{s}'"


def parse_php_value(raw: str) -> ConstantValue:
    """Inverse of render_php_value for simple literals; other expressions come back as-is."""
    text = raw.strip()
    if text.lower() == "true":
        return True
    if text.lower() == "false":
        return False
    if len(text) >= 2 and text[0] == text[-1] and text[0] in ("'", '"'):
        return text[1:-1].replace("\\'", "'").replace("\\\\", "\\")
    return text


def render_define(name: str, value: ConstantValue) -> str:
    return f"define( '{name}', {render_php_value(value)} );"


def _define_pattern(name: str) -> re.Pattern[str]:
    return re.compile(
        r"(?<![\w$>:])define\s*\(\s*(?P<q>['\"])"
        + re.escape(name)
        + r"(?P=q)\s*,\s*(?P<value>.*?)\s*\)\s*;",
        re.IGNORECASE,
    )


def _is_commented(prefix: str) -> bool:
    """True when code after ``prefix`` on the same line is inside a comment."""
    if "//" in prefix or "#" in prefix:
        return True
    if prefix.rfind("/*") > prefix.rfind("*/"):
        return True
    return prefix.lstrip().startswith("*")


def _live_matches(pattern: re.Pattern[str], line: str) -> list[re.Match[str]]:
    return [m for m in pattern.finditer(line) if not _is_commented(line[: m.start()])]


def find_define(source_text: str, name: str) -> str | None:
    """Raw PHP expression assigned to ``name`` by its first live define, or None."""
    pattern = _define_pattern(name)
    for line in source_text.splitlines():
        matches = _live_matches(pattern, line)
        if matches:
            return matches[0].group("value")
    return None


def _apply_one(source_text: str, name: str, value: ConstantValue) -> str:
    pattern = _define_pattern(name)
    statement = render_define(name, value)
    lines = source_text.splitlines(keepends=True)

    replaced = False
    for i, line in enumerate(lines):
        matches = _live_matches(pattern, line)
        if not matches:
            continue
        # Right to left so earlier spans stay valid.
        for m in reversed(matches):
            line = line[: m.start()] + statement + line[m.end():]
        lines[i] = line
        replaced = True
    if replaced:
        return "".join(lines)

    for i, line in enumerate(lines):
        pos = line.find(STOP_EDITING_ANCHOR)
        if pos == -1:
            continue
        lines[i] = line[:pos] + statement + "\n\n" + line[pos:]
        return "".join(lines)

    # Second choice: directly above the wp-settings.php bootstrap line.
    for i, line in enumerate(lines):
        if _WP_SETTINGS_REQUIRE.match(line):
            lines.insert(i, statement + "\n\n")
            return "".join(lines)

    raise AnchorNotFoundError(name)


def apply_constants(source_text: str, assignments: Sequence[Assignment]) -> str:
    """Apply every assignment, in order, to the cumulative text.

    An existing define is rewritten in place; otherwise a new one is
    inserted right above the stop-editing marker. Nothing else in the text
    changes. Raises AnchorNotFoundError when a constant has nowhere to go.
    """
    text = source_text
    for name, value in assignments:
        text = _apply_one(text, name, value)
    return text


class WpConfigFile:
    """wp-config.php on disk, read and patched through a filesystem abstraction."""

    def __init__(self, path: Path, filesystem: FilesystemBase):
        self.path = Path(path)
        self.filesystem = filesystem

    def read_constants(self, names: Sequence[str]) -> dict[str, ConstantValue | None]:
        """Current values of ``names``; missing file or define maps to None."""
        if not self.filesystem.exists(self.path):
            return {name: None for name in names}
        text = self.filesystem.read(self.path)
        result: dict[str, ConstantValue | None] = {}
        for name in names:
            raw = find_define(text, name)
            result[name] = parse_php_value(raw) if raw is not None else None
        return result

    def apply(self, assignments: Sequence[Assignment]) -> bool:
        """Patch the file with the whole batch; one write after all assignments.

        Returns True when the file content changed. Raises
        ConfigFileNotWritableError, AnchorNotFoundError or OSError.
        """
        if not self.filesystem.exists(self.path) or not self.filesystem.is_writable(self.path):
            raise ConfigFileNotWritableError(self.path)
        original = self.filesystem.read(self.path)
        patched = apply_constants(original, assignments)
        if patched == original:
            logger.info("wp_config_unchanged", path=str(self.path))
            return False
        self.filesystem.write(self.path, patched)
        logger.info(
            "wp_config_constants_written",
            path=str(self.path),
            constants=[name for name, _ in assignments],
        )
        return True
