"""Render a PHP settings map into INI file text."""

from datetime import datetime
from typing import Any

from ..core.directives import CUSTOM_INI_KEY, PHP_DIRECTIVE_KEYS

HEADER_TITLE = "; PHP settings generated by wp-php-settings"
HEADER_NOTICE = "; Managed file: manual edits are overwritten on the next save"
CUSTOM_HEADER = "; Custom php.ini directives"
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def render_ini(
    settings: dict[str, Any],
    keys: tuple[str, ...] = PHP_DIRECTIVE_KEYS,
    generated_at: datetime | None = None,
) -> str:
    """Build the full INI content from the complete settings map.

    Directive lines follow ``keys`` order, not the input order; empty values
    are left out. The custom blob is appended verbatim after its own header.
    """
    stamp = (generated_at or datetime.now()).strftime(TIMESTAMP_FORMAT)
    lines = [HEADER_TITLE, HEADER_NOTICE, f"; Generated on: {stamp}", ""]
    for key in keys:
        value = settings.get(key)
        if value is None or str(value).strip() == "":
            continue
        lines.append(f"{key} = {value}")
    content = "\n".join(lines) + "\n"

    custom = settings.get(CUSTOM_INI_KEY)
    if custom:
        content += f"\n{CUSTOM_HEADER}\n{custom}\n"
    return content
