"""Advisory cross-checks on a proposed PHP settings map."""

from typing import Any

from .byte_size import leading_int, to_bytes

MIN_EXECUTION_TIME = 30
EXCESSIVE_MEMORY_LIMIT = 512 * 1024 * 1024


def _present(settings: dict[str, Any], *keys: str) -> bool:
    return all(key in settings for key in keys)


def validate_settings(settings: dict[str, Any]) -> list[str]:
    """Return warning messages for a candidate settings map.

    Warnings are non-fatal; saving proceeds regardless. A check is skipped
    unless every key it reads is present.
    """
    warnings: list[str] = []
    if _present(settings, "post_max_size", "upload_max_filesize"):
        if to_bytes(settings["post_max_size"]) < to_bytes(settings["upload_max_filesize"]):
            warnings.append(
                "post_max_size should be larger than upload_max_filesize, "
                "otherwise uploads near the size limit will fail."
            )
    if _present(settings, "memory_limit", "post_max_size"):
        if to_bytes(settings["memory_limit"]) < to_bytes(settings["post_max_size"]):
            warnings.append("memory_limit should be larger than post_max_size.")
    if _present(settings, "max_execution_time"):
        if leading_int(str(settings["max_execution_time"])) < MIN_EXECUTION_TIME:
            warnings.append(
                f"max_execution_time is below {MIN_EXECUTION_TIME} seconds; "
                "long-running requests such as imports and updates may time out."
            )
    if _present(settings, "memory_limit"):
        if to_bytes(settings["memory_limit"]) > EXCESSIVE_MEMORY_LIMIT:
            warnings.append(
                "memory_limit is set above 512M, which is excessive for most sites."
            )
    return warnings
