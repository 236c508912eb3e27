"""API request/response schemas."""

from typing import Any

from pydantic import BaseModel, Field

from ..core.schemas import DirectiveStatus, HistoryEntry


class PhpSettingsUpdateRequest(BaseModel):
    """Desired directive values. Omitted directives are not written."""

    settings: dict[str, str] = Field(default_factory=dict)
    custom_php_ini: str | None = None

    def as_settings_map(self) -> dict[str, Any]:
        data: dict[str, Any] = dict(self.settings)
        if self.custom_php_ini is not None:
            data["custom_php_ini"] = self.custom_php_ini
        return data


class PhpSettingsResponse(BaseModel):
    settings: dict[str, Any] = Field(default_factory=dict)
    statuses: list[DirectiveStatus] = Field(default_factory=list)
    recommended: dict[str, str] = Field(default_factory=dict)


class DebuggingUpdateRequest(BaseModel):
    wp_debug: bool = False
    wp_debug_log: bool = False
    wp_debug_display: bool = False
    script_debug: bool = False


class WpMemoryUpdateRequest(BaseModel):
    wp_memory_limit: str = ""
    wp_max_memory_limit: str = ""


class HistoryResponse(BaseModel):
    entries: list[HistoryEntry] = Field(default_factory=list)
    total: int = 0


class HealthResponse(BaseModel):
    status: str
    version: str
