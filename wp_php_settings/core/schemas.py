"""Core pydantic schemas shared by engine, service and API."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .enums import NoticeSeverity, SettingType


class Actor(BaseModel):
    """The identity performing an action."""

    user_id: str | None = None
    user_login: str = "system"
    can_manage_options: bool = False


class Notice(BaseModel):
    """Advisory message rendered on the settings screen."""

    severity: NoticeSeverity
    message: str

    @classmethod
    def success(cls, message: str) -> "Notice":
        return cls(severity=NoticeSeverity.SUCCESS, message=message)

    @classmethod
    def info(cls, message: str) -> "Notice":
        return cls(severity=NoticeSeverity.INFO, message=message)

    @classmethod
    def warning(cls, message: str) -> "Notice":
        return cls(severity=NoticeSeverity.WARNING, message=message)

    @classmethod
    def error(cls, message: str) -> "Notice":
        return cls(severity=NoticeSeverity.ERROR, message=message)


class DirectiveInfo(BaseModel):
    """Live value and access level of one directive, as the runtime reports it."""

    value: str = ""
    access: int = 0


class DirectiveStatus(BaseModel):
    """Status row for one editable directive."""

    key: str
    current_value: str
    recommended_value: str | None = None
    changeable_at_runtime: bool
    is_low: bool | None = None  # None when no recommended value exists


class HistoryChange(BaseModel):
    old: Any = ""
    new: Any = ""


class HistoryEntry(BaseModel):
    """One recorded delta between two settings states. Never edited once stored."""

    timestamp: str
    user_id: str | None = None
    user_login: str = ""
    setting_type: SettingType = SettingType.PHP_SETTINGS
    changes: dict[str, HistoryChange] = Field(default_factory=dict)


class RestoreResult(BaseModel):
    """Settings after reverting ``entry``, and the values they replaced."""

    setting_type: SettingType
    settings: dict[str, Any]
    previous: dict[str, Any] = Field(default_factory=dict)
    entry: HistoryEntry


class ExtensionInventory(BaseModel):
    categories: dict[str, list[str]] = Field(default_factory=dict)
    versions: dict[str, str] = Field(default_factory=dict)
    critical_missing: dict[str, str] = Field(default_factory=dict)
    recommended: dict[str, str] = Field(default_factory=dict)


class LogView(BaseModel):
    enabled: bool
    exists: bool
    content: str = ""


class SettingsExport(BaseModel):
    """Settings export/import document. Unknown top-level keys are ignored."""

    model_config = ConfigDict(extra="ignore")

    php_settings: dict[str, Any] | None = None
    wp_memory: dict[str, Any] | None = None
    plugin_version: str | None = None
    export_time: str | None = None
    export_site_url: str | None = None


class ActionResult(BaseModel):
    """Outcome of one mutating action: notices plus action-specific detail."""

    notices: list[Notice] = Field(default_factory=list)
    files: list[str] = Field(default_factory=list)
    restart_required: list[str] = Field(default_factory=list)
    settings: dict[str, Any] | None = None
