"""Service layer orchestrating engine components per admin action."""

from .settings_service import SettingsService

__all__ = ["SettingsService"]
