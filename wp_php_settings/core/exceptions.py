"""Custom exception hierarchy for wp-php-settings."""


class WpPhpSettingsError(Exception):
    """Base exception for all wp-php-settings errors."""

    pass


class ConfigurationError(WpPhpSettingsError):
    """Application configuration is invalid or missing required values."""

    pass


# --- Storage errors ---


class OptionStoreError(WpPhpSettingsError):
    """Option store backend failed to read or write a value."""

    pass


# --- Runtime errors ---


class RuntimeInspectionError(WpPhpSettingsError):
    """The PHP runtime could not be queried (binary missing, bad output)."""

    pass


# --- Config file errors ---


class ConfigFileNotWritableError(WpPhpSettingsError):
    """wp-config.php is missing or cannot be written."""

    def __init__(self, path=None, message: str = "Configuration file is not writable"):
        self.path = path
        super().__init__(f"{message}: {path}" if path else message)


class AnchorNotFoundError(WpPhpSettingsError):
    """No existing define and no insertion anchor for a constant."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Cannot place constant {name}: no insertion anchor in configuration file")


# --- History errors ---


class HistoryEntryNotFoundError(WpPhpSettingsError):
    """Requested history entry does not exist."""

    def __init__(self, index=None, message: str = "History entry not found"):
        self.index = index
        super().__init__(f"{message}: {index}" if index is not None else message)


# --- Import errors ---


class ImportPayloadError(WpPhpSettingsError):
    """Settings import document is malformed or empty."""

    pass
