"""Configuration management with pydantic-settings."""

from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel as PydanticBaseModel
from pydantic import Field
from pydantic_settings import BaseSettings


class PathSettings(PydanticBaseModel):
    """Filesystem locations of the managed WordPress installation."""

    root_dir: Path = Field(default=Path("."))  # ABSPATH
    content_dir: Path | None = Field(default=None)  # None = <root_dir>/wp-content
    config_file: str = Field(default="wp-config.php")
    debug_log: str = Field(default="debug.log")
    ini_file_names: list[str] = Field(default_factory=lambda: [".user.ini", "php.ini"])

    def resolved_content_dir(self) -> Path:
        return self.content_dir if self.content_dir is not None else self.root_dir / "wp-content"

    def config_path(self) -> Path:
        return self.root_dir / self.config_file

    def debug_log_path(self) -> Path:
        return self.resolved_content_dir() / self.debug_log

    def ini_paths(self) -> list[Path]:
        return [self.root_dir / name for name in self.ini_file_names]


class RuntimeSettings(PydanticBaseModel):
    """How the live PHP runtime is queried."""

    php_binary: str = Field(default="php")
    php_ini: str | None = Field(default=None)  # passed as `php -c <path>` when set
    timeout_seconds: float = Field(default=10.0)


class OptionStoreSettings(PydanticBaseModel):
    """Key-value option store backend (site or network scoped)."""

    backend: str = Field(default="memory")  # memory | json | redis
    json_path: Path | None = Field(default=None)  # None = <root_dir>/../.wp-php-settings.json
    redis_url: str = Field(default="redis://localhost:6379")
    multisite: bool = Field(default=False)


class AuthSettings(PydanticBaseModel):
    """
    API authentication (keys from environment).
    Env vars (with env_nested_delimiter='__'): AUTH__API_KEY, AUTH__ADMIN_API_KEY, AUTH__DEFAULT_USER_LOGIN.
    """

    api_key: str | None = Field(default=None)
    admin_api_key: str | None = Field(default=None)
    default_user_login: str = Field(default="admin")


class FeatureSettings(PydanticBaseModel):
    """Optional feature sets that changed between plugin revisions."""

    error_directives_editable: bool = Field(
        default=False,
        description="Expose display_errors and error_reporting as editable directives.",
    )
    wp_memory_enabled: bool = Field(default=True)


class HistorySettings(PydanticBaseModel):
    max_entries: int = Field(default=50)


class Settings(BaseSettings):
    """Application settings with nested configuration."""

    app_name: str = Field(default="wp-php-settings")
    debug: bool = Field(default=False)
    log_level: str = Field(default="INFO")
    json_logs: bool = Field(default=True)
    site_url: str = Field(default="http://localhost")
    cors_origins: list[str] | None = Field(default=None)

    paths: PathSettings = Field(default_factory=PathSettings)
    runtime: RuntimeSettings = Field(default_factory=RuntimeSettings)
    options: OptionStoreSettings = Field(default_factory=OptionStoreSettings)
    auth: AuthSettings = Field(default_factory=AuthSettings)
    features: FeatureSettings = Field(default_factory=FeatureSettings)
    history: HistorySettings = Field(default_factory=HistorySettings)

    model_config = {
        "env_file": ".env",
        "env_nested_delimiter": "__",
        "extra": "ignore",
    }


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings.

    The result is cached via ``@lru_cache`` for the process lifetime.
    Call ``get_settings.cache_clear()`` after overriding environment
    variables via ``monkeypatch``; an autouse fixture in
    ``tests/conftest.py`` does this after each test.
    """
    return Settings()
