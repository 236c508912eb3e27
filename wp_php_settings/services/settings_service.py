"""Settings service: one method per admin action, each returning notices.

Control flow of a PHP settings save: sanitize -> validate (warnings) ->
render INI -> write targets -> persist option -> record history. Every
mutating action holds one service-wide lock; the history list is shared by
all setting groups. Methods block and are called from worker threads.
"""

import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import datetime
from importlib.metadata import PackageNotFoundError, version
from typing import Any

import structlog
from pydantic import ValidationError

from ..core.config import PathSettings, Settings
from ..core.directives import (
    BACKUP_OPTION,
    CUSTOM_INI_KEY,
    DEBUG_CONSTANTS,
    DEBUGGING_OPTION,
    OPTION_FOR_SETTING_TYPE,
    RECOMMENDED_VALUES,
    SETTINGS_OPTION,
    WP_MEMORY_CONSTANTS,
    WP_MEMORY_OPTION,
    directive_keys,
    sanitize_php_settings,
    sanitize_wp_memory,
)
from ..core.enums import SettingType
from ..core.exceptions import (
    AnchorNotFoundError,
    ConfigFileNotWritableError,
    ImportPayloadError,
    OptionStoreError,
)
from ..core.schemas import (
    ActionResult,
    Actor,
    DirectiveStatus,
    ExtensionInventory,
    HistoryEntry,
    LogView,
    Notice,
    SettingsExport,
)
from ..engine.byte_size import to_bytes
from ..engine.debug_log import DebugLog
from ..engine.extensions import build_inventory
from ..engine.history import ChangeHistoryLedger
from ..engine.ini_file import render_ini
from ..engine.inspector import (
    DirectiveSource,
    PhpCliDirectiveSource,
    RuntimeDirectiveInspector,
    is_changeable,
)
from ..engine.reconciler import IniFileReconciler
from ..engine.validator import validate_settings
from ..engine.wp_config import Assignment, WpConfigFile
from ..storage.base import OptionStoreBase
from ..storage.connection import create_option_store
from ..storage.filesystem import FilesystemBase, LocalFilesystem
from ..utils.logging_config import action_context

logger = structlog.get_logger()

DISTRIBUTION_NAME = "wp-php-settings"


def package_version() -> str:
    try:
        return version(DISTRIBUTION_NAME)
    except PackageNotFoundError:
        return "0.0.0"


class SettingsService:
    """Entry point for every read and mutating action on the managed site."""

    def __init__(
        self,
        store: OptionStoreBase,
        filesystem: FilesystemBase,
        source: DirectiveSource,
        paths: PathSettings,
        include_error_directives: bool = False,
        wp_memory_enabled: bool = True,
        history_max_entries: int = 50,
        site_url: str = "",
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.store = store
        self.filesystem = filesystem
        self.source = source
        self.keys = directive_keys(include_error_directives)
        self.wp_memory_enabled = wp_memory_enabled
        self.site_url = site_url
        self.clock = clock
        self.inspector = RuntimeDirectiveInspector(source)
        self.reconciler = IniFileReconciler(paths.ini_paths(), filesystem)
        self.wp_config = WpConfigFile(paths.config_path(), filesystem)
        self.debug_log = DebugLog(paths.debug_log_path(), filesystem)
        self.ledger = ChangeHistoryLedger(store, history_max_entries, clock)
        self._lock = threading.RLock()

    @classmethod
    def create(cls, settings: Settings) -> "SettingsService":
        """Build a service wired to the configured backends."""
        runtime = settings.runtime
        return cls(
            store=create_option_store(settings),
            filesystem=LocalFilesystem(),
            source=PhpCliDirectiveSource(
                runtime.php_binary, runtime.php_ini, runtime.timeout_seconds
            ),
            paths=settings.paths,
            include_error_directives=settings.features.error_directives_editable,
            wp_memory_enabled=settings.features.wp_memory_enabled,
            history_max_entries=settings.history.max_entries,
            site_url=settings.site_url,
        )

    # ── Helpers ─────────────────────────────────────────────────────

    @contextmanager
    def _critical_section(self) -> Iterator[None]:
        with self._lock:
            yield

    @staticmethod
    def _denied(actor: Actor, action: str) -> bool:
        if actor.can_manage_options:
            return False
        logger.info("permission_denied", action=action, actor=actor.user_login)
        return True

    def _write_summary(self, written: list[str]) -> Notice:
        failed = self.reconciler.failed(written)
        if written and not failed:
            return Notice.success(
                f"Settings saved and written to: {', '.join(written)}. "
                "Please restart your web server for changes to take effect."
            )
        if written:
            return Notice.warning(
                f"Settings saved and written to: {', '.join(written)}, "
                f"but could not write: {', '.join(failed)}. Please check file permissions."
            )
        return Notice.warning(
            "Settings saved, but could not write to INI files. Please check file permissions."
        )

    def _patch_wp_config(self, assignments: list[Assignment]) -> Notice | None:
        """Apply constants to wp-config.php; an error notice on failure, else None."""
        if not assignments:
            return None
        try:
            self.wp_config.apply(assignments)
        except ConfigFileNotWritableError:
            return Notice.error("wp-config.php is not writable.")
        except AnchorNotFoundError as e:
            logger.warning("wp_config_anchor_missing", constant=e.name)
            return Notice.error(
                f"Could not add {e.name} to wp-config.php: no \"That's all, stop editing!\" "
                "marker or wp-settings.php include was found."
            )
        except OSError as e:
            logger.warning("wp_config_write_failed", error=str(e))
            return Notice.error("Could not write wp-config.php. Check file permissions.")
        return None

    @staticmethod
    def _debug_assignments(values: dict[str, Any]) -> list[Assignment]:
        return [(const, bool(values.get(key, False))) for key, const in DEBUG_CONSTANTS.items()]

    @staticmethod
    def _wp_memory_assignments(values: dict[str, Any]) -> list[Assignment]:
        return [
            (const, str(values[key]))
            for key, const in WP_MEMORY_CONSTANTS.items()
            if values.get(key)
        ]

    # ── PHP settings ────────────────────────────────────────────────

    def get_php_settings(self) -> dict[str, Any]:
        return self.store.get(SETTINGS_OPTION, {}) or {}

    def save_php_settings(self, actor: Actor, settings: dict[str, Any]) -> ActionResult:
        """Save the desired directive map and regenerate both INI files from it."""
        if self._denied(actor, "save_php_settings"):
            return ActionResult()
        with action_context("save_php_settings", actor.user_login):
            clean = sanitize_php_settings(settings, self.keys)
            notices = [Notice.warning(w) for w in validate_settings(clean)]
            try:
                with self._critical_section():
                    old = self.get_php_settings()
                    written = self.reconciler.write(render_ini(clean, self.keys, self.clock()))
                    self.store.set(SETTINGS_OPTION, clean)
                    self.ledger.record(old, clean, SettingType.PHP_SETTINGS, actor)
            except OptionStoreError as e:
                logger.warning("settings_persist_failed", error=str(e))
                return ActionResult(
                    notices=notices + [Notice.error("Settings could not be saved: option storage failed.")]
                )
            notices.append(self._write_summary(written))
            logger.info("php_settings_saved", files=written)
            return ActionResult(
                notices=notices,
                files=written,
                restart_required=self.restart_required(clean),
                settings=clean,
            )

    def restart_required(self, settings: dict[str, Any]) -> list[str]:
        """Keys with a value whose directive cannot change without a restart."""
        wanted = [k for k in self.keys if settings.get(k)]
        if not wanted:
            return []
        infos = self.inspector.inspect(wanted)
        return [k for k in wanted if not is_changeable(infos[k].access)]

    def reset_php_settings(self, actor: Actor) -> ActionResult:
        """Save the recommended values, keeping any custom directives."""
        if self._denied(actor, "reset_php_settings"):
            return ActionResult()
        with self._critical_section():
            current = self.get_php_settings()
            target: dict[str, Any] = {
                k: v for k, v in RECOMMENDED_VALUES.items() if k in self.keys
            }
            if current.get(CUSTOM_INI_KEY):
                target[CUSTOM_INI_KEY] = current[CUSTOM_INI_KEY]
            return self.save_php_settings(actor, target)

    def delete_ini_files(self, actor: Actor) -> ActionResult:
        if self._denied(actor, "delete_ini_files"):
            return ActionResult()
        with action_context("delete_ini_files", actor.user_login):
            with self._critical_section():
                deleted = self.reconciler.remove()
            if deleted:
                logger.info("ini_files_deleted", files=deleted)
                return ActionResult(
                    notices=[Notice.success(f"Successfully deleted: {', '.join(deleted)}.")],
                    files=deleted,
                )
            return ActionResult(
                notices=[
                    Notice.warning(
                        "Could not delete INI files. They may not exist or have permission issues."
                    )
                ]
            )

    def directive_status(self) -> list[DirectiveStatus]:
        infos = self.inspector.inspect(self.keys)
        rows: list[DirectiveStatus] = []
        for key in self.keys:
            info = infos[key]
            recommended = RECOMMENDED_VALUES.get(key)
            rows.append(
                DirectiveStatus(
                    key=key,
                    current_value=info.value,
                    recommended_value=recommended,
                    changeable_at_runtime=is_changeable(info.access),
                    is_low=(to_bytes(info.value) < to_bytes(recommended)) if recommended else None,
                )
            )
        return rows

    def extensions(self) -> ExtensionInventory:
        return build_inventory(self.source)

    # ── WordPress constants ─────────────────────────────────────────

    def get_debugging(self) -> dict[str, bool]:
        """Stored flags; falls back to what wp-config.php currently defines."""
        stored = self.store.get(DEBUGGING_OPTION)
        if stored:
            return {key: bool(stored.get(key, False)) for key in DEBUG_CONSTANTS}
        defined = self.wp_config.read_constants(list(DEBUG_CONSTANTS.values()))
        return {key: defined[const] is True for key, const in DEBUG_CONSTANTS.items()}

    def save_debugging(self, actor: Actor, flags: dict[str, Any]) -> ActionResult:
        """Patch the debugging constants; dependants are forced off without WP_DEBUG."""
        if self._denied(actor, "save_debugging"):
            return ActionResult()
        with action_context("save_debugging", actor.user_login):
            new = {key: bool(flags.get(key, False)) for key in DEBUG_CONSTANTS}
            if not new["wp_debug"]:
                new = {key: False for key in new}
            with self._critical_section():
                old = self.store.get(DEBUGGING_OPTION, {}) or {}
                error = self._patch_wp_config(self._debug_assignments(new))
                if error:
                    return ActionResult(notices=[error])
                self.store.set(DEBUGGING_OPTION, new)
                self.ledger.record(old, new, SettingType.DEBUGGING, actor)
            return ActionResult(
                notices=[Notice.success("Debugging settings updated successfully.")],
                settings=new,
            )

    def get_wp_memory(self) -> dict[str, str]:
        stored = self.store.get(WP_MEMORY_OPTION)
        if stored:
            return {key: str(stored.get(key, "")) for key in WP_MEMORY_CONSTANTS}
        defined = self.wp_config.read_constants(list(WP_MEMORY_CONSTANTS.values()))
        return {
            key: (defined[const] if isinstance(defined[const], str) else "")
            for key, const in WP_MEMORY_CONSTANTS.items()
        }

    def save_wp_memory(self, actor: Actor, values: dict[str, Any]) -> ActionResult:
        """Patch WP_MEMORY_LIMIT / WP_MAX_MEMORY_LIMIT; empty values leave the file alone."""
        if self._denied(actor, "save_wp_memory"):
            return ActionResult()
        if not self.wp_memory_enabled:
            return ActionResult(notices=[Notice.error("WordPress memory settings are disabled.")])
        with action_context("save_wp_memory", actor.user_login):
            new = sanitize_wp_memory(values)
            with self._critical_section():
                old = self.store.get(WP_MEMORY_OPTION, {}) or {}
                error = self._patch_wp_config(self._wp_memory_assignments(new))
                if error:
                    return ActionResult(notices=[error])
                self.store.set(WP_MEMORY_OPTION, new)
                self.ledger.record(old, new, SettingType.WP_MEMORY, actor)
            return ActionResult(
                notices=[Notice.success("WordPress memory settings updated successfully.")],
                settings=new,
            )

    # ── Debug log ───────────────────────────────────────────────────

    def read_debug_log(self) -> LogView:
        return self.debug_log.view(self.get_debugging().get("wp_debug_log", False))

    def clear_debug_log(self, actor: Actor) -> ActionResult:
        if self._denied(actor, "clear_debug_log"):
            return ActionResult()
        with action_context("clear_debug_log", actor.user_login):
            if self.debug_log.clear():
                logger.info("debug_log_cleared")
                return ActionResult(notices=[Notice.success("Debug log file cleared successfully.")])
            return ActionResult(
                notices=[Notice.error("Could not clear debug log file. Check file permissions.")]
            )

    # ── History ─────────────────────────────────────────────────────

    def history(self) -> list[HistoryEntry]:
        return self.ledger.entries()

    def export_history_csv(self) -> str:
        return self.ledger.export_csv()

    def clear_history(self, actor: Actor) -> ActionResult:
        if self._denied(actor, "clear_history"):
            return ActionResult()
        with self._critical_section():
            self.ledger.clear()
        return ActionResult(notices=[Notice.success("Settings history cleared.")])

    def restore_history(self, actor: Actor, index: int) -> ActionResult:
        """Revert one history entry and re-apply the affected files.

        The stored option is rolled back when wp-config.php cannot be patched.
        Raises HistoryEntryNotFoundError for an index outside the history.
        """
        if self._denied(actor, "restore_history"):
            return ActionResult()
        with action_context("restore_history", actor.user_login):
            notices: list[Notice] = []
            written: list[str] = []
            with self._critical_section():
                result = self.ledger.restore(index)
                entry = result.entry
                option = OPTION_FOR_SETTING_TYPE[entry.setting_type]
                old = result.previous
                restored = result.settings
                if entry.setting_type is SettingType.PHP_SETTINGS:
                    restored = sanitize_php_settings(restored, self.keys)
                    written = self.reconciler.write(render_ini(restored, self.keys, self.clock()))
                    notices.append(self._write_summary(written))
                else:
                    if entry.setting_type is SettingType.DEBUGGING:
                        assignments = self._debug_assignments(restored)
                    else:
                        assignments = self._wp_memory_assignments(restored)
                    error = self._patch_wp_config(assignments)
                    if error:
                        self.store.set(option, old)
                        return ActionResult(notices=[error])
                self.store.set(option, restored)
                self.ledger.record(old, restored, entry.setting_type, actor)
            notices.insert(
                0, Notice.success(f"Settings restored from the change made on {entry.timestamp}.")
            )
            return ActionResult(notices=notices, files=written, settings=restored)

    # ── Export / import ─────────────────────────────────────────────

    def export_settings(self) -> SettingsExport:
        return SettingsExport(
            php_settings=self.get_php_settings(),
            wp_memory=self.store.get(WP_MEMORY_OPTION, {}) or {},
            plugin_version=package_version(),
            export_time=self.clock().strftime("%Y-%m-%d %H:%M:%S"),
            export_site_url=self.site_url,
        )

    def import_settings(self, actor: Actor, document: Any) -> ActionResult:
        """Back up current settings, then save each imported group through its normal path.

        Raises ImportPayloadError before anything is written when the document is unusable.
        """
        if self._denied(actor, "import_settings"):
            return ActionResult()
        with action_context("import_settings", actor.user_login):
            payload = parse_import(document)
            with self._critical_section():
                self.store.set(
                    BACKUP_OPTION,
                    {
                        "backup_time": self.clock().strftime("%Y-%m-%d %H:%M:%S"),
                        "php_settings": self.get_php_settings(),
                        "wp_memory": self.store.get(WP_MEMORY_OPTION, {}) or {},
                    },
                )
                notices = [
                    Notice.info("A backup of the current settings was saved before importing.")
                ]
                if payload.php_settings is not None:
                    notices += self.save_php_settings(actor, payload.php_settings).notices
                if payload.wp_memory is not None and self.wp_memory_enabled:
                    notices += self.save_wp_memory(actor, payload.wp_memory).notices
            return ActionResult(notices=notices)


def parse_import(document: Any) -> SettingsExport:
    if not isinstance(document, dict):
        raise ImportPayloadError("expected a JSON object")
    try:
        payload = SettingsExport.model_validate(document)
    except ValidationError as e:
        raise ImportPayloadError(str(e)) from e
    if payload.php_settings is None and payload.wp_memory is None:
        raise ImportPayloadError("no php_settings or wp_memory section")
    return payload
