"""Change history ledger: record, list, restore and export settings deltas."""

import csv
import io
from collections.abc import Callable
from datetime import datetime
from typing import Any

import structlog
from pydantic import ValidationError

from ..core.directives import HISTORY_OPTION, OPTION_FOR_SETTING_TYPE
from ..core.enums import SettingType
from ..core.exceptions import HistoryEntryNotFoundError
from ..core.schemas import Actor, HistoryChange, HistoryEntry, RestoreResult
from ..storage.base import OptionStoreBase

logger = structlog.get_logger()

MAX_HISTORY_ENTRIES = 50
CSV_HEADER = ("Timestamp", "User", "Setting Type", "Setting", "Old Value", "New Value")


def diff_settings(old: dict[str, Any], new: dict[str, Any]) -> dict[str, HistoryChange]:
    """Changed keys across the union of both maps; a missing side counts as ''."""
    changes: dict[str, HistoryChange] = {}
    keys = list(old) + [k for k in new if k not in old]
    for key in keys:
        before = old.get(key, "")
        after = new.get(key, "")
        if before != after:
            changes[key] = HistoryChange(old=before, new=after)
    return changes


class ChangeHistoryLedger:
    """Newest-first list of HistoryEntry blobs in the option store.

    Each call is one read and at most one write of the whole list.
    """

    def __init__(
        self,
        store: OptionStoreBase,
        max_entries: int = MAX_HISTORY_ENTRIES,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.store = store
        self.max_entries = max_entries
        self.clock = clock

    def entries(self) -> list[HistoryEntry]:
        raw = self.store.get(HISTORY_OPTION, []) or []
        result: list[HistoryEntry] = []
        for item in raw:
            try:
                result.append(HistoryEntry.model_validate(item))
            except ValidationError as e:
                logger.warning("history_entry_invalid", error=str(e))
        return result

    def _save(self, entries: list[HistoryEntry]) -> None:
        self.store.set(HISTORY_OPTION, [e.model_dump(mode="json") for e in entries])

    def record(
        self,
        old: dict[str, Any],
        new: dict[str, Any],
        setting_type: SettingType,
        actor: Actor,
    ) -> HistoryEntry | None:
        """Prepend an entry for the delta; no-op saves record nothing."""
        changes = diff_settings(old, new)
        if not changes:
            return None
        entry = HistoryEntry(
            timestamp=self.clock().strftime("%Y-%m-%d %H:%M:%S"),
            user_id=actor.user_id,
            user_login=actor.user_login,
            setting_type=setting_type,
            changes=changes,
        )
        history = [entry] + self.entries()
        self._save(history[: self.max_entries])
        logger.info(
            "history_entry_recorded",
            setting_type=setting_type.value,
            keys=list(changes),
        )
        return entry

    def get(self, index: int) -> HistoryEntry:
        history = self.entries()
        if index < 0 or index >= len(history):
            raise HistoryEntryNotFoundError(index)
        return history[index]

    def clear(self) -> bool:
        return self.store.delete(HISTORY_OPTION)

    def restore(self, index: int) -> RestoreResult:
        """Revert the deltas of entry ``index`` onto the live settings and persist them.

        Keys the entry does not mention keep their current values.
        """
        entry = self.get(index)
        option = OPTION_FOR_SETTING_TYPE[entry.setting_type]
        current = self.store.get(option, {}) or {}
        restored = dict(current)
        for key, change in entry.changes.items():
            restored[key] = change.old
        self.store.set(option, restored)
        logger.info("history_entry_restored", index=index, setting_type=entry.setting_type.value)
        return RestoreResult(
            setting_type=entry.setting_type, settings=restored, previous=current, entry=entry
        )

    def export_csv(self) -> str:
        """One row per (entry, changed key), every field quoted."""
        buf = io.StringIO()
        writer = csv.writer(buf, quoting=csv.QUOTE_ALL, lineterminator="\n")
        writer.writerow(CSV_HEADER)
        for entry in self.entries():
            for key, change in entry.changes.items():
                writer.writerow(
                    (
                        entry.timestamp,
                        entry.user_login,
                        entry.setting_type.value,
                        key,
                        _csv_value(change.old),
                        _csv_value(change.new),
                    )
                )
        return buf.getvalue()


def _csv_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return "" if value is None else str(value)
