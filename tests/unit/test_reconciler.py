"""Unit tests for INI target write/remove reconciliation."""

from pathlib import Path

from wp_php_settings.engine.reconciler import IniFileReconciler
from wp_php_settings.storage.filesystem import LocalFilesystem


class _DenyFilesystem(LocalFilesystem):
    """Local filesystem that refuses writes to the named files."""

    def __init__(self, denied: set[str]):
        self.denied = denied

    def write(self, path: Path, content: str) -> None:
        if Path(path).name in self.denied:
            raise PermissionError(13, "Permission denied", str(path))
        super().write(path, content)


def _targets(root: Path) -> list[Path]:
    return [root / ".user.ini", root / "php.ini"]


class TestWrite:
    def test_writes_identical_content_to_every_target(self, tmp_path):
        reconciler = IniFileReconciler(_targets(tmp_path), LocalFilesystem())
        written = reconciler.write("memory_limit = 256M\n")
        assert written == [".user.ini", "php.ini"]
        assert (tmp_path / ".user.ini").read_text() == "memory_limit = 256M\n"
        assert (tmp_path / "php.ini").read_text() == "memory_limit = 256M\n"

    def test_one_failure_does_not_stop_the_other(self, tmp_path):
        reconciler = IniFileReconciler(_targets(tmp_path), _DenyFilesystem({".user.ini"}))
        written = reconciler.write("x = 1\n")
        assert written == ["php.ini"]
        assert reconciler.failed(written) == [".user.ini"]
        assert not (tmp_path / ".user.ini").exists()

    def test_missing_directory_reports_empty_list(self, tmp_path):
        reconciler = IniFileReconciler(_targets(tmp_path / "missing"), LocalFilesystem())
        assert reconciler.write("x = 1\n") == []

    def test_overwrites_existing_file(self, tmp_path):
        (tmp_path / "php.ini").write_text("old\n")
        reconciler = IniFileReconciler([tmp_path / "php.ini"], LocalFilesystem())
        reconciler.write("new\n")
        assert (tmp_path / "php.ini").read_text() == "new\n"


class TestRemove:
    def test_write_then_remove_leaves_no_targets(self, tmp_path):
        reconciler = IniFileReconciler(_targets(tmp_path), LocalFilesystem())
        reconciler.write("x = 1\n")
        assert reconciler.remove() == [".user.ini", "php.ini"]
        assert not any(p.exists() for p in _targets(tmp_path))

    def test_remove_absent_files_returns_empty_list(self, tmp_path):
        reconciler = IniFileReconciler(_targets(tmp_path), LocalFilesystem())
        assert reconciler.remove() == []

    def test_remove_reports_only_existing(self, tmp_path):
        (tmp_path / "php.ini").write_text("x = 1\n")
        reconciler = IniFileReconciler(_targets(tmp_path), LocalFilesystem())
        assert reconciler.remove() == ["php.ini"]
