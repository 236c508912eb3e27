"""Unit tests for the debug.log viewer."""

from wp_php_settings.engine.debug_log import DebugLog
from wp_php_settings.storage.filesystem import LocalFilesystem


class TestDebugLog:
    def test_disabled_does_not_read(self, tmp_path):
        path = tmp_path / "debug.log"
        path.write_text("PHP Notice: x\n")
        view = DebugLog(path, LocalFilesystem()).view(enabled=False)
        assert view.enabled is False
        assert view.exists is True
        assert view.content == ""

    def test_enabled_reads_content(self, tmp_path):
        path = tmp_path / "debug.log"
        path.write_text("PHP Notice: x\n")
        view = DebugLog(path, LocalFilesystem()).view(enabled=True)
        assert view.content == "PHP Notice: x\n"

    def test_missing_file(self, tmp_path):
        view = DebugLog(tmp_path / "debug.log", LocalFilesystem()).view(enabled=True)
        assert view.exists is False

    def test_clear_truncates(self, tmp_path):
        path = tmp_path / "debug.log"
        path.write_text("lots of noise\n")
        assert DebugLog(path, LocalFilesystem()).clear() is True
        assert path.read_text() == ""

    def test_clear_missing_file_fails(self, tmp_path):
        assert DebugLog(tmp_path / "debug.log", LocalFilesystem()).clear() is False
