"""Unit tests for API routes, auth and middleware."""

import inspect

import pytest
from fastapi.routing import APIRoute
from fastapi.testclient import TestClient

from wp_php_settings.api.app import create_app
from wp_php_settings.api.auth import _build_api_keys
from wp_php_settings.api.routes import router
from wp_php_settings.core.config import get_settings

READ_KEY = "read-key"
ADMIN_KEY = "admin-key"
CSRF = {"X-Requested-With": "XMLHttpRequest"}
ADMIN = {"X-API-Key": ADMIN_KEY, **CSRF}
READER = {"X-API-Key": READ_KEY, **CSRF}


@pytest.fixture
def client(service, monkeypatch):
    """TestClient over a fresh app whose service points at the temporary WordPress root."""
    monkeypatch.setenv("AUTH__API_KEY", READ_KEY)
    monkeypatch.setenv("AUTH__ADMIN_API_KEY", ADMIN_KEY)
    monkeypatch.setenv("AUTH__DEFAULT_USER_LOGIN", "api-admin")
    monkeypatch.setenv("JSON_LOGS", "false")
    get_settings.cache_clear()
    app = create_app()
    app.state.service = service
    with TestClient(app) as c:
        yield c


class TestHealthEndpoint:
    def test_health_needs_no_key(self, client):
        resp = client.get("/api/v1/settings/health")
        assert resp.status_code == 200
        assert resp.json()["status"] == "healthy"

    def test_request_id_header(self, client):
        resp = client.get("/api/v1/settings/health")
        assert "X-Request-ID" in resp.headers


class TestAuth:
    def test_missing_api_key_returns_401(self, client):
        assert client.get("/api/v1/settings/php").status_code == 401

    def test_invalid_api_key_returns_401(self, client):
        resp = client.get("/api/v1/settings/php", headers={"X-API-Key": "wrong"})
        assert resp.status_code == 401

    def test_read_key_cannot_mutate(self, client):
        resp = client.put("/api/v1/settings/php", json={"settings": {"memory_limit": "1G"}}, headers=READER)
        assert resp.status_code == 403
        assert resp.json()["detail"] == "Admin permission required"

    def test_read_key_can_read(self, client):
        assert client.get("/api/v1/settings/php", headers=READER).status_code == 200

    def test_build_api_keys_marks_admin(self, client):
        keys = _build_api_keys()
        assert keys[READ_KEY].can_manage_options is False
        assert keys[ADMIN_KEY].can_manage_options is True


class TestCSRF:
    def test_mutation_without_header_returns_403(self, client):
        resp = client.put(
            "/api/v1/settings/php",
            json={"settings": {"memory_limit": "256M"}},
            headers={"X-API-Key": ADMIN_KEY},
        )
        assert resp.status_code == 403
        assert resp.json()["detail"] == "Missing CSRF header"

    def test_reads_do_not_need_header(self, client):
        assert client.get("/api/v1/settings/status", headers={"X-API-Key": READ_KEY}).status_code == 200


class TestPhpSettingsRoutes:
    def test_save_and_read_back(self, client, wp_root):
        resp = client.put(
            "/api/v1/settings/php",
            json={"settings": {"memory_limit": "256M", "upload_max_filesize": "64M"}, "custom_php_ini": "foo = 1"},
            headers=ADMIN,
        )
        assert resp.status_code == 200
        body = resp.json()
        assert body["files"] == [".user.ini", "php.ini"]
        assert body["restart_required"] == ["upload_max_filesize"]
        assert (wp_root / ".user.ini").is_file()

        data = client.get("/api/v1/settings/php", headers=READER).json()
        assert data["settings"]["memory_limit"] == "256M"
        assert data["settings"]["custom_php_ini"] == "foo = 1"
        assert data["recommended"]["memory_limit"] == "256M"
        assert {row["key"] for row in data["statuses"]} >= {"memory_limit", "max_input_vars"}

    def test_reset_and_delete_files(self, client, wp_root):
        assert client.post("/api/v1/settings/php/reset", headers=ADMIN).status_code == 200
        assert "max_input_vars = 10000" in (wp_root / "php.ini").read_text()
        resp = client.delete("/api/v1/settings/php/files", headers=ADMIN)
        assert resp.json()["files"] == [".user.ini", "php.ini"]

    def test_extensions(self, client):
        data = client.get("/api/v1/settings/extensions", headers=READER).json()
        assert "gd" in data["critical_missing"]


class TestConstantRoutes:
    def test_debugging_round_trip(self, client, wp_root):
        resp = client.put("/api/v1/settings/debugging", json={"wp_debug": True, "script_debug": True}, headers=ADMIN)
        assert resp.status_code == 200
        assert "define( 'SCRIPT_DEBUG', true );" in (wp_root / "wp-config.php").read_text()
        assert client.get("/api/v1/settings/debugging", headers=READER).json()["script_debug"] is True

    def test_wp_memory_round_trip(self, client):
        client.put("/api/v1/settings/wp-memory", json={"wp_memory_limit": "256M"}, headers=ADMIN)
        data = client.get("/api/v1/settings/wp-memory", headers=READER).json()
        assert data["wp_memory_limit"] == "256M"


class TestLogRoutes:
    def test_read_and_clear(self, client, wp_root):
        (wp_root / "wp-content" / "debug.log").write_text("x\n")
        client.put("/api/v1/settings/debugging", json={"wp_debug": True, "wp_debug_log": True}, headers=ADMIN)
        assert client.get("/api/v1/settings/log", headers=ADMIN).json()["content"] == "x\n"
        resp = client.delete("/api/v1/settings/log", headers=ADMIN)
        assert resp.json()["notices"][0]["severity"] == "success"


class TestHistoryRoutes:
    def test_actor_header_recorded(self, client):
        client.put(
            "/api/v1/settings/php",
            json={"settings": {"memory_limit": "256M"}},
            headers={**ADMIN, "X-User-Login": "jane", "X-User-Id": "42"},
        )
        data = client.get("/api/v1/settings/history", headers=READER).json()
        assert data["total"] == 1
        assert data["entries"][0]["user_login"] == "jane"
        assert data["entries"][0]["user_id"] == "42"

    def test_default_actor_login(self, client):
        client.put("/api/v1/settings/php", json={"settings": {"memory_limit": "256M"}}, headers=ADMIN)
        entry = client.get("/api/v1/settings/history/0", headers=READER).json()
        assert entry["user_login"] == "api-admin"

    def test_unknown_entry_returns_404(self, client):
        assert client.get("/api/v1/settings/history/5", headers=READER).status_code == 404

    def test_restore(self, client):
        client.put("/api/v1/settings/php", json={"settings": {"memory_limit": "128M"}}, headers=ADMIN)
        client.put("/api/v1/settings/php", json={"settings": {"memory_limit": "256M"}}, headers=ADMIN)
        resp = client.post("/api/v1/settings/history/0/restore", headers=ADMIN)
        assert resp.json()["settings"]["memory_limit"] == "128M"

    def test_restore_unknown_entry_returns_404(self, client):
        resp = client.post("/api/v1/settings/history/9/restore", headers=ADMIN)
        assert resp.status_code == 404

    def test_export_csv(self, client):
        client.put("/api/v1/settings/php", json={"settings": {"memory_limit": "256M"}}, headers=ADMIN)
        resp = client.get("/api/v1/settings/history/export", headers=ADMIN)
        assert resp.headers["content-type"].startswith("text/csv")
        assert resp.text.splitlines()[0].startswith('"Timestamp","User"')

    def test_clear(self, client):
        client.put("/api/v1/settings/php", json={"settings": {"memory_limit": "256M"}}, headers=ADMIN)
        client.delete("/api/v1/settings/history", headers=ADMIN)
        assert client.get("/api/v1/settings/history", headers=READER).json()["total"] == 0


class TestExportImportRoutes:
    def test_export_then_import(self, client):
        client.put("/api/v1/settings/php", json={"settings": {"memory_limit": "256M"}}, headers=ADMIN)
        doc = client.get("/api/v1/settings/export", headers=ADMIN).json()
        assert doc["php_settings"] == {"memory_limit": "256M"}
        doc["php_settings"]["memory_limit"] = "384M"
        resp = client.post("/api/v1/settings/import", json=doc, headers=ADMIN)
        assert resp.status_code == 200
        data = client.get("/api/v1/settings/php", headers=READER).json()
        assert data["settings"]["memory_limit"] == "384M"

    def test_import_invalid_document(self, client):
        resp = client.post("/api/v1/settings/import", json=["nope"], headers=ADMIN)
        assert resp.status_code == 400
        assert client.get("/api/v1/settings/export", headers=ADMIN).json()["php_settings"] == {}

    def test_import_without_known_keys_returns_400(self, client):
        resp = client.post("/api/v1/settings/import", json={"plugin_version": "1.0"}, headers=ADMIN)
        assert resp.status_code == 400


class TestRouteHandlers:
    def test_handlers_run_in_threadpool(self):
        for route in router.routes:
            if isinstance(route, APIRoute):
                assert not inspect.iscoroutinefunction(route.endpoint), route.path
