"""Unit tests for structlog configuration helpers."""

import structlog

from wp_php_settings.utils.logging_config import action_context, configure_logging


class TestLoggingConfig:
    def test_site_root_bound_for_all_events(self):
        structlog.contextvars.clear_contextvars()
        configure_logging("DEBUG", json_output=False, site_root="/srv/wp")
        assert structlog.contextvars.get_contextvars()["site_root"] == "/srv/wp"
        structlog.contextvars.clear_contextvars()

    def test_action_context_binds_and_unbinds(self):
        structlog.contextvars.clear_contextvars()
        with action_context("save_php_settings", "admin"):
            bound = structlog.contextvars.get_contextvars()
            assert bound["action"] == "save_php_settings"
            assert bound["actor"] == "admin"
        assert "action" not in structlog.contextvars.get_contextvars()
    def test_package_exports(self):
        from wp_php_settings import utils

        assert sorted(utils.__all__) == ["action_context", "configure_logging"]
        assert all(hasattr(utils, name) for name in utils.__all__)
