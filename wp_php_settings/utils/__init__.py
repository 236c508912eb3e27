"""Utilities: structured logging."""

from .logging_config import action_context, configure_logging

__all__ = ["action_context", "configure_logging"]
