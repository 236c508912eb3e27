"""Structured logging configuration."""
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import structlog


def configure_logging(
    log_level: str = "INFO",
    json_output: bool = True,
    site_root: str | None = None,
) -> None:
    """Configure structlog; every event carries the managed site root when given."""
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if json_output:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    level = getattr(logging, log_level.upper(), logging.INFO)
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
    if site_root:
        structlog.contextvars.bind_contextvars(site_root=site_root)


@contextmanager
def action_context(action: str, user_login: str) -> Iterator[None]:
    """Tag log events emitted inside one admin action with its name and actor."""
    with structlog.contextvars.bound_contextvars(action=action, actor=user_login):
        yield
