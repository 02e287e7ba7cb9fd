from __future__ import annotations

import logging
import os
import sys
from typing import Any

import structlog
from structlog.stdlib import ProcessorFormatter

from znuny_rest_client.config.redact import redact_settings_dict

_LOG_FORMATS = {"json", "human"}


def _scrub_event_dict(_: Any, __: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    return redact_settings_dict(event_dict)


def _resolve_log_format(log_format: str | None, json_logs: bool) -> str:
    # Explicit argument, then LOG_FORMAT, then the json_logs flag.
    for raw in (log_format, os.environ.get("LOG_FORMAT")):
        normalized = (raw or "").strip().lower()
        if normalized in _LOG_FORMATS:
            return normalized
    return "json" if json_logs else "human"


def _resolve_log_level(log_level_default: str) -> str:
    raw = (os.environ.get("LOG_LEVEL") or "").strip()
    if raw:
        return raw
    return log_level_default


def configure_logging(
    *,
    log_level: str = "INFO",
    json_logs: bool = False,
    log_format: str | None = None,
) -> None:
    """
    Minimal structlog + stdlib logging configuration.

    LOG_FORMAT=human|json can override `json_logs`.
    """
    resolved_level = _resolve_log_level(log_level).upper()
    resolved_format = _resolve_log_format(log_format, json_logs)

    shared_processors: list[Any] = [
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.format_exc_info,
        _scrub_event_dict,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]

    renderer: Any
    if resolved_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    formatter = ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=shared_processors,
    )

    # stderr keeps stdout free for CLI output.
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(resolved_level)

    # httpx logs every request URL at INFO; GET URLs carry UserLogin/Password.
    for noisy in ("httpx", "httpcore"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    structlog.configure(
        processors=[
            *shared_processors,
            ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
