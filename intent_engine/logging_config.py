"""
Structured logging for the engine, the API and the CLI.

Engine modules log through stdlib ``logging``; every record is routed through
structlog so it carries the service name and chain id. The API writes JSON
lines to stdout, the CLI writes console lines to stderr so command output
stays pipeable.
"""

import logging
import sys
from typing import Any, Optional, TextIO

import structlog

from .config import settings

SERVICE_NAME = "intent-engine"

# Hex payloads longer than this are shortened in log output
MAX_LOGGED_HEX = 74


def add_engine_context(logger: Any, method_name: str, event_dict: dict) -> dict:
    event_dict.setdefault("service", SERVICE_NAME)
    event_dict.setdefault("chain_id", settings.chain_id)
    return event_dict


def shorten_payloads(logger: Any, method_name: str, event_dict: dict) -> dict:
    """Keep selector-sized prefixes of long ``0x`` values bound to a record."""

    for key, value in event_dict.items():
        if isinstance(value, str) and value.startswith("0x") and len(value) > MAX_LOGGED_HEX:
            event_dict[key] = f"{value[:MAX_LOGGED_HEX]}...({(len(value) - 2) // 2} bytes)"
    return event_dict


def setup_logging(
    log_level: Optional[str] = None,
    json_logs: Optional[bool] = None,
    stream: Optional[TextIO] = None,
) -> None:
    """Configure structlog and route stdlib records through it.

    Args:
        log_level: Override log level (default: settings.log_level)
        json_logs: Force JSON or console rendering (default: console only at DEBUG)
        stream: Destination (default: stdout)
    """
    level = getattr(logging, (log_level or settings.log_level).upper(), logging.INFO)
    if json_logs is None:
        json_logs = level != logging.DEBUG

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        add_engine_context,
        shorten_payloads,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if json_logs:
        shared_processors.append(structlog.processors.format_exc_info)
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    # JSON-RPC transport chatter
    for name in ("uvicorn.access", "httpcore", "httpx"):
        logging.getLogger(name).setLevel(logging.WARNING)
