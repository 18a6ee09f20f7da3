"""Logging configuration."""

import json
import logging
import os
import sys
from typing import Any, List, Optional

import structlog
from structlog.processors import CallsiteParameter
from structlog.types import EventDict, Processor

from tools_dist.constants import ENV_LOG_LEVEL

DEFAULT_LOG_LEVEL = "INFO"
IGNORED_LOGGERS = ["aiohttp", "asyncio"]
CALLER_KEYS = ("func_name", "lineno", "filename")

_min_level = logging.INFO


def level_filter(logger: Any, name: str, event_dict: EventDict) -> EventDict:
    """Drop events from ignored loggers and below the configured level."""
    try:
        if any(ignored in logger.name for ignored in IGNORED_LOGGERS):
            raise structlog.DropEvent
        level_no = getattr(logging, event_dict.get("level", "NOTSET").upper())
    except AttributeError:
        return event_dict
    if level_no < _min_level:
        raise structlog.DropEvent
    return event_dict


class CompactJSONRenderer:
    """Single-line JSON renderer with minimal output."""

    def __call__(self, _: Any, __: str, event_dict: EventDict) -> str:
        event = event_dict.pop("event", "")
        if isinstance(event, dict):
            event_dict = {**event, **event_dict}
            event = event_dict.pop("event", "")

        items = {
            "ts": event_dict.pop("timestamp", None),
            "lvl": event_dict.pop("level", "???"),
            "msg": event,
            **{k: v for k, v in event_dict.items() if k in CALLER_KEYS},
        }
        if other := {k: v for k, v in event_dict.items() if k not in CALLER_KEYS}:
            items["data"] = other
        return json.dumps(items, separators=(",", ":"), default=str)


def configure_logging(level: Optional[str] = None) -> None:
    """Configure structured logging for the application.

    stderr gets compact JSON lines when it is not a terminal and the
    colored console renderer when it is.
    """
    global _min_level

    level = (level or os.environ.get(ENV_LOG_LEVEL, DEFAULT_LOG_LEVEL)).upper()
    _min_level = getattr(logging, level)

    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=_min_level)

    shared: List[Processor] = [
        structlog.stdlib.add_log_level,
        level_filter,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]

    if sys.stderr.isatty():
        renderer: List[Processor] = [
            structlog.stdlib.add_logger_name,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(colors=True),
        ]
    else:
        renderer = [
            structlog.processors.CallsiteParameterAdder(
                {
                    CallsiteParameter.FUNC_NAME,
                    CallsiteParameter.LINENO,
                    CallsiteParameter.FILENAME,
                }
            ),
            structlog.processors.format_exc_info,
            CompactJSONRenderer(),
        ]

    structlog.configure(
        processors=shared + renderer,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)
