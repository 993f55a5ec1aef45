# chess_insights/utils/logging_config.py
"""
Configures structured logging for the engine and its command-line entry point.

structlog events and records from the standard `logging` module (including
third-party libraries such as python-chess) go through the same processor
chain, so every line carries the same timestamp, level and bound context
(run and correlation ids).
"""

import logging
import sys
from pathlib import Path
from typing import List, Optional

import structlog
from structlog.types import Processor


def _shared_processors() -> List[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]


def _formatter(renderer: Processor, pre_chain: List[Processor]) -> structlog.stdlib.ProcessorFormatter:
    return structlog.stdlib.ProcessorFormatter(foreign_pre_chain=pre_chain, processor=renderer)


def setup_logging(
    log_level: str = "INFO",
    json_console: bool = False,
    log_file: Optional[Path] = None,
) -> None:
    """
    Routes structlog and stdlib logging through one set of handlers.

    Args:
        log_level: The minimum level name, e.g. "DEBUG" or "INFO".
        json_console: Render stdout as JSON lines instead of the console renderer.
        log_file: Optional path that additionally receives JSON lines.
    """
    shared = _shared_processors()
    structlog.configure(
        processors=shared + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    console_renderer: Processor
    if json_console:
        console_renderer = structlog.processors.JSONRenderer()
    else:
        console_renderer = structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(_formatter(console_renderer, shared))
    handlers: List[logging.Handler] = [console_handler]

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setFormatter(_formatter(structlog.processors.JSONRenderer(), shared))
        handlers.append(file_handler)

    logging.basicConfig(handlers=handlers, level=log_level.upper(), force=True)
