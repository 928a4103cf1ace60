"""
structlog setup for project-puller.

Log events go through the standard logging module. By default nothing is
emitted; ``pull --verbose`` adds a stderr handler and ``pull --log FILE``
writes the same events to a file.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import structlog
from structlog.stdlib import BoundLogger, ProcessorFormatter

_SHARED_PROCESSORS = [
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.format_exc_info,
]


def configure_logging(
    level: int = logging.INFO,
    console: bool = False,
    log_file: Optional[Path] = None,
) -> None:
    """Route structlog events to stderr and/or ``log_file``; silent when neither is set."""
    structlog.configure(
        processors=[*_SHARED_PROCESSORS, ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    handlers: List[logging.Handler] = []
    if console:
        handlers.append(logging.StreamHandler())
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, mode="w", encoding="utf-8"))

    formatter = ProcessorFormatter(
        processor=structlog.dev.ConsoleRenderer(colors=False),
        foreign_pre_chain=_SHARED_PROCESSORS,
    )
    for handler in handlers:
        handler.setFormatter(formatter)

    logging.basicConfig(
        level=level,
        handlers=handlers or [logging.NullHandler()],
        force=True,
    )


def get_logger(name: Optional[str] = None) -> BoundLogger:
    return structlog.get_logger(name)
