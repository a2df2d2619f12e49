"""Structured logging for the file index.

structlog renders through the stdlib ``logging`` handlers so host
applications keep control of where records go. Supports:
- One handler per configured output, each with its own level and format
- Query correlation: every line caused by one search call (including the
  snapshot build it triggers) carries the same ``query_id``
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING
from uuid import uuid4

import structlog

if TYPE_CHECKING:
    from mentionindex.config.models import LoggingConfig, LogOutputConfig

# Noisy third-party loggers capped at WARNING
_QUIET_LOGGERS = ("watchfiles", "watchfiles.main")


def _level(name: str | None, default: int = logging.INFO) -> int:
    if not name:
        return default
    return logging.getLevelNamesMapping().get(name.upper(), default)


@contextmanager
def query_context() -> Iterator[str]:
    """Bind a fresh ``query_id`` to all log lines emitted inside the block.

    Tasks created inside the block inherit the id, so a build started by a
    query logs under that query.
    """
    query_id = uuid4().hex[:8]
    with structlog.contextvars.bound_contextvars(query_id=query_id):
        yield query_id


def configure_logging(
    *,
    config: LoggingConfig | None = None,
    json_format: bool = False,
    level: str = "INFO",
) -> None:
    """Configure structlog and the root stdlib logger.

    Args:
        config: Full logging configuration; wins over the simple params
        json_format: Render JSON to stderr when no config is given
        level: Root level when no config is given
    """
    from mentionindex.config.models import LoggingConfig, LogOutputConfig

    if config is None:
        config = LoggingConfig(
            level=level.upper(),  # type: ignore[arg-type]
            outputs=[LogOutputConfig(format="json" if json_format else "console")],
        )

    root_level = _level(config.level)
    shared: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S", key="timestamp"),
    ]

    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.make_filtering_bound_logger(root_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # Not cached so reconfiguration takes effect for module-level loggers
        cache_logger_on_first_use=False,
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(root_level)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    for output in config.outputs:
        handler = _open_handler(output.destination)
        handler.setLevel(_level(output.level, root_level))
        handler.setFormatter(_make_formatter(output, shared))
        root_logger.addHandler(handler)


def _open_handler(destination: str) -> logging.Handler:
    if destination == "stderr":
        return logging.StreamHandler(sys.stderr)
    if destination == "stdout":
        return logging.StreamHandler(sys.stdout)
    path = Path(destination)
    path.parent.mkdir(parents=True, exist_ok=True)
    return logging.FileHandler(path, mode="a", encoding="utf-8")


def _make_formatter(
    output: LogOutputConfig, shared: list[structlog.types.Processor]
) -> logging.Formatter:
    renderer: structlog.types.Processor
    if output.format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        stream = sys.stdout if output.destination == "stdout" else sys.stderr
        is_tty = output.destination in ("stderr", "stdout") and stream.isatty()
        renderer = structlog.dev.ConsoleRenderer(colors=is_tty, pad_event_to=0, pad_level=False)
    return structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=shared)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    logger = structlog.get_logger()
    if name:
        logger = logger.bind(logger=name)
    return logger  # type: ignore[no-any-return]
