"""structlog setup for the dtokit CLI.

Everything goes to stderr so stdout stays reserved for command results:

- human (default): console renderer, colored when stderr is a TTY
- ``--log-json``: one JSON object per line

Library modules log through ``logging.getLogger(__name__)``. The
ProcessorFormatter runs those records through the same processors as
native structlog events, so both carry level, logger and timestamp.
"""

from __future__ import annotations

import logging
import sys

import structlog

# Third-party loggers kept at WARNING even in verbose mode.
_QUIET_LOGGERS = ("pluggy",)


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def _renderer(log_json: bool) -> structlog.types.Processor:
    if log_json:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def configure_logging(*, verbose: bool = False, log_json: bool = False) -> None:
    """Route structlog and stdlib logging through a single stderr handler.

    Safe to call repeatedly; each call replaces the root handler.

    Args:
        verbose: DEBUG for ``dtokit.*`` loggers; WARNING otherwise.
        log_json: Render JSON lines instead of console output.
    """
    shared = _shared_processors()

    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(log_json),
            ],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(logging.WARNING)

    logging.getLogger("dtokit").setLevel(logging.DEBUG if verbose else logging.WARNING)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
