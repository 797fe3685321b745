"""structlog configuration for the ``lifestyle`` logger tree.

Modules log through plain ``logging.getLogger(__name__)``; the handler
installed here renders those records with structlog, either as console text
or as one JSON object per line.
"""

from __future__ import annotations

import logging

import structlog

from lifestyle.core.config import LoggingConfig

_HANDLER_NAME = "lifestyle"

_PRE_CHAIN: list[structlog.types.Processor] = [
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt="iso", utc=True),
]


def _formatter(fmt: str) -> structlog.stdlib.ProcessorFormatter:
    processors: list[structlog.types.Processor] = [
        structlog.stdlib.ProcessorFormatter.remove_processors_meta,
    ]
    if fmt == "json":
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.EventRenamer("message"),
            structlog.processors.JSONRenderer(ensure_ascii=False),
        ]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))
    return structlog.stdlib.ProcessorFormatter(foreign_pre_chain=_PRE_CHAIN, processors=processors)


def configure_logging(config: LoggingConfig | None = None) -> logging.Logger:
    """Attach a single structlog-rendered stream handler to the ``lifestyle`` logger.

    Calling this again replaces the handler instead of stacking another one.
    """
    config = config or LoggingConfig()
    root = logging.getLogger("lifestyle")
    root.setLevel(config.level)

    for handler in list(root.handlers):
        if handler.get_name() == _HANDLER_NAME:
            root.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(_formatter(config.format))
    root.addHandler(handler)
    return root
