"""structlog setup shared by the extractor, config loader and CLI.

Log lines from one extract_subscriptions() call carry the same
extraction_batch_id, including lines emitted from worker threads.

Usage:
    from subscout.core.logging import configure_logging, get_logger

    configure_logging("DEBUG", json_output=False, stream=sys.stderr)
    logger = get_logger(__name__)
    logger.debug("message_rejected", message_id="m2", reason="no_currency")
"""

import logging
import sys
from contextvars import ContextVar
from typing import Any, TextIO

import structlog

_batch_id: ContextVar[str | None] = ContextVar("extraction_batch_id", default=None)


def set_batch_id(batch_id: str | None) -> None:
    """Bind (or clear, with None) the batch ID for the current context."""
    _batch_id.set(batch_id)


def get_batch_id() -> str | None:
    return _batch_id.get()


def add_batch_id(
    logger: structlog.types.WrappedLogger,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Processor: stamp extraction_batch_id on events logged inside a batch."""
    batch_id = _batch_id.get()
    if batch_id is not None:
        event_dict["extraction_batch_id"] = batch_id
    return event_dict


def configure_logging(
    log_level: str = "INFO",
    json_output: bool = True,
    stream: TextIO | None = None,
) -> None:
    """Route structlog through stdlib logging.

    Args:
        log_level: DEBUG shows per-message filter and parse decisions;
            INFO adds the per-batch summary
        json_output: JSON lines when True, colored console lines otherwise
        stream: Defaults to stdout
    """
    logging.basicConfig(
        format="%(message)s",
        stream=stream or sys.stdout,
        level=getattr(logging, log_level.upper()),
    )

    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        add_batch_id,
    ]
    if json_output:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
