"""
Structured logging for training runs, built on structlog.

Trainers log one key/value event per iteration (log-likelihood, accuracy,
loss); indexers and the codec log corpus and model sizes. Values are often
numpy scalars, so they are turned into plain Python numbers before
rendering.
"""

import logging
import sys
from typing import IO, Any

import numpy as np
import structlog


def _numpy_to_builtin(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Replace numpy scalars and arrays with Python numbers and lists."""
    for key, value in event_dict.items():
        if isinstance(value, np.generic):
            event_dict[key] = value.item()
        elif isinstance(value, np.ndarray):
            event_dict[key] = value.tolist()
    return event_dict


def configure_logging(
    level: str = "INFO",
    json_output: bool = False,
    stream: IO[str] | None = None,
) -> None:
    """
    Configure structured logging for maxentkit.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL); unknown
            names fall back to INFO.
        json_output: If True, render one JSON object per line.
        stream: Destination; stderr by default so that command output on
            stdout stays clean.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    stream = stream if stream is not None else sys.stderr

    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        _numpy_to_builtin,
    ]
    if json_output:
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=stream.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Logger for a module; pass ``__name__``."""
    return structlog.get_logger(name)


def log_context(**kwargs: Any) -> structlog.contextvars.bound_contextvars:
    """
    Bind values to every log event emitted inside the ``with`` block.

    Example:
        with log_context(trainer="GISTrainer"):
            log.info("Training started")  # carries trainer=GISTrainer
    """
    return structlog.contextvars.bound_contextvars(**kwargs)
