"""Logging configuration for ProductSync processes."""

from __future__ import annotations

import logging


def _resolve_level(level_name: str) -> int:
    return getattr(logging, level_name.upper(), logging.INFO)


def configure_logging(level_name: str = "INFO") -> None:
    """Configure root logging with a concise format carrying the batch location."""
    level = _resolve_level(level_name)
    formatter = _build_formatter()
    root_logger = logging.getLogger()

    # Lambda pre-installs a handler on the root logger
    if root_logger.handlers:
        root_logger.setLevel(level)
        for handler in root_logger.handlers:
            handler.setLevel(level)
            handler.setFormatter(formatter)
        return

    logging.basicConfig(level=level)
    for handler in logging.getLogger().handlers:
        handler.setFormatter(formatter)


def _build_formatter() -> logging.Formatter:
    pattern = "%(asctime)s %(levelname)s %(name)s batch=%(batch)s %(message)s"
    return logging.Formatter(pattern, defaults={"batch": "-"})
