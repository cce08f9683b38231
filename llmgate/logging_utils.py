"""Logging configuration helpers."""

from __future__ import annotations

import logging

DEFAULT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def resolve_level(level: str | int) -> int:
    if isinstance(level, int):
        return level
    return getattr(logging, level.strip().upper(), logging.INFO)


def configure_logging(level: str | int = "INFO", fmt: str = DEFAULT_FORMAT) -> None:
    resolved = resolve_level(level)
    logging.basicConfig(level=resolved, format=fmt)
    # basicConfig is a no-op once the root logger has handlers.
    logging.getLogger().setLevel(resolved)
