"""Logging configuration for cirrus.

Structured logging via loguru. The library is silent by default; call
``setup_logging`` to route its records to stderr and/or a rotating file.

Example:
    from cirrus.observability.logging import LogConfig, setup_logging

    handler_ids = setup_logging(LogConfig(level="DEBUG", console=True))
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal, TypeAlias

from loguru import logger

logger.disable("cirrus")

LogLevel: TypeAlias = Literal["TRACE", "DEBUG", "INFO", "WARNING", "ERROR"]

_CONTEXT_KEYS = ("component", "kind", "resource_id")


def _format_context(record: Any) -> str:
    extra = record.get("extra", {})
    parts = [f"{k}={extra[k]}" for k in _CONTEXT_KEYS if k in extra]
    return f" [{' '.join(parts)}]" if parts else ""


CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan>"
    "<dim>{extra[_ctx]}</dim> - "
    "<level>{message}</level>"
)

FILE_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | "
    "{name}:{function}:{line}{extra[_ctx]} - {message}"
)


@dataclass(frozen=True, slots=True)
class LogConfig:
    """Logging configuration.

    Attributes:
        level: Minimum level for the console sink.
        file: Path to a log file, or None for no file output.
        console: Whether to log to stderr.
        rotation: File rotation policy (e.g. "50 MB", "1 day").
        retention: Number of rotated files to keep.
    """

    level: LogLevel = "INFO"
    file: str | None = None
    console: bool = True
    rotation: str = "50 MB"
    retention: int = 10


def setup_logging(config: LogConfig) -> list[int]:
    """Enable cirrus logging and return the handler ids that were added."""
    logger.remove()
    logger.enable("cirrus")
    logger.configure(patcher=lambda r: r["extra"].update(_ctx=_format_context(r)))

    handler_ids: list[int] = []
    if config.console:
        handler_ids.append(
            logger.add(
                sys.stderr,
                level=config.level,
                format=CONSOLE_FORMAT,
                colorize=True,
                filter="cirrus",
            )
        )

    if config.file:
        Path(config.file).parent.mkdir(parents=True, exist_ok=True)
        handler_ids.append(
            logger.add(
                config.file,
                level="DEBUG",
                format=FILE_FORMAT,
                rotation=config.rotation,
                retention=config.retention,
                compression="zip",
                filter="cirrus",
                diagnose=False,
            )
        )

    return handler_ids


def teardown_logging(handler_ids: list[int]) -> None:
    """Remove the given handlers and silence cirrus again."""
    for hid in handler_ids:
        logger.remove(hid)
    logger.disable("cirrus")
