"""Centralized logging utilities for framecode entry points."""

from __future__ import annotations

import logging
import sys
from typing import Iterable, Optional

PACKAGE_LOGGER_NAME = "framecode"


def _resolve_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    return getattr(logging, str(level).upper(), logging.INFO)


def configure_logging(
    log_level: int | str,
    log_file: Optional[str] = None,
    trace_mode: bool = False,
    debug_components: Iterable[str] = (),
) -> logging.Logger:
    """Configure the framecode logger hierarchy for the CLI and embedding hosts.

    Parameters
    ----------
    log_level : int | str
        Numeric logging level or string name (e.g., "INFO").
    log_file : str, optional
        Optional path to a log file for teeing log output.
    trace_mode : bool, default False
        When true, emit timestamps and logger names for debugging traces.
    debug_components : iterable of str, default ()
        Sub-loggers forced to DEBUG regardless of ``log_level``, given relative
        to the package (e.g. ``"frames.navigation"`` to trace cursor moves).

    Returns
    -------
    logging.Logger
        The configured package logger.

    """
    resolved_level = _resolve_level(log_level)

    package_logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    package_logger.setLevel(resolved_level)
    package_logger.handlers.clear()
    package_logger.propagate = False

    format_str = "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s" if trace_mode else "%(levelname)s: %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S" if trace_mode else None
    formatter = logging.Formatter(format_str, datefmt=date_format)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    package_logger.addHandler(console_handler)

    if log_file:
        try:
            file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
            file_handler.setFormatter(formatter)
            package_logger.addHandler(file_handler)
            package_logger.info(f"Logging to file: {log_file}")
        except OSError as exc:  # pragma: no cover - handled at runtime
            package_logger.warning(f"Could not create log file {log_file}: {exc}")

    for component in debug_components:
        logging.getLogger(f"{PACKAGE_LOGGER_NAME}.{component}").setLevel(logging.DEBUG)

    return package_logger
