"""Logging setup for atomlineage.

Library code only ever calls ``logging.getLogger(__name__)``; nothing is
emitted until an application attaches a handler. The CLI does that through
:func:`configure_logging`, which installs one stream handler on the
``atomlineage`` package logger and leaves the root logger alone.

Level resolution (first match wins):
    1. Explicit ``level`` argument
    2. ATOMLINEAGE_LOG_LEVEL (DEBUG, INFO, WARNING, ... or a number)
    3. ATOMLINEAGE_DEBUG=true
    4. ``debug=True`` (the --debug flag)
    5. WARNING

Shadow creation and ancestry matches are logged at INFO, store repairs and
orphaned links at WARNING, lineage cycles at ERROR.
"""

import logging
import os
import sys
from typing import TextIO

PACKAGE_LOGGER = "atomlineage"

_VERBOSE_FORMAT = "%(asctime)s %(name)s [%(levelname)s] %(message)s"
_TERSE_FORMAT = "%(name)s: %(message)s"

_TRUTHY = ("true", "1", "yes")


def resolve_level(*, debug: bool = False, level: int | str | None = None) -> int:
    """Pick the effective log level from arguments and environment."""
    if level is not None:
        return _parse_level(level)
    if env_level := os.environ.get("ATOMLINEAGE_LOG_LEVEL"):
        return _parse_level(env_level)
    if os.environ.get("ATOMLINEAGE_DEBUG", "").lower() in _TRUTHY or debug:
        return logging.DEBUG
    return logging.WARNING


def configure_logging(
    *,
    debug: bool = False,
    level: int | str | None = None,
    stream: TextIO | None = None,
) -> int:
    """Attach a stream handler to the atomlineage logger.

    Safe to call repeatedly; handlers from earlier calls are replaced.

    Args:
        debug: Enable DEBUG level with timestamps
        level: Override log level (int or name)
        stream: Output stream (default: stderr)

    Returns:
        The resolved log level.
    """
    resolved = resolve_level(debug=debug, level=level)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(
        logging.Formatter(_VERBOSE_FORMAT if resolved <= logging.DEBUG else _TERSE_FORMAT)
    )

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    for old in package_logger.handlers[:]:
        package_logger.removeHandler(old)
    package_logger.addHandler(handler)
    package_logger.setLevel(resolved)

    package_logger.debug("Logging at %s", logging.getLevelName(resolved))
    return resolved


def _parse_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    named = logging.getLevelName(level.upper())
    if isinstance(named, int):
        return named
    try:
        return int(level)
    except ValueError:
        return logging.WARNING
