# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Utility functions for fontruns."""

import logging
import os
import sys

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Default pixel size for typefaces loaded without an explicit size
DEFAULT_TYPEFACE_SIZE = 32


def setup_logging(verbose: bool = False, quiet: bool = False) -> logging.Logger:
    """Routes the ``fontruns`` logger hierarchy to stderr.

    Rejected cmap subtables and run counts are logged at DEBUG, so
    ``verbose`` is what surfaces why a font reports less coverage than
    expected. ``quiet`` wins over ``verbose`` and leaves only errors.
    Calling this again replaces the handler.

    Returns:
        The ``fontruns`` package logger.
    """
    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO

    fontruns_logger = logging.getLogger("fontruns")
    fontruns_logger.setLevel(level)
    fontruns_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    fontruns_logger.addHandler(handler)

    logger.debug("Logging configured with level: %s", logging.getLevelName(level))
    return fontruns_logger


def get_font_dirs() -> list[str]:
    """Returns the font search directories from FONTRUNS_FONT_PATH."""
    raw = os.environ.get("FONTRUNS_FONT_PATH", "")
    return [d for d in raw.split(os.pathsep) if d]


def get_default_size() -> int:
    """Returns the default typeface size from FONTRUNS_DEFAULT_SIZE.

    Falls back to ``DEFAULT_TYPEFACE_SIZE`` when the variable is unset
    or does not hold a positive integer.
    """
    raw = os.environ.get("FONTRUNS_DEFAULT_SIZE")
    if not raw:
        return DEFAULT_TYPEFACE_SIZE
    try:
        size = int(raw)
    except ValueError:
        logger.warning(
            "Ignoring invalid FONTRUNS_DEFAULT_SIZE %r, using %d",
            raw,
            DEFAULT_TYPEFACE_SIZE,
        )
        return DEFAULT_TYPEFACE_SIZE
    if size <= 0:
        logger.warning(
            "Ignoring non-positive FONTRUNS_DEFAULT_SIZE %d, using %d",
            size,
            DEFAULT_TYPEFACE_SIZE,
        )
        return DEFAULT_TYPEFACE_SIZE
    return size
