"""Minimal logging utilities for pseudotex.

Provides a get_logger function that namespaces standard library loggers
under ``pseudotex``. The library never installs handlers; applications
configure logging as usual.

Example:
    >>> from pseudotex.utils.logger import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.debug("Parsed %d environment(s)", 2)
"""

from __future__ import annotations

import logging


def get_logger(name: str) -> logging.Logger:
    """Get a logger for the given name.

    Args:
        name: Logger name (typically __name__)

    Returns:
        logging.Logger instance under the ``pseudotex`` namespace

    Example:
        >>> get_logger("mymodule").name
        'pseudotex.mymodule'
        >>> get_logger("pseudotex.parser").name
        'pseudotex.parser'
    """
    if not (name == "pseudotex" or name.startswith("pseudotex.")):
        name = f"pseudotex.{name}"
    return logging.getLogger(name)
