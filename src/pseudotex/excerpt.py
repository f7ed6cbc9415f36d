"""Extract marked source excerpts for positioned error messages.

A positioned error shows a short window of the input centered on the
failure offset, with a marker inserted at the exact failure column.

Example:
    >>> from pseudotex.excerpt import extract_excerpt
    >>> extract_excerpt("\\\\STATE x & y", 9)
    '\\\\STATE x ↱& y'
"""

from __future__ import annotations

ERROR_MARKER = "↱"
"""Marker inserted at the failure position (``↱``)."""

DEFAULT_RADIUS = 15


def extract_excerpt(
    source: str,
    offset: int,
    *,
    radius: int = DEFAULT_RADIUS,
    marker: str = ERROR_MARKER,
) -> str:
    """Return the window of ``source`` around ``offset`` with a marker.

    The marker is inserted first and the window is cut from the marked
    text, so the excerpt holds ``radius`` characters before the marker and
    ``radius - len(marker)`` after it. Offsets past the end of the input are
    clamped, so errors at end-of-input still point somewhere useful.

    Args:
        source: Full input text
        offset: Failure offset (0-indexed)
        radius: Characters kept either side of the offset
        marker: Text inserted at the failure position

    Returns:
        Excerpt containing the marker
    """
    offset = max(0, min(offset, len(source)))
    marked = source[:offset] + marker + source[offset:]
    begin = max(0, offset - radius)
    end = offset + radius
    return marked[begin:end]


def flatten_whitespace(excerpt: str) -> str:
    """Collapse newlines and tabs so an excerpt fits on one log line."""
    return excerpt.replace("\r", " ").replace("\n", " ").replace("\t", " ")
