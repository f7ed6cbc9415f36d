"""Text processing utilities for pseudotex."""

from __future__ import annotations

import html as html_module


def escape_html(text: str) -> str:
    """Escape ``&``, ``<`` and ``>`` for use in HTML element content.

    Quotes are left alone; output never places user text inside
    attribute values.

    Examples:
        >>> escape_html("a < b && c")
        'a &lt; b &amp;&amp; c'
    """
    if not text:
        return ""
    return html_module.escape(text, quote=False)


def format_em(value: float) -> str:
    """Format a length in em the way CSS authors write it.

    Integral values drop the fractional part and floating point noise is
    rounded away.

    Examples:
        >>> format_em(1.4)
        '1.4'
        >>> format_em(2.0)
        '2'
        >>> format_em(1.7 * 3)
        '5.1'
    """
    rounded = round(value, 4)
    if rounded == 0:
        return "0"
    return f"{rounded:g}"
