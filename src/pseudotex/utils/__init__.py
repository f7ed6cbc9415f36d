"""Utility modules for pseudotex.

Provides:
- text: escape_html, format_em for markup emission
- logger: get_logger for logging
"""

from pseudotex.utils.logger import get_logger
from pseudotex.utils.text import escape_html, format_em

__all__ = [
    "escape_html",
    "format_em",
    "get_logger",
]
