"""Render options for pseudotex.

Options are an immutable value passed explicitly to every render call.
There is no process-wide configuration: two renders with different
options never observe each other.

Usage:
    from pseudotex import RenderOptions, render_to_string

    options = RenderOptions(line_number=True)
    html = render_to_string(source, options)

    # From user-facing option names (JavaScript-style or snake_case)
    options = RenderOptions.from_dict({"indentSize": "1.2em", "lineNumber": True})

"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass, fields
from typing import Any

from pseudotex.errors import ConfigError
from pseudotex.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_INDENT_SIZE = 1.4

# User-facing option names accepted by from_dict, mapped to field names
_OPTION_ALIASES: dict[str, str] = {
    "indentSize": "indent_size",
    "commentSymbol": "comment_symbol",
    "lineNumberPunc": "line_number_punc",
    "lineNumber": "line_number",
}


def parse_em_value(value: str) -> float:
    """Parse a length with a mandatory ``em`` unit into a number.

    Args:
        value: Length such as ``"1.4em"`` (surrounding whitespace allowed)

    Returns:
        The numeric part, in em

    Raises:
        ConfigError: The unit is missing or the number is malformed

    Example:
        >>> parse_em_value(" 2em ")
        2.0
    """
    if not isinstance(value, str):
        raise ConfigError(f"Option unit error; expected a string like '1.4em', got {value!r}")
    text = value.strip()
    if not text.endswith("em"):
        raise ConfigError(f"Option unit error; no `em` found in {value!r}")
    try:
        number = float(text[:-2])
    except ValueError:
        raise ConfigError(f"Option value error; {value!r} is not a number of em") from None
    if not math.isfinite(number) or number < 0:
        raise ConfigError(f"Option value error; {value!r} must be a finite, non-negative length")
    return number


@dataclass(frozen=True, slots=True)
class RenderOptions:
    """Immutable render configuration.

    Frozen dataclass ensures thread-safety (immutable after creation).

    Attributes:
        indent_size: Left margin of each nested block, in em
        comment_symbol: Prefix of rendered ``\\COMMENT`` text
        line_number_punc: Text appended after each line number
        line_number: Number code lines within algorithmic environments

    """

    indent_size: float = DEFAULT_INDENT_SIZE
    comment_symbol: str = "//"
    line_number_punc: str = ":"
    line_number: bool = False

    def __post_init__(self) -> None:
        size = self.indent_size
        if isinstance(size, bool) or not isinstance(size, int | float):
            raise ConfigError(f"Option value error; indent_size must be a number of em, got {size!r}")
        if not math.isfinite(size) or size < 0:
            raise ConfigError(
                f"Option value error; indent_size must be a finite, non-negative length, got {size!r}"
            )

    @classmethod
    def from_dict(cls, config_dict: Mapping[str, Any]) -> RenderOptions:
        """Create RenderOptions from user-facing option names.

        Accepts ``indentSize``/``indent_size`` (a string with an ``em``
        unit), ``commentSymbol``, ``lineNumberPunc`` and ``lineNumber``.
        Missing, None or empty values fall back to the defaults. Unknown
        keys are ignored.

        Args:
            config_dict: Dictionary with option values

        Returns:
            New RenderOptions instance

        Raises:
            ConfigError: ``indentSize`` is malformed

        Example:
            >>> RenderOptions.from_dict({"indentSize": "2em", "lineNumber": True})
            RenderOptions(indent_size=2.0, comment_symbol='//', line_number_punc=':', line_number=True)

        """
        valid_fields = {f.name for f in fields(cls)}
        values: dict[str, Any] = {}
        for key, value in config_dict.items():
            name = _OPTION_ALIASES.get(key, key)
            if name not in valid_fields:
                logger.debug("Ignoring unknown render option %r", key)
                continue
            if value is None or value == "":
                continue
            values[name] = value

        if "indent_size" in values:
            values["indent_size"] = parse_em_value(values["indent_size"])
        if "line_number" in values:
            values["line_number"] = bool(values["line_number"])
        return cls(**values)


DEFAULT_OPTIONS = RenderOptions()


def resolve_options(options: RenderOptions | Mapping[str, Any] | None) -> RenderOptions:
    """Accept RenderOptions, a plain mapping, or None (defaults)."""
    if options is None:
        return DEFAULT_OPTIONS
    if isinstance(options, RenderOptions):
        return options
    return RenderOptions.from_dict(options)


__all__ = [
    "DEFAULT_OPTIONS",
    "RenderOptions",
    "parse_em_value",
    "resolve_options",
]
