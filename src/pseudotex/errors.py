"""Exception classes for pseudotex.

Every failure raised by the pipeline derives from PseudotexError and carries
an ErrorKind discriminator, so callers can branch on lexical, syntactic,
configuration, or internal failures without string matching.

Positioned errors (lexical and syntactic) also carry the failure offset,
its line/column, and an excerpt of the input with the failure position
marked.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pseudotex.excerpt import extract_excerpt, flatten_whitespace
from pseudotex.location import SourceLocation


class ErrorKind(Enum):
    """Discriminator for PseudotexError subclasses."""

    LEXICAL = "lexical"
    SYNTACTIC = "syntactic"
    CONFIGURATION = "configuration"
    INTERNAL = "internal"


class PseudotexError(Exception):
    """Base exception for all pseudotex errors.

    Attributes:
        kind: Error category
        message: Error description without location decoration
        offset: Failure offset in the source (None when not positioned)
        lineno: Line of the failure (1-indexed, None when not positioned)
        col_offset: Column of the failure (1-indexed, None when not positioned)
        excerpt: Source window with the failure position marked
    """

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(
        self,
        message: str,
        offset: int | None = None,
        source: str | None = None,
    ) -> None:
        """Initialize error with optional position.

        Args:
            message: Error description
            offset: Failure offset in ``source`` (0-indexed)
            source: Full input text; required for line/column and excerpt
        """
        self.message = message
        self.offset = offset
        self.lineno: int | None = None
        self.col_offset: int | None = None
        self.excerpt: str | None = None

        if offset is not None and source is not None:
            loc = SourceLocation.from_offset(source, offset)
            self.lineno = loc.lineno
            self.col_offset = loc.col_offset
            self.excerpt = extract_excerpt(source, offset)

        text = message
        if offset is not None:
            text += f" at position {offset}"
            if self.excerpt is not None:
                text += f": `{flatten_whitespace(self.excerpt)}`"
        super().__init__(text)

    def to_dict(self) -> dict[str, Any]:
        """Structured form of the error for programmatic consumers."""
        return {
            "kind": self.kind.value,
            "message": self.message,
            "offset": self.offset,
            "excerpt": self.excerpt,
        }


class LexicalError(PseudotexError):
    """Unrecognizable character sequence in the input."""

    kind = ErrorKind.LEXICAL


class ParseError(PseudotexError):
    """Input does not match the pseudocode grammar.

    Raised for missing or unexpected symbols, unmatched begin/end pairs,
    mismatched loop or function closing keywords, and unknown environment
    names.
    """

    kind = ErrorKind.SYNTACTIC


class ConfigError(PseudotexError):
    """Malformed option value, such as an indent size without an ``em`` unit."""

    kind = ErrorKind.CONFIGURATION


class RenderError(PseudotexError):
    """Error during HTML rendering.

    Raised when the renderer reaches a node it does not know how to emit,
    which means the parser and renderer disagree about the tree shape.
    """

    kind = ErrorKind.INTERNAL
