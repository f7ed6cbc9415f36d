"""Symbol and SymbolType definitions for the pseudotex lexer.

The lexer produces Symbol objects that the parser consumes immediately.
Each Symbol has a type, the useful part of its matched text, and the
offset where the match started.

Thread Safety:
Symbol is frozen (immutable) and safe to share across threads.
SymbolType is an enum (inherently immutable).

"""

from dataclasses import dataclass
from enum import Enum, auto


class SymbolType(Enum):
    """Symbol types produced by the lexer."""

    FUNC = auto()  # \name, text is the name without the backslash
    OPEN = auto()  # {
    CLOSE = auto()  # }
    ORDINARY = auto()  # run of characters outside \ { } $ & # % _
    SPECIAL = auto()  # \\ \{ \} \$ \& \# \% \_
    MATH = auto()  # $...$, text is the body
    EOF = auto()


@dataclass(frozen=True, slots=True)
class Symbol:
    """A symbol produced by the lexer.

    Attributes:
        type: The symbol type
        text: Useful part of the match (``it`` for ``\\it``, ``x`` for ``$x$``);
            None for EOF
        offset: Start offset of the full match in the source
        end_offset: Offset just past the full match

    """

    type: SymbolType
    text: str | None
    offset: int
    end_offset: int

    def __repr__(self) -> str:
        """Compact repr for debugging."""
        val = self.text or ""
        if len(val) > 20:
            val = val[:17] + "..."
        return f"Symbol({self.type.name}, {val!r}, @{self.offset})"
