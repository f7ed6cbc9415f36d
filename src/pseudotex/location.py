"""Source location tracking for error messages and debugging.

Provides SourceLocation for pointing at positions in pseudocode source.
Every AST node carries one, and positioned errors derive their line and
column from the same offset.

Thread Safety:
SourceLocation is frozen (immutable) and safe to share across threads.

"""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class SourceLocation:
    """Source location for error messages and debugging.

    Line and column are 1-indexed; offsets are 0-indexed positions in the
    source string.

    Attributes:
        lineno: Line number (1-indexed)
        col_offset: Column offset (1-indexed)
        offset: Absolute start offset in source
        end_offset: Absolute end offset in source

    Examples:
        >>> SourceLocation.from_offset("a\\nbc", 3)
        SourceLocation(lineno=2, col_offset=2, offset=3, end_offset=3)

    """

    lineno: int
    col_offset: int
    offset: int = 0
    end_offset: int = 0

    def __str__(self) -> str:
        """Format location for error messages, e.g. ``"3:7"``."""
        return f"{self.lineno}:{self.col_offset}"

    @classmethod
    def from_offset(cls, source: str, offset: int, end_offset: int | None = None) -> SourceLocation:
        """Compute line/column for a single offset.

        O(offset). Use LineIndex when resolving many offsets in one source.
        """
        offset = max(0, min(offset, len(source)))
        lineno = source.count("\n", 0, offset) + 1
        line_start = source.rfind("\n", 0, offset) + 1
        return cls(
            lineno=lineno,
            col_offset=offset - line_start + 1,
            offset=offset,
            end_offset=offset if end_offset is None else end_offset,
        )

    @classmethod
    def unknown(cls) -> SourceLocation:
        """Placeholder for synthetically built nodes."""
        return cls(lineno=0, col_offset=0)


class LineIndex:
    """Offset to line/column resolver with a precomputed line-start table.

    The parser creates one per source and resolves every node location
    through it in O(log lines).
    """

    __slots__ = ("_starts",)

    def __init__(self, source: str) -> None:
        starts = [0]
        pos = source.find("\n")
        while pos != -1:
            starts.append(pos + 1)
            pos = source.find("\n", pos + 1)
        self._starts = starts

    def location(self, offset: int, end_offset: int | None = None) -> SourceLocation:
        """Resolve an offset (and optional end offset) to a SourceLocation."""
        line = bisect_right(self._starts, offset)
        return SourceLocation(
            lineno=line,
            col_offset=offset - self._starts[line - 1] + 1,
            offset=offset,
            end_offset=offset if end_offset is None else end_offset,
        )
