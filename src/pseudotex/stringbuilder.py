"""Line-oriented StringBuilder for markup output.

The renderer emits markup as a sequence of fragments (an opening tag, a
keyword span, a run of text) and joins them once at the end. Appending to
a list and joining once is O(n) total vs O(n²) for repeated string
concatenation.

Thread Safety:
StringBuilder instances are local to each render() call.
No shared mutable state.

"""

from __future__ import annotations


class StringBuilder:
    """Efficient fragment accumulator.

    Usage:
        >>> sb = StringBuilder()
        >>> _ = sb.append('<div class="pseudo">').append("</div>")
        >>> sb.build("\\n")
        '<div class="pseudo">\\n</div>'

    """

    __slots__ = ("_parts",)

    def __init__(self) -> None:
        self._parts: list[str] = []

    def append(self, s: str) -> StringBuilder:
        """Append a fragment (empty fragments are skipped).

        Returns:
            self for method chaining
        """
        if s:
            self._parts.append(s)
        return self

    def build(self, separator: str = "") -> str:
        """Join all fragments with ``separator``."""
        return separator.join(self._parts)

    def __len__(self) -> int:
        """Return number of fragments (not total length)."""
        return len(self._parts)

    def __bool__(self) -> bool:
        return bool(self._parts)
