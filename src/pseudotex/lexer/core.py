"""Single-symbol-lookahead lexer for pseudotex.

The lexer always holds exactly one current symbol. The parser inspects it
with current(), consumes it conditionally with accept(), or demands it with
expect(). Consuming a symbol scans the next one immediately, so lexical
errors surface as soon as the offending text becomes the lookahead.

Thread Safety:
Lexer instances are single-use. Create one per source string.
All state is instance-local; no shared mutable state.

"""

from __future__ import annotations

from collections.abc import Collection, Iterator
from typing import TypeAlias

from pseudotex.errors import LexicalError, ParseError
from pseudotex.lexer.patterns import RECOGNIZERS, WHITESPACE
from pseudotex.tokens import Symbol, SymbolType

TextMatch: TypeAlias = str | Collection[str] | None


class Lexer:
    """Predictive lexer over a full pseudocode source string.

    Usage:
        >>> lexer = Lexer("\\\\STATE x")
        >>> lexer.current()
        Symbol(FUNC, 'STATE', @0)
        >>> lexer.accept(SymbolType.FUNC, "STATE")
        'STATE'
        >>> lexer.expect(SymbolType.ORDINARY)
        'x'
        >>> lexer.current().type
        <SymbolType.EOF: 7>

    Thread Safety:
        Lexer instances are single-use. Create one per source string.

    """

    __slots__ = ("_source", "_source_len", "_pos", "_symbol", "_last_text", "_last_end")

    def __init__(self, source: str) -> None:
        """Initialize lexer and scan the first symbol.

        Args:
            source: Pseudocode source text

        Raises:
            LexicalError: The first symbol is unrecognizable
        """
        self._source = source
        self._source_len = len(source)
        self._pos = 0
        self._last_text: str | None = None
        self._last_end = 0
        self._symbol = self._scan()

    @property
    def source(self) -> str:
        """Full input text."""
        return self._source

    @property
    def last_text(self) -> str | None:
        """Text of the most recently consumed symbol."""
        return self._last_text

    @property
    def last_end(self) -> int:
        """Offset just past the most recently consumed symbol."""
        return self._last_end

    def current(self) -> Symbol:
        """Return the lookahead symbol without consuming it."""
        return self._symbol

    def accept(self, symbol_type: SymbolType, text: TextMatch = None) -> str | None:
        """Consume the lookahead if it matches.

        Args:
            symbol_type: Required symbol type
            text: Required text, or a collection of acceptable texts

        Returns:
            The consumed symbol's text, or None (cursor untouched) on mismatch
        """
        symbol = self._symbol
        if symbol.type is not symbol_type or not _text_matches(symbol.text, text):
            return None
        return self._consume()

    def expect(self, symbol_type: SymbolType, text: TextMatch = None) -> str:
        """Consume the lookahead, which must match.

        Raises:
            ParseError: The lookahead has the wrong type or text
        """
        symbol = self._symbol
        if symbol.type is not symbol_type:
            raise ParseError(
                f"Expected a symbol of type {symbol_type.name} "
                f"but received {symbol.type.name}",
                symbol.offset,
                self._source,
            )
        if not _text_matches(symbol.text, text):
            raise ParseError(
                f"Expected `{_describe(text)}` but received `{symbol.text}`",
                symbol.offset,
                self._source,
            )
        return self._consume()

    def tokenize(self) -> Iterator[Symbol]:
        """Consume and yield every remaining symbol, ending with EOF.

        Yields:
            Symbol objects one at a time

        Raises:
            LexicalError: An unrecognizable symbol was reached
        """
        while self._symbol.type is not SymbolType.EOF:
            symbol = self._symbol
            self._consume()
            yield symbol
        yield self._symbol

    # =========================================================================
    # Scanning
    # =========================================================================

    def _consume(self) -> str:
        text = self._symbol.text
        # EOF text is None; only reachable through expect(EOF)
        self._last_text = text
        self._last_end = self._symbol.end_offset
        self._symbol = self._scan()
        return text if text is not None else ""

    def _scan(self) -> Symbol:
        """Skip whitespace and recognize the symbol at the cursor."""
        source = self._source
        ws = WHITESPACE.match(source, self._pos)
        start = ws.end() if ws else self._pos
        self._pos = start

        if start >= self._source_len:
            return Symbol(SymbolType.EOF, None, start, start)

        for recognizer in RECOGNIZERS:
            end = recognizer.pattern(source, start)
            if end is None:
                continue
            self._pos = end
            return Symbol(recognizer.type, recognizer.extract(source, start, end), start, end)

        raise LexicalError("Unrecognizable symbol", start, source)


def _text_matches(actual: str | None, wanted: TextMatch) -> bool:
    if wanted is None:
        return True
    if isinstance(wanted, str):
        return actual == wanted
    return actual in wanted


def _describe(wanted: TextMatch) -> str:
    if wanted is None or isinstance(wanted, str):
        return str(wanted)
    return " | ".join(sorted(wanted))
