"""Property-based tests for lexer invariants using Hypothesis.

These tests verify that certain properties always hold regardless
of the input, helping catch edge cases that example-based tests miss.
"""

from hypothesis import given, settings
from hypothesis import strategies as st

from pseudotex.errors import LexicalError
from pseudotex.excerpt import ERROR_MARKER
from pseudotex.lexer import Lexer
from pseudotex.tokens import SymbolType

# Characters that exercise every recognizer and every error path
_MARKUP_ALPHABET = "ab xy\n\\{}$&#%_ASTE"


def _tokenize_or_error(source: str) -> list | LexicalError:
    try:
        return list(Lexer(source).tokenize())
    except LexicalError as exc:
        return exc


class TestBasicInvariants:
    """Invariants that hold for any input."""

    @given(st.text(max_size=500))
    @settings(max_examples=200)
    def test_ends_with_single_eof_or_positioned_error(self, source: str) -> None:
        """Tokenization ends with exactly one EOF, or fails with a position."""
        result = _tokenize_or_error(source)
        if isinstance(result, LexicalError):
            assert result.offset is not None
            assert 0 <= result.offset <= len(source)
            assert result.excerpt is not None
            assert ERROR_MARKER in result.excerpt
            return

        assert result[-1].type is SymbolType.EOF
        assert sum(1 for s in result if s.type is SymbolType.EOF) == 1

    @given(st.text(alphabet=_MARKUP_ALPHABET, max_size=300))
    @settings(max_examples=200)
    def test_offsets_strictly_increase(self, source: str) -> None:
        """Every symbol starts after the previous one ended."""
        result = _tokenize_or_error(source)
        if isinstance(result, LexicalError):
            return

        previous_end = 0
        for symbol in result:
            assert symbol.offset >= previous_end
            if symbol.type is not SymbolType.EOF:
                assert symbol.end_offset > symbol.offset
            previous_end = symbol.end_offset

    @given(st.text(alphabet=_MARKUP_ALPHABET, max_size=300))
    @settings(max_examples=100)
    def test_only_whitespace_between_symbols(self, source: str) -> None:
        """Gaps between symbols are skipped whitespace, nothing else."""
        result = _tokenize_or_error(source)
        if isinstance(result, LexicalError):
            return

        previous_end = 0
        for symbol in result:
            assert source[previous_end : symbol.offset].strip() == ""
            previous_end = symbol.end_offset
