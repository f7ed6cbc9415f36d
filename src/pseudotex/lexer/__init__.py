"""Lexer for pseudotex markup.

Architecture:
lexer/
├── __init__.py          # Re-exports Lexer, RECOGNIZERS
├── core.py              # Lexer class (lookahead, accept/expect)
└── patterns.py          # Ordered (type, pattern, extractor) table

Usage:
    >>> from pseudotex.lexer import Lexer
    >>> for symbol in Lexer("\\\\IF{$x$}").tokenize():
    ...     print(symbol)
    Symbol(FUNC, 'IF', @0)
    Symbol(OPEN, '{', @3)
    Symbol(MATH, 'x', @4)
    Symbol(CLOSE, '}', @7)
    Symbol(EOF, '', @8)

"""

from pseudotex.lexer.core import Lexer
from pseudotex.lexer.patterns import RECOGNIZERS, SPECIAL_ESCAPES

__all__ = ["Lexer", "RECOGNIZERS", "SPECIAL_ESCAPES"]
