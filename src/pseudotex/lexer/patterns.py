"""Ordered recognizer table for the pseudotex lexer.

Each recognizer is a (type, pattern, extractor) triple. The lexer tries
them in table order at the current position and the first match wins, so
the order here is part of the tokenization contract: special escapes must
come before command names (``\\{`` is not a command), and ordinary text must
come before math (``$`` is never ordinary).

A pattern returns the end offset of its match or None. An extractor turns
the matched span into the symbol's useful text.

"""

from __future__ import annotations

import re
from collections.abc import Callable
from typing import TypeAlias
from dataclasses import dataclass

from pseudotex.tokens import SymbolType

Pattern: TypeAlias = Callable[[str, int], int | None]
Extractor: TypeAlias = Callable[[str, int, int], str]

WHITESPACE = re.compile(r"\s*")

SPECIAL_ESCAPES: tuple[str, ...] = ("\\\\", "\\{", "\\}", "\\$", "\\&", "\\#", "\\%", "\\_")

_SPECIAL_RE = re.compile(r"\\[\\{}$&#%_]")
_FUNC_RE = re.compile(r"\\[a-zA-Z]+")
_ORDINARY_RE = re.compile(r"[^\\{}$&#%_]+")


def _regex(compiled: re.Pattern[str]) -> Pattern:
    """Adapt a compiled regex to the pattern signature."""

    def match(source: str, pos: int) -> int | None:
        m = compiled.match(source, pos)
        return m.end() if m else None

    return match


def _literal(char: str) -> Pattern:
    def match(source: str, pos: int) -> int | None:
        return pos + 1 if source.startswith(char, pos) else None

    return match


def scan_math(source: str, pos: int) -> int | None:
    """Match an inline ``$...$`` span starting at ``pos``.

    Scans forward for the first ``$`` not immediately preceded by a
    backslash. An unterminated span does not match.
    """
    if not source.startswith("$", pos):
        return None
    end = len(source)
    cursor = pos + 1
    while cursor < end and (source[cursor] != "$" or source[cursor - 1] == "\\"):
        cursor += 1
    if cursor >= end:
        return None
    return cursor + 1


def _whole(source: str, start: int, end: int) -> str:
    return source[start:end]


def _strip_backslash(source: str, start: int, end: int) -> str:
    return source[start + 1 : end]


def _strip_dollars(source: str, start: int, end: int) -> str:
    return source[start + 1 : end - 1]


@dataclass(frozen=True, slots=True)
class Recognizer:
    """One row of the recognizer table."""

    type: SymbolType
    pattern: Pattern
    extract: Extractor


RECOGNIZERS: tuple[Recognizer, ...] = (
    Recognizer(SymbolType.SPECIAL, _regex(_SPECIAL_RE), _whole),
    Recognizer(SymbolType.FUNC, _regex(_FUNC_RE), _strip_backslash),
    Recognizer(SymbolType.OPEN, _literal("{"), _whole),
    Recognizer(SymbolType.CLOSE, _literal("}"), _whole),
    Recognizer(SymbolType.ORDINARY, _regex(_ORDINARY_RE), _whole),
    Recognizer(SymbolType.MATH, scan_math, _strip_dollars),
)
