"""
pseudotex: TeX-style pseudocode to HTML

Converts the ``algorithmic``-flavoured pseudocode markup used in papers into
structured, indentation-aware HTML for embedding an algorithm box in a page.
Lexer, recursive descent parser, typed AST, and HTML renderer; zero runtime
dependencies.

Quick Start:
    >>> from pseudotex import render_to_string
    >>> html = render_to_string(
    ...     "\\\\begin{algorithmic} \\\\STATE x \\\\end{algorithmic}"
    ... )
    >>> html.splitlines()[0]
    '<div class="pseudo">'

    >>> # Or keep options and a math collaborator in one processor
    >>> from pseudotex import Pseudocode
    >>> pc = Pseudocode({"lineNumber": True, "indentSize": "1.2em"})
    >>> html = pc("\\\\begin{algorithmic} \\\\STATE x \\\\end{algorithmic}")

Math:
    Math fragments (``$...$``) are passed to a ``render_math(source)``
    callable and its markup is spliced in verbatim. The default wraps the TeX
    source in ``\\(`` ``\\)`` delimiters for client-side MathJax/KaTeX.

Errors:
    Every failure raises a PseudotexError subclass carrying ``kind``; lexical
    and syntactic errors also carry the offset and a marked excerpt.
"""

from collections.abc import Mapping
from typing import Any, Protocol

from pseudotex.config import RenderOptions, parse_em_value, resolve_options
from pseudotex.errors import (
    ConfigError,
    ErrorKind,
    LexicalError,
    ParseError,
    PseudotexError,
    RenderError,
)
from pseudotex.lexer import Lexer
from pseudotex.location import SourceLocation
from pseudotex.math import MathRenderer, render_math_delimited
from pseudotex.nodes import (
    Algorithm,
    Algorithmic,
    Block,
    Bool,
    Branch,
    Call,
    Caption,
    Command,
    Comment,
    Font,
    Function,
    If,
    Loop,
    Math,
    Node,
    Ordinary,
    Root,
    Size,
    Special,
    Text,
)
from pseudotex.parser import Parser
from pseudotex.renderers.html import HtmlRenderer
from pseudotex.serialization import dump, to_dict, to_json
from pseudotex.tokens import Symbol, SymbolType

__version__ = "0.1.0"


class Surface(Protocol):
    """Anything markup can be attached to, e.g. a list of page fragments."""

    def append(self, markup: str, /) -> Any: ...


def parse(source: str) -> Root:
    """Parse pseudocode source into a typed AST.

    Args:
        source: Pseudocode source text

    Returns:
        Root AST node

    Raises:
        LexicalError: Unrecognizable input
        ParseError: Input does not match the grammar

    Example:
        >>> root = parse("\\\\begin{algorithm}\\\\caption{Sort}\\\\end{algorithm}")
        >>> root.children[0].caption.text.plain
        'Sort'
    """
    return Parser(source).parse()


def render_to_string(
    source: str,
    options: RenderOptions | Mapping[str, Any] | None = None,
    *,
    render_math: MathRenderer | None = None,
) -> str:
    """Parse and render pseudocode to an HTML string.

    Args:
        source: Pseudocode source text
        options: RenderOptions, a mapping such as ``{"lineNumber": True}``,
            or None for defaults
        render_math: Math collaborator (defaults to client-side delimiters)

    Returns:
        HTML string

    Raises:
        PseudotexError: Any lexical, syntactic, configuration or internal
            failure; no output is produced
    """
    if source is None:
        raise TypeError("source cannot be None")
    renderer = HtmlRenderer(options, render_math=render_math)
    return renderer.render(parse(source))


def render(
    source: str,
    surface: Surface,
    options: RenderOptions | Mapping[str, Any] | None = None,
    *,
    render_math: MathRenderer | None = None,
) -> str:
    """Render pseudocode and attach the markup to ``surface``.

    Thin wrapper over render_to_string(): the surface only receives markup
    when rendering succeeded.

    Args:
        source: Pseudocode source text
        surface: Object with an ``append(markup)`` method
        options: Render options (see render_to_string)
        render_math: Math collaborator

    Returns:
        The markup that was attached
    """
    if surface is None:
        raise TypeError("surface cannot be None")
    markup = render_to_string(source, options, render_math=render_math)
    surface.append(markup)
    return markup


class Pseudocode:
    """High-level pseudocode processor combining parser and renderer.

    Usage:
        >>> pc = Pseudocode(RenderOptions(line_number=True))
        >>> html = pc("\\\\begin{algorithmic} \\\\STATE x \\\\end{algorithmic}")
        >>> 'with-linenum' in html
        True

        >>> # Access the AST
        >>> root = pc.parse("\\\\begin{algorithmic} \\\\STATE x \\\\end{algorithmic}")
        >>> root.children[0].node_type
        'algorithmic'

    Thread Safety:
        Options are immutable and each call builds its own parser and render
        context. Safe to use one instance concurrently from many threads.

    """

    __slots__ = ("_renderer",)

    def __init__(
        self,
        options: RenderOptions | Mapping[str, Any] | None = None,
        *,
        render_math: MathRenderer | None = None,
    ) -> None:
        """Initialize processor.

        Args:
            options: RenderOptions, a mapping of option names, or None
            render_math: Math collaborator

        Raises:
            ConfigError: An option value is malformed
        """
        self._renderer = HtmlRenderer(resolve_options(options), render_math=render_math)

    @property
    def options(self) -> RenderOptions:
        return self._renderer.options

    def __call__(self, source: str) -> str:
        """Parse and render in one call."""
        return self._renderer.render(self.parse(source))

    def parse(self, source: str) -> Root:
        """Parse source into an AST."""
        return parse(source)

    def render(self, root: Root) -> str:
        """Render a previously parsed AST."""
        return self._renderer.render(root)


__all__ = [  # noqa: RUF022
    # Version
    "__version__",
    # Core API
    "parse",
    "render",
    "render_to_string",
    "Pseudocode",
    "Surface",
    # Nodes
    "Node",
    "Root",
    "Algorithm",
    "Algorithmic",
    "Caption",
    "Block",
    "If",
    "Branch",
    "Loop",
    "Function",
    "Command",
    "Comment",
    "Call",
    "Text",
    "Ordinary",
    "Math",
    "Special",
    "Bool",
    "Size",
    "Font",
    # Pipeline components
    "Lexer",
    "Parser",
    "HtmlRenderer",
    "Symbol",
    "SymbolType",
    # Configuration
    "RenderOptions",
    "parse_em_value",
    # Math collaborator
    "MathRenderer",
    "render_math_delimited",
    # Errors
    "ErrorKind",
    "PseudotexError",
    "LexicalError",
    "ParseError",
    "ConfigError",
    "RenderError",
    # Diagnostics
    "SourceLocation",
    "dump",
    "to_dict",
    "to_json",
]
