"""Recursive descent parser producing typed AST.

Consumes symbols from the Lexer with a single symbol of lookahead and
builds frozen AST nodes. There is one method per grammar production:

    <pseudo>      :== ( <algorithm> | <algorithmic> )*
    <algorithm>   :== \\begin{algorithm} ( <caption> | <algorithmic> )* \\end{algorithm}
    <caption>     :== \\caption{ <text> }
    <algorithmic> :== \\begin{algorithmic} ( <require> | <ensure> | <block> )* \\end{algorithmic}
    <block>       :== ( <control> | <function> | <statement> | <comment> | <call> )*
    <control>     :== <if> | <for> | <while>
    <if>          :== \\IF{<cond>} <block> ( \\ELIF{<cond>} <block> )* ( \\ELSE <block> )? \\ENDIF
    <for>         :== \\FOR{<cond>} <block> \\ENDFOR
    <while>       :== \\WHILE{<cond>} <block> \\ENDWHILE
    <function>    :== \\FUNCTION{<name>}{<params>} <block> \\ENDFUNCTION   (same for PROCEDURE)
    <statement>   :== ( \\STATE | \\RETURN | \\PRINT ) <text>
    <comment>     :== \\COMMENT{<text>}
    <call>        :== \\CALL{<name>}{<text>}
    <cond>        :== <text>
    <text>        :== ( <symbol> | { <text> } )*
    <symbol>      :== <ordinary> | <math> | <special> | <bool> | <size> | <font>

Errors are fail-fast: the first unmet expectation raises ParseError and no
partial tree is returned.

Thread Safety:
Parser instances are single-use and not thread-safe. Create one per parse
operation. The resulting AST is immutable and thread-safe.

"""

from __future__ import annotations

from pseudotex.errors import ParseError
from pseudotex.lexer import Lexer
from pseudotex.location import LineIndex, SourceLocation
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
    Environment,
    Font,
    Function,
    If,
    Loop,
    Math,
    Ordinary,
    Root,
    Size,
    Special,
    Statement,
    Text,
    TextItem,
)
from pseudotex.tokens import SymbolType
from pseudotex.utils.logger import get_logger

logger = get_logger(__name__)

PRECONDITION_COMMANDS = frozenset({"REQUIRE", "ENSURE"})
STATEMENT_COMMANDS = frozenset({"STATE", "PRINT", "RETURN"})
FUNCTION_KINDS = frozenset({"FUNCTION", "PROCEDURE"})
LOOP_KINDS = frozenset({"FOR", "WHILE"})

BOOL_KEYWORDS = frozenset({"AND", "OR", "NOT", "TRUE", "FALSE"})
SIZE_KEYWORDS = frozenset(
    {
        "tiny",
        "scriptsize",
        "footnotesize",
        "small",
        "normalsize",
        "large",
        "Large",
        "LARGE",
        "huge",
        "Huge",
    }
)
FONT_KEYWORDS = frozenset({"rm", "sl", "bf", "it"})


class Parser:
    """Predictive recursive descent parser for pseudotex markup.

    Usage:
        >>> root = Parser("\\\\begin{algorithmic} \\\\STATE x \\\\end{algorithmic}").parse()
        >>> root.children[0].node_type
        'algorithmic'

    Thread Safety:
        Parser instances are single-use and not thread-safe. Create one per
        parse operation. The resulting AST is immutable and thread-safe.

    """

    __slots__ = ("_source", "_lexer", "_lines")

    def __init__(self, source: str) -> None:
        """Initialize parser with source text.

        Args:
            source: Pseudocode source text

        Raises:
            LexicalError: The first symbol of the source is unrecognizable
        """
        self._source = source
        self._lines = LineIndex(source)
        self._lexer = Lexer(source)

    def parse(self) -> Root:
        """Parse the whole source into a Root node.

        Returns:
            Root node holding the top-level environments

        Raises:
            LexicalError: Unrecognizable input
            ParseError: Input does not match the grammar
        """
        lexer = self._lexer
        environments: list[Environment] = []

        while (opened := self._accept_environment()) is not None:
            name, start = opened
            if name == "algorithm":
                env: Environment = self._parse_algorithm(start)
            elif name == "algorithmic":
                env = self._parse_algorithmic(start)
            else:
                raise self._error(f"Unexpected environment `{name}`", start)
            self._close_environment(name)
            environments.append(env)

        lexer.expect(SymbolType.EOF)
        logger.debug("Parsed %d environment(s)", len(environments))
        return Root(location=self._loc(0), children=tuple(environments))

    # =========================================================================
    # Environments
    # =========================================================================

    def _accept_environment(self) -> tuple[str, int] | None:
        """Accept ``\\begin{name}``; return (name, start offset) or None."""
        lexer = self._lexer
        start = lexer.current().offset
        if lexer.accept(SymbolType.FUNC, "begin") is None:
            return None
        lexer.expect(SymbolType.OPEN)
        name = lexer.expect(SymbolType.ORDINARY)
        lexer.expect(SymbolType.CLOSE)
        return name, start

    def _close_environment(self, name: str) -> None:
        """Require ``\\end{name}`` with the same name."""
        lexer = self._lexer
        lexer.expect(SymbolType.FUNC, "end")
        lexer.expect(SymbolType.OPEN)
        lexer.expect(SymbolType.ORDINARY, name)
        lexer.expect(SymbolType.CLOSE)

    def _parse_algorithm(self, start: int) -> Algorithm:
        children: list[Caption | Algorithmic] = []
        while True:
            opened = self._accept_environment()
            if opened is not None:
                name, env_start = opened
                if name != "algorithmic":
                    raise self._error(
                        f"Unexpected environment `{name}` inside algorithm", env_start
                    )
                children.append(self._parse_algorithmic(env_start))
                self._close_environment(name)
                continue

            caption = self._parse_caption()
            if caption is not None:
                children.append(caption)
                continue

            break
        return Algorithm(location=self._loc(start), children=tuple(children))

    def _parse_algorithmic(self, start: int) -> Algorithmic:
        children: list[Command | Block] = []
        while True:
            node: Command | Block | None = self._parse_command(PRECONDITION_COMMANDS)
            if node is None:
                node = self._parse_block()
            if node is None:
                break
            children.append(node)
        return Algorithmic(location=self._loc(start), children=tuple(children))

    def _parse_caption(self) -> Caption | None:
        lexer = self._lexer
        start = lexer.current().offset
        if lexer.accept(SymbolType.FUNC, "caption") is None:
            return None
        lexer.expect(SymbolType.OPEN)
        text = self._parse_text()
        lexer.expect(SymbolType.CLOSE)
        return Caption(location=self._loc(start), text=text)

    # =========================================================================
    # Blocks and statements
    # =========================================================================

    def _parse_block(self) -> Block | None:
        """Parse a maximal run of statements; None when there are none."""
        start = self._lexer.current().offset
        statements: list[Statement] = []
        while True:
            node = (
                self._parse_control()
                or self._parse_function()
                or self._parse_command(STATEMENT_COMMANDS)
                or self._parse_comment()
                or self._parse_call()
            )
            if node is None:
                break
            statements.append(node)

        if not statements:
            return None
        return Block(location=self._loc(start), children=tuple(statements))

    def _parse_control(self) -> If | Loop | None:
        return self._parse_if() or self._parse_loop()

    def _parse_if(self) -> If | None:
        lexer = self._lexer
        start = lexer.current().offset
        if lexer.accept(SymbolType.FUNC, "IF") is None:
            return None

        branches = [self._parse_branch(start)]

        while True:
            elif_start = lexer.current().offset
            if lexer.accept(SymbolType.FUNC, "ELIF") is None:
                break
            branches.append(self._parse_branch(elif_start))

        has_else = lexer.accept(SymbolType.FUNC, "ELSE") is not None
        else_body = self._parse_block() if has_else else None

        lexer.expect(SymbolType.FUNC, "ENDIF")
        return If(
            location=self._loc(start),
            branches=tuple(branches),
            has_else=has_else,
            else_body=else_body,
        )

    def _parse_branch(self, start: int) -> Branch:
        """Parse ``{<cond>} <block>`` after IF or ELIF."""
        cond = self._parse_braced_text()
        body = self._parse_block()
        return Branch(location=self._loc(start), cond=cond, body=body)

    def _parse_loop(self) -> Loop | None:
        lexer = self._lexer
        start = lexer.current().offset
        keyword = lexer.accept(SymbolType.FUNC, LOOP_KINDS)
        if keyword is None:
            return None

        cond = self._parse_braced_text()
        body = self._parse_block()
        lexer.expect(SymbolType.FUNC, f"END{keyword}")
        return Loop(
            location=self._loc(start),
            keyword=keyword,  # type: ignore[arg-type]
            cond=cond,
            body=body,
        )

    def _parse_function(self) -> Function | None:
        lexer = self._lexer
        start = lexer.current().offset
        kind = lexer.accept(SymbolType.FUNC, FUNCTION_KINDS)
        if kind is None:
            return None

        lexer.expect(SymbolType.OPEN)
        name = lexer.expect(SymbolType.ORDINARY)
        lexer.expect(SymbolType.CLOSE)
        params = self._parse_braced_text()
        body = self._parse_block()
        lexer.expect(SymbolType.FUNC, f"END{kind}")
        return Function(
            location=self._loc(start),
            kind=kind,  # type: ignore[arg-type]
            name=name,
            params=params,
            body=body,
        )

    def _parse_command(self, names: frozenset[str]) -> Command | None:
        lexer = self._lexer
        start = lexer.current().offset
        name = lexer.accept(SymbolType.FUNC, names)
        if name is None:
            return None
        text = self._parse_text()
        return Command(location=self._loc(start), name=name, text=text)

    def _parse_comment(self) -> Comment | None:
        lexer = self._lexer
        start = lexer.current().offset
        if lexer.accept(SymbolType.FUNC, "COMMENT") is None:
            return None
        text = self._parse_braced_text()
        return Comment(location=self._loc(start), text=text)

    def _parse_call(self) -> Call | None:
        lexer = self._lexer
        start = lexer.current().offset
        if lexer.accept(SymbolType.FUNC, "CALL") is None:
            return None

        lexer.expect(SymbolType.OPEN)
        name = lexer.expect(SymbolType.ORDINARY)
        lexer.expect(SymbolType.CLOSE)
        args = self._parse_braced_text()
        return Call(location=self._loc(start), name=name, args=args)

    # =========================================================================
    # Text
    # =========================================================================

    def _parse_braced_text(self) -> Text:
        """Parse ``{ <text> }``."""
        lexer = self._lexer
        lexer.expect(SymbolType.OPEN)
        text = self._parse_text()
        lexer.expect(SymbolType.CLOSE)
        return text

    def _parse_text(self) -> Text:
        """Parse zero or more symbols and brace groups.

        A brace group becomes a nested Text child rather than being
        flattened into the enclosing text.
        """
        lexer = self._lexer
        start = lexer.current().offset
        children: list[TextItem] = []
        while True:
            symbol = self._parse_symbol()
            if symbol is not None:
                children.append(symbol)
                continue

            if lexer.accept(SymbolType.OPEN) is not None:
                children.append(self._parse_text())
                lexer.expect(SymbolType.CLOSE)
                continue

            break
        return Text(location=self._loc(start), children=tuple(children))

    def _parse_symbol(self) -> TextItem | None:
        """Parse one text symbol; None means no symbol here, not an error."""
        lexer = self._lexer
        start = lexer.current().offset

        if (text := lexer.accept(SymbolType.ORDINARY)) is not None:
            return Ordinary(location=self._loc(start), content=text)
        if (text := lexer.accept(SymbolType.MATH)) is not None:
            return Math(location=self._loc(start), source=text)
        if (text := lexer.accept(SymbolType.SPECIAL)) is not None:
            return Special(location=self._loc(start), escape=text)
        if (text := lexer.accept(SymbolType.FUNC, BOOL_KEYWORDS)) is not None:
            return Bool(location=self._loc(start), keyword=text)
        if (text := lexer.accept(SymbolType.FUNC, SIZE_KEYWORDS)) is not None:
            return Size(location=self._loc(start), name=text)
        if (text := lexer.accept(SymbolType.FUNC, FONT_KEYWORDS)) is not None:
            return Font(location=self._loc(start), name=text)
        return None

    # =========================================================================
    # Helpers
    # =========================================================================

    def _loc(self, start: int) -> SourceLocation:
        """Location spanning from ``start`` to the last consumed symbol."""
        return self._lines.location(start, max(start, self._lexer.last_end))

    def _error(self, message: str, offset: int) -> ParseError:
        return ParseError(message, offset, self._source)
