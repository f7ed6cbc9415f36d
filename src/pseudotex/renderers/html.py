"""HTML renderer using StringBuilder pattern.

Walks the typed AST and emits nested, line-oriented markup: one container
per environment, one indented container per block, one ``<p>`` per logical
line holding keyword, function-name, text and math runs.

Thread Safety:
All per-render state is encapsulated in RenderContext, created fresh for each
render() call. Multiple threads can safely share a single HtmlRenderer instance
and call render() concurrently without synchronization.

Output shape:
    <div class="pseudo">
    <div class="ps-algorithm with-caption">
    <p class="ps-line" ...><span class="ps-line-content">
    <span class="ps-keyword">Algorithm 1</span>
    ...
    <div class="ps-algorithmic">
    <div class="ps-block ps-outer-block" style="margin-left:1.4em;">
    <p class="ps-line ps-code">
    <span class="ps-line-content">
    ...

Calls and comments are inline: they join the open line, and start a new
line only when none is open (for example as the first statement of a
block).
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from pseudotex.config import RenderOptions, resolve_options
from pseudotex.errors import RenderError
from pseudotex.math import MathRenderer, render_math_delimited
from pseudotex.nodes import (
    Algorithm,
    Algorithmic,
    Block,
    Bool,
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
from pseudotex.serialization import dump
from pseudotex.stringbuilder import StringBuilder
from pseudotex.utils.logger import get_logger
from pseudotex.utils.text import escape_html, format_em

logger = get_logger(__name__)

# Keyword shown before a command's text; STATE shows none
COMMAND_LABELS: dict[str, str] = {
    "STATE": "",
    "ENSURE": "Ensure:",
    "REQUIRE": "Require:",
    "PRINT": "print",
    "RETURN": "return",
}

SPECIAL_REPLACEMENTS: dict[str, str] = {
    "\\\\": "<br/>",
    "\\{": "{",
    "\\}": "}",
    "\\$": "$",
    "\\&": "&",
    "\\#": "#",
    "\\%": "%",
    "\\_": "_",
}

# Horizontal gap between a line number and the block margin, in em
LINENUM_GAP = 0.3


@dataclass(slots=True)
class RenderContext:
    """Per-render mutable state.

    Created fresh for each render, ensuring thread safety when sharing
    HtmlRenderer instances across threads.

    Attributes:
        sb: Output fragments
        depth: Current block nesting depth (0 outside any block)
        open_line: Whether a ``<p>`` line is currently open
        text_buf: Pending text fragments, coalesced on flush
        line_count: Code lines emitted in the current algorithmic environment
        caption_count: Captioned algorithms seen so far in this render
    """

    sb: StringBuilder = field(default_factory=StringBuilder)
    depth: int = 0
    open_line: bool = False
    text_buf: list[str] = field(default_factory=list)
    line_count: int = 0
    caption_count: int = 0


class HtmlRenderer:
    """Render a pseudotex AST to HTML.

    Usage:
        >>> from pseudotex.parser import Parser
        >>> root = Parser("\\\\begin{algorithmic}\\\\STATE x\\\\end{algorithmic}").parse()
        >>> html = HtmlRenderer().render(root)
        >>> html.startswith('<div class="pseudo">')
        True

    Thread Safety:
        Multiple threads can safely share a single HtmlRenderer instance.
        Each render() call creates an independent RenderContext.
    """

    __slots__ = ("_options", "_render_math")

    def __init__(
        self,
        options: RenderOptions | Mapping[str, Any] | None = None,
        *,
        render_math: MathRenderer | None = None,
    ) -> None:
        """Initialize renderer.

        Args:
            options: RenderOptions, a mapping of option names, or None
            render_math: Math collaborator; defaults to client-side delimiters

        Raises:
            ConfigError: An option value is malformed
        """
        self._options = resolve_options(options)
        self._render_math = render_math or render_math_delimited

    @property
    def options(self) -> RenderOptions:
        return self._options

    def render(self, root: Root) -> str:
        """Render the AST to an HTML string.

        Args:
            root: Root node from Parser.parse()

        Returns:
            HTML string, fragments separated by newlines

        Raises:
            RenderError: The tree holds a node the renderer does not know
        """
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Rendering tree:\n%s", dump(root))

        ctx = RenderContext()
        self._render_node(root, ctx)
        return ctx.sb.build("\n")

    # =========================================================================
    # Dispatch
    # =========================================================================

    def _render_node(self, node: Node, ctx: RenderContext) -> None:
        match node:
            case Root():
                self._begin_div("pseudo", ctx)
                self._render_children(node.children, ctx)
                self._end_div(ctx)
            case Algorithm():
                self._render_algorithm(node, ctx)
            case Caption():
                self._render_caption(node, ctx)
            case Algorithmic():
                self._render_algorithmic(node, ctx)
            case Block():
                self._begin_block(ctx)
                self._render_children(node.children, ctx)
                self._end_block(ctx)
            case Function():
                self._render_function(node, ctx)
            case If():
                self._render_if(node, ctx)
            case Loop():
                self._render_loop(node, ctx)
            case Command():
                self._render_command(node, ctx)
            case Comment():
                self._render_comment(node, ctx)
            case Call():
                self._render_call(node, ctx)
            case Text():
                self._render_text(node, ctx)
            case Ordinary():
                self._type_text(escape_html(node.content), ctx)
            case Math():
                self._type_math(self._render_math(node.source), ctx)
            case Special():
                self._type_text(SPECIAL_REPLACEMENTS[node.escape], ctx)
            case Bool():
                self._type_keyword(node.keyword.lower(), ctx)
            case _:
                raise RenderError(f"Unexpected node of type {type(node).__name__}")

    def _render_children(self, children: tuple[Node, ...], ctx: RenderContext) -> None:
        for child in children:
            self._render_node(child, ctx)

    def _render_optional_block(self, block: Block | None, ctx: RenderContext) -> None:
        if block is not None:
            self._render_node(block, ctx)

    # =========================================================================
    # Environments
    # =========================================================================

    def _render_algorithm(self, node: Algorithm, ctx: RenderContext) -> None:
        caption = node.caption
        class_name = "ps-algorithm"
        if caption is not None:
            ctx.caption_count += 1
            class_name += " with-caption"

        self._begin_div(class_name, ctx)
        if caption is not None:
            self._render_caption(caption, ctx)
        for child in node.children:
            if isinstance(child, Caption):
                continue
            self._render_node(child, ctx)
        self._end_div(ctx)

    def _render_caption(self, node: Caption, ctx: RenderContext) -> None:
        self._new_line(ctx)
        self._type_keyword(f"Algorithm {ctx.caption_count}", ctx)
        self._render_text(node.text, ctx)
        self._close_line(ctx)

    def _render_algorithmic(self, node: Algorithmic, ctx: RenderContext) -> None:
        class_name = "ps-algorithmic"
        if self._options.line_number:
            class_name += " with-linenum"
            ctx.line_count = 0
        self._begin_div(class_name, ctx)
        self._render_children(node.children, ctx)
        self._end_div(ctx)

    # =========================================================================
    # Statements
    # =========================================================================

    def _render_function(self, node: Function, ctx: RenderContext) -> None:
        # function name(params)
        # ...
        # end function
        kind = node.kind.lower()
        self._new_line(ctx)
        self._type_keyword(kind, ctx)
        self._type_func_name(node.name, ctx)
        self._type_text("(", ctx)
        self._render_text(node.params, ctx)
        self._type_text(")", ctx)

        self._render_optional_block(node.body, ctx)

        self._new_line(ctx)
        self._type_keyword(f"end {kind}", ctx)

    def _render_if(self, node: If, ctx: RenderContext) -> None:
        # ELIF arms render exactly like the IF arm
        for branch in node.branches:
            self._new_line(ctx)
            self._type_keyword("if", ctx)
            self._render_text(branch.cond, ctx)
            self._type_keyword("then", ctx)
            self._render_optional_block(branch.body, ctx)

        if node.has_else:
            self._new_line(ctx)
            self._type_keyword("else", ctx)
            self._render_optional_block(node.else_body, ctx)

        self._new_line(ctx)
        self._type_keyword("end if", ctx)

    def _render_loop(self, node: Loop, ctx: RenderContext) -> None:
        keyword = node.keyword.lower()
        self._new_line(ctx)
        self._type_keyword(keyword, ctx)
        self._render_text(node.cond, ctx)
        self._type_keyword("do", ctx)

        self._render_optional_block(node.body, ctx)

        self._new_line(ctx)
        self._type_keyword(f"end {keyword}", ctx)

    def _render_command(self, node: Command, ctx: RenderContext) -> None:
        label = COMMAND_LABELS.get(node.name)
        if label is None:
            raise RenderError(f"Unexpected command {node.name}")
        self._new_line(ctx)
        if label:
            self._type_keyword(label, ctx)
        self._render_text(node.text, ctx)

    def _render_call(self, node: Call, ctx: RenderContext) -> None:
        """Render ``name(args)`` inline; starts a line only when none is open."""
        self._ensure_line(ctx)
        self._type_func_name(node.name, ctx)
        self._type_text("(", ctx)
        self._render_text(node.args, ctx)
        self._type_text(")", ctx)

    def _render_comment(self, node: Comment, ctx: RenderContext) -> None:
        """Render the comment inline; starts a line only when none is open."""
        self._ensure_line(ctx)
        self._flush_text(ctx)
        ctx.sb.append('<span class="ps-comment">')
        self._type_text(escape_html(self._options.comment_symbol) + " ", ctx)
        self._render_text(node.text, ctx)
        self._flush_text(ctx)
        ctx.sb.append("</span>")

    # =========================================================================
    # Text
    # =========================================================================

    def _render_text(self, node: Text, ctx: RenderContext) -> None:
        """Render a text group; font and size switches last until its end."""
        self._flush_text(ctx)
        ctx.sb.append("<span>")
        switches = 0
        for child in node.children:
            match child:
                case Font():
                    self._flush_text(ctx)
                    ctx.sb.append(f'<span class="ps-font-{child.name}">')
                    switches += 1
                case Size():
                    self._flush_text(ctx)
                    ctx.sb.append(f'<span class="ps-size-{child.name}">')
                    switches += 1
                case _:
                    self._render_node(child, ctx)
        self._flush_text(ctx)
        for _ in range(switches):
            ctx.sb.append("</span>")
        ctx.sb.append("</span>")

    # =========================================================================
    # Primitives
    # =========================================================================

    def _begin_div(self, class_name: str, ctx: RenderContext) -> None:
        ctx.sb.append(f'<div class="{class_name}">')

    def _end_div(self, ctx: RenderContext) -> None:
        self._close_line(ctx)
        ctx.sb.append("</div>")

    def _begin_block(self, ctx: RenderContext) -> None:
        self._close_line(ctx)
        indent = format_em(self._options.indent_size)
        ctx.sb.append(f'<div class="ps-block ps-outer-block" style="margin-left:{indent}em;">')
        ctx.depth += 1

    def _end_block(self, ctx: RenderContext) -> None:
        self._close_line(ctx)
        ctx.sb.append("</div>")
        ctx.depth -= 1

    def _new_line(self, ctx: RenderContext) -> None:
        """Start a logical line, closing any line still open."""
        self._close_line(ctx)
        ctx.open_line = True
        sb = ctx.sb
        options = self._options

        if ctx.depth > 0:
            # Code line, e.g. \STATE
            ctx.line_count += 1
            sb.append('<p class="ps-line ps-code">')
            if options.line_number:
                offset = format_em((ctx.depth - 1) * (options.indent_size + LINENUM_GAP))
                punc = escape_html(options.line_number_punc)
                sb.append(
                    f'<span class="ps-linenum" style="left:-{offset}em;">'
                    f"{ctx.line_count}{punc}</span>"
                )
            sb.append('<span class="ps-line-content">')
        else:
            # Pre-condition line, e.g. \REQUIRE, or a caption
            indent = format_em(options.indent_size)
            sb.append(f'<p class="ps-line" style="text-indent:-{indent}em;padding-left:{indent}em;">')
            sb.append('<span class="ps-line-content">')

    def _ensure_line(self, ctx: RenderContext) -> None:
        if not ctx.open_line:
            self._new_line(ctx)

    def _close_line(self, ctx: RenderContext) -> None:
        if not ctx.open_line:
            return
        self._flush_text(ctx)
        ctx.sb.append("</span>")
        ctx.sb.append("</p>")
        ctx.open_line = False

    def _type_keyword(self, keyword: str, ctx: RenderContext) -> None:
        self._flush_text(ctx)
        ctx.sb.append(f'<span class="ps-keyword">{escape_html(keyword)}</span>')

    def _type_func_name(self, name: str, ctx: RenderContext) -> None:
        self._flush_text(ctx)
        ctx.sb.append(f'<span class="ps-funcname">{escape_html(name)}</span>')

    def _type_math(self, markup: str, ctx: RenderContext) -> None:
        self._flush_text(ctx)
        ctx.sb.append(markup)

    def _type_text(self, text: str, ctx: RenderContext) -> None:
        ctx.text_buf.append(text)

    def _flush_text(self, ctx: RenderContext) -> None:
        if ctx.text_buf:
            ctx.sb.append("".join(ctx.text_buf))
            ctx.text_buf.clear()
