"""Typed AST nodes for pseudotex.

All AST nodes are frozen dataclasses with slots for:
- Type safety: IDE autocomplete, catch errors at dev time
- Immutability: Safe sharing across threads
- Pattern matching: match statements work naturally in the renderer

Each node class carries a ``node_type`` tag from the fixed vocabulary
(root, algorithm, caption, algorithmic, block, function, if, loop, command,
comment, call, text, ordinary, math, special, bool, size, font).

Node Hierarchy:
Node (base)
├── Root                  (environments)
├── Algorithm             (captions, algorithmic environments)
├── Caption
├── Algorithmic           (REQUIRE/ENSURE commands, blocks)
├── Block                 (statements)
│   ├── If ── Branch
│   ├── Loop
│   ├── Function
│   ├── Command
│   ├── Comment
│   └── Call
└── Text                  (text items, nested Text for brace groups)
    ├── Ordinary
    ├── Math
    ├── Special
    ├── Bool
    ├── Size
    └── Font

An empty block is represented as None wherever a block may appear.

Thread Safety:
All nodes are frozen (immutable) and safe to share across threads.

"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Literal, TypeAlias

from pseudotex.location import SourceLocation

# =============================================================================
# Base Node
# =============================================================================


@dataclass(frozen=True, slots=True)
class Node:
    """Base class for all AST nodes.

    All nodes track their source location for error messages and debugging.

    """

    node_type: ClassVar[str] = "node"

    location: SourceLocation


# =============================================================================
# Text Nodes
# =============================================================================


@dataclass(frozen=True, slots=True)
class Ordinary(Node):
    """Run of plain characters, including interior whitespace."""

    node_type: ClassVar[str] = "ordinary"

    content: str


@dataclass(frozen=True, slots=True)
class Math(Node):
    """Inline math, ``$...$``. Holds the raw TeX body without delimiters."""

    node_type: ClassVar[str] = "math"

    source: str


@dataclass(frozen=True, slots=True)
class Special(Node):
    """Escaped literal character such as ``\\&`` or the line break ``\\\\``.

    ``escape`` is the full escape sequence including the backslash.

    """

    node_type: ClassVar[str] = "special"

    escape: str


@dataclass(frozen=True, slots=True)
class Bool(Node):
    """Boolean keyword: AND, OR, NOT, TRUE, FALSE."""

    node_type: ClassVar[str] = "bool"

    keyword: str


@dataclass(frozen=True, slots=True)
class Size(Node):
    """Size switch such as ``\\large``; applies to the rest of its group."""

    node_type: ClassVar[str] = "size"

    name: str


@dataclass(frozen=True, slots=True)
class Font(Node):
    """Font switch: ``\\rm``, ``\\sl``, ``\\bf`` or ``\\it``."""

    node_type: ClassVar[str] = "font"

    name: str


@dataclass(frozen=True, slots=True)
class Text(Node):
    """Free text: a sequence of text items.

    A brace group in the source becomes a nested Text child, so the
    original grouping survives (font and size switches are scoped to it).
    Conditions of IF, ELIF, FOR and WHILE are Text nodes too.

    """

    node_type: ClassVar[str] = "text"

    children: tuple[TextItem, ...]

    @property
    def plain(self) -> str:
        """Concatenated ordinary content, recursing into groups.

        Math bodies are kept verbatim; special escapes contribute their
        literal character; switches contribute nothing.
        """
        parts: list[str] = []
        for child in self.children:
            match child:
                case Ordinary():
                    parts.append(child.content)
                case Text():
                    parts.append(child.plain)
                case Math():
                    parts.append(child.source)
                case Special():
                    parts.append(child.escape[1:] if child.escape != "\\\\" else "\n")
                case Bool():
                    parts.append(child.keyword.lower())
        return "".join(parts)


# PEP 695 type alias for items allowed inside Text
TextItem: TypeAlias = Ordinary | Math | Special | Bool | Size | Font | Text


# =============================================================================
# Statement Nodes
# =============================================================================


@dataclass(frozen=True, slots=True)
class Command(Node):
    """Single-keyword statement followed by free text.

    ``name`` is one of STATE, PRINT, RETURN (inside blocks) or REQUIRE,
    ENSURE (directly inside an algorithmic environment).

    """

    node_type: ClassVar[str] = "command"

    name: str
    text: Text


@dataclass(frozen=True, slots=True)
class Comment(Node):
    """``\\COMMENT{text}``."""

    node_type: ClassVar[str] = "comment"

    text: Text


@dataclass(frozen=True, slots=True)
class Call(Node):
    """``\\CALL{name}{args}``, rendered inline as ``name(args)``."""

    node_type: ClassVar[str] = "call"

    name: str
    args: Text


@dataclass(frozen=True, slots=True)
class Branch(Node):
    """One ``condition → body`` arm of an If."""

    node_type: ClassVar[str] = "branch"

    cond: Text
    body: Block | None


@dataclass(frozen=True, slots=True)
class If(Node):
    """Conditional with ordered branches and an optional else.

    ``branches[0]`` is the IF arm; the remaining branches are the ELIF arms
    in source order. ``has_else`` records whether ELSE was present, since
    an ELSE with an empty body leaves ``else_body`` as None.

    """

    node_type: ClassVar[str] = "if"

    branches: tuple[Branch, ...]
    has_else: bool = False
    else_body: Block | None = None

    @property
    def num_elif(self) -> int:
        """Number of ELIF arms."""
        return len(self.branches) - 1


@dataclass(frozen=True, slots=True)
class Loop(Node):
    """FOR or WHILE loop."""

    node_type: ClassVar[str] = "loop"

    keyword: Literal["FOR", "WHILE"]
    cond: Text
    body: Block | None


@dataclass(frozen=True, slots=True)
class Function(Node):
    """FUNCTION or PROCEDURE definition.

    Always carries a parameter text and a body (None when empty).

    """

    node_type: ClassVar[str] = "function"

    kind: Literal["FUNCTION", "PROCEDURE"]
    name: str
    params: Text
    body: Block | None


Statement: TypeAlias = If | Loop | Function | Command | Comment | Call


@dataclass(frozen=True, slots=True)
class Block(Node):
    """Non-empty run of statements; the unit of indentation."""

    node_type: ClassVar[str] = "block"

    children: tuple[Statement, ...]


# =============================================================================
# Environment Nodes
# =============================================================================


@dataclass(frozen=True, slots=True)
class Caption(Node):
    """``\\caption{text}`` inside an algorithm environment."""

    node_type: ClassVar[str] = "caption"

    text: Text


@dataclass(frozen=True, slots=True)
class Algorithmic(Node):
    """``\\begin{algorithmic} ... \\end{algorithmic}``.

    Children are REQUIRE/ENSURE commands and blocks, in source order.

    """

    node_type: ClassVar[str] = "algorithmic"

    children: tuple[Command | Block, ...]


@dataclass(frozen=True, slots=True)
class Algorithm(Node):
    """``\\begin{algorithm} ... \\end{algorithm}``.

    Children are captions and nested algorithmic environments.

    """

    node_type: ClassVar[str] = "algorithm"

    children: tuple[Caption | Algorithmic, ...]

    @property
    def caption(self) -> Caption | None:
        """The caption that is displayed: the last one, if any."""
        for child in reversed(self.children):
            if isinstance(child, Caption):
                return child
        return None


Environment: TypeAlias = Algorithm | Algorithmic


@dataclass(frozen=True, slots=True)
class Root(Node):
    """Document root: the top-level environments in source order."""

    node_type: ClassVar[str] = "root"

    children: tuple[Environment, ...]
