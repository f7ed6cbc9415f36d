"""AST serialization for diagnostics.

Projects typed AST nodes onto a generic ``{type, value, children}`` tree.
Useful for:
- Inspecting parse results in logs and tests
- Handing the tree to tools that expect a uniform node shape
- Caching parse results as JSON

The generic view keeps the classic flat layout for conditionals: an ``if``
node's children are ``[cond0, block0, cond1, block1, ..., else_block?]``
with ``value = {"numElif": n, "hasElse": bool}``. Empty bodies appear as
``block`` nodes without children.

Output is deterministic (sorted keys) for cache-key stability.

Example:
    from pseudotex import parse
    from pseudotex.serialization import dump, to_json

    root = parse("\\\\begin{algorithmic} \\\\STATE x \\\\end{algorithmic}")
    print(dump(root))
    # <root>
    #   <algorithmic>
    #     <block>
    #       <command> (STATE)
    #         <text>
    #           <ordinary> (x )

Thread Safety:
    All functions are pure and safe to call from any thread.

"""

from __future__ import annotations

import json
from typing import Any

from pseudotex.location import SourceLocation
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


def to_dict(node: Node, *, include_location: bool = False) -> dict[str, Any]:
    """Convert an AST node to a generic ``{type, value, children}`` dict.

    Args:
        node: Any pseudotex AST node
        include_location: Add a ``location`` entry with offsets and line/column

    Returns:
        JSON-compatible dict
    """
    value, children = _project(node)
    result: dict[str, Any] = {
        "type": node.node_type,
        "value": value,
        "children": [
            _empty_block(node.location, include_location)
            if child is None
            else to_dict(child, include_location=include_location)
            for child in children
        ],
    }
    if include_location:
        result["location"] = _location_dict(node.location)
    return result


def to_json(node: Node, *, indent: int | None = None, include_location: bool = False) -> str:
    """Serialize an AST node to a JSON string.

    Args:
        node: Any pseudotex AST node
        indent: JSON indentation (None for compact)
        include_location: Add location entries

    Returns:
        JSON string with sorted keys
    """
    return json.dumps(
        to_dict(node, include_location=include_location),
        indent=indent,
        sort_keys=True,
        ensure_ascii=False,
    )


def dump(node: Node, level: int = 0) -> str:
    """Render an indented, human-readable outline of the tree.

    Each node is one line: ``<type>`` followed by ``(value)`` when it has
    a value; children are indented two spaces per level.
    """
    lines: list[str] = []
    _dump_into(to_dict(node), level, lines)
    return "\n".join(lines)


def _dump_into(data: dict[str, Any], level: int, lines: list[str]) -> None:
    line = "  " * level + f"<{data['type']}>"
    value = data["value"]
    if value:
        if isinstance(value, dict):
            value = ", ".join(f"{k}: {v}" for k, v in value.items())
        line += f" ({value})"
    lines.append(line)
    for child in data["children"]:
        _dump_into(child, level + 1, lines)


def _project(node: Node) -> tuple[Any, list[Node | None]]:
    """Return (value, children) of the generic view of ``node``."""
    match node:
        case Root() | Algorithm() | Algorithmic() | Block() | Text():
            return None, list(node.children)
        case Caption() | Comment():
            return None, [node.text]
        case Command():
            return node.name, [node.text]
        case Call():
            return node.name, [node.args]
        case Loop():
            return node.keyword, [node.cond, node.body]
        case Function():
            return {"type": node.kind, "name": node.name}, [node.params, node.body]
        case If():
            children: list[Node | None] = []
            for branch in node.branches:
                children.append(branch.cond)
                children.append(branch.body)
            if node.has_else:
                children.append(node.else_body)
            return {"numElif": node.num_elif, "hasElse": node.has_else}, children
        case Ordinary():
            return node.content, []
        case Math():
            return node.source, []
        case Special():
            return node.escape, []
        case Bool():
            return node.keyword, []
        case Size() | Font():
            return node.name, []
    raise TypeError(f"Cannot serialize node of type {type(node).__name__}")


def _empty_block(location: SourceLocation, include_location: bool) -> dict[str, Any]:
    result: dict[str, Any] = {"type": Block.node_type, "value": None, "children": []}
    if include_location:
        result["location"] = _location_dict(location)
    return result


def _location_dict(location: SourceLocation) -> dict[str, int]:
    return {
        "lineno": location.lineno,
        "col_offset": location.col_offset,
        "offset": location.offset,
        "end_offset": location.end_offset,
    }
