"""Conversions between rich-text trees and plain text.

Rich text is stored as a Lexical-style JSON tree::

    {"root": {"type": "root", "children": [<block>, ...], ...}}

Only paragraphs and h1-h3 headings survive a trip through a spreadsheet.
The two directions are intentionally not exact inverses.
"""

import re
from typing import Any

_BLOCK_SEPARATOR = re.compile(r"\n{2,}")
_HEADING_PREFIXES = (("### ", 3), ("## ", 2), ("# ", 1))


def _extract_text(node: Any) -> str:
    """Depth-first concatenation of the text leaves under a node."""
    if not isinstance(node, dict):
        return ""
    if node.get("type") == "text" and isinstance(node.get("text"), str):
        return node["text"]
    children = node.get("children")
    if isinstance(children, list):
        return "".join(_extract_text(child) for child in children)
    return ""


def richtext_to_plain(tree: Any) -> str:
    """Flatten a rich-text tree to plain text, one block per paragraph.

    Blocks that contain no text are dropped. Anything that is not a tree
    yields an empty string.
    """
    if not isinstance(tree, dict):
        return ""
    root = tree.get("root")
    if not isinstance(root, dict) or not isinstance(root.get("children"), list):
        return ""

    blocks = [_extract_text(node) for node in root["children"]]
    return "\n\n".join(block for block in blocks if block)


def _text_node(text: str) -> dict[str, Any]:
    return {"type": "text", "text": text, "format": 0, "version": 1}


def _block(node_type: str, text: str, **extra: Any) -> dict[str, Any]:
    return {
        "type": node_type,
        **extra,
        "format": "",
        "indent": 0,
        "version": 1,
        "children": [_text_node(text)] if text else [],
        "direction": "ltr",
    }


def _root(children: list[dict[str, Any]]) -> dict[str, Any]:
    return {
        "root": {
            "type": "root",
            "format": "",
            "indent": 0,
            "version": 1,
            "children": children,
            "direction": "ltr",
        }
    }


def empty_richtext() -> dict[str, Any]:
    """Return a valid tree with no blocks."""
    return _root([])


def plain_to_richtext(text: Any) -> dict[str, Any]:
    """Build a rich-text tree from plain text with optional ``#`` headings.

    Blocks are separated by two or more newlines. A block starting with
    ``# ``, ``## `` or ``### `` becomes a heading; everything else becomes a
    paragraph with single newlines folded into spaces.
    """
    if not isinstance(text, str) or not text.strip():
        return empty_richtext()

    normalized = text.replace("\r\n", "\n").strip()
    children: list[dict[str, Any]] = []
    for raw_block in _BLOCK_SEPARATOR.split(normalized):
        block = raw_block.strip()
        if not block:
            continue

        for prefix, level in _HEADING_PREFIXES:
            if block.startswith(prefix):
                heading = block[len(prefix):].replace("\n", " ").strip()
                children.append(_block("heading", heading, tag=f"h{level}"))
                break
        else:
            children.append(_block("paragraph", block.replace("\n", " ")))

    return _root(children)
