"""
Document model for a markdown changelog.

The document is held as the flat list of top-level mistune block tokens. A
heading does not contain its section; a heading of level L owns every
following block up to the next heading of level L or shallower.
"""

from __future__ import annotations

from typing import Any, Dict, Iterator, List, Optional

from pydantic import BaseModel, Field

HEADING = "heading"
LIST = "list"
LIST_ITEM = "list_item"
LINK = "link"
TEXT = "text"
BLANK_LINE = "blank_line"


class MarkdownAST(BaseModel):
    """Wrapper for the mistune token stream of a markdown document."""

    blocks: List[Dict[str, Any]] = Field(default_factory=list)
    ref_links: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_tokens(cls, tokens: List[Dict[str, Any]], env: Optional[Dict[str, Any]] = None) -> MarkdownAST:
        """Create a MarkdownAST from parsed mistune tokens."""
        blocks = [token for token in tokens if token.get("type") != BLANK_LINE]
        ref_links = dict((env or {}).get("ref_links", {}))
        return cls(blocks=blocks, ref_links=ref_links)

    def headings(self, level: Optional[int] = None) -> Iterator[Dict[str, Any]]:
        """Iterate over top-level headings, optionally filtered by level."""
        for block in self.blocks:
            if is_heading(block) and (level is None or heading_level(block) == level):
                yield block


def is_heading(token: Dict[str, Any]) -> bool:
    return token.get("type") == HEADING


def heading_level(token: Dict[str, Any]) -> int:
    return token.get("attrs", {}).get("level", 0)


def extract_text(token: Dict[str, Any]) -> str:
    """Concatenate the literal text of every descendant in document order."""
    parts = []

    def walk(node: Dict[str, Any]) -> None:
        if "raw" in node and node.get("type") in (TEXT, "codespan", "inline_html"):
            parts.append(node["raw"])
        elif node.get("type") == "softbreak":
            parts.append(" ")
        for child in node.get("children", []):
            walk(child)

    for child in token.get("children", []):
        walk(child)
    return "".join(parts)


def iter_tokens(token: Dict[str, Any], token_type: str) -> Iterator[Dict[str, Any]]:
    """Depth-first iteration over ``token`` and its descendants of the given type.

    The children of a matching token are not visited.
    """
    if token.get("type") == token_type:
        yield token
        return
    for child in token.get("children", []):
        yield from iter_tokens(child, token_type)
