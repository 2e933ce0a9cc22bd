"""
AST handler for navigating and modifying the changelog token stream.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Iterator, List, Optional

from .document_model import (
    HEADING,
    LINK,
    LIST,
    LIST_ITEM,
    TEXT,
    MarkdownAST,
    extract_text,
    heading_level,
    is_heading,
    iter_tokens,
)

HeadingComparator = Callable[[str], int]
HeadingFactory = Callable[[], Dict[str, Any]]


class ASTHandler:
    """
    Handles searching and positional insertion of blocks in a MarkdownAST.

    Positions are indices into ``ast.blocks``. Inserting a block shifts the
    index of every block after it by one.
    """

    def __init__(self, ast: MarkdownAST):
        self.ast = ast

    @property
    def blocks(self) -> List[Dict[str, Any]]:
        return self.ast.blocks

    def find_or_create_heading(
        self,
        start: Optional[int],
        level: int,
        cmp: HeadingComparator,
        create: Optional[HeadingFactory] = None,
    ) -> Optional[int]:
        """
        Find a heading after ``start`` whose text compares equal, or create one.

        Headings are scanned in document order starting right after ``start``
        (or from the top of the document when ``start`` is None). A heading of
        ``level`` or shallower ends the search range. For every other heading
        ``cmp`` is called with the heading text: 0 is a match, a positive
        value means the wanted heading belongs before this one and a negative
        value continues the scan. When no match exists the heading built by
        ``create`` is inserted at the first valid position, or appended at
        the end of the document.

        Returns:
            Index of the matched or created heading, or None when nothing
            matched and no factory was given.
        """
        begin = 0 if start is None else start + 1

        for index in range(begin, len(self.blocks)):
            block = self.blocks[index]
            if not is_heading(block):
                continue

            if heading_level(block) <= level:
                return self._insert_created(index, create)

            value = cmp(extract_text(block))
            if value == 0:
                return index
            elif value > 0:
                return self._insert_created(index, create)

        return self._insert_created(len(self.blocks), create)

    def _insert_created(self, position: int, create: Optional[HeadingFactory]) -> Optional[int]:
        if create is None:
            return None
        self.insert_block(position, create())
        return position

    def section_range(self, index: int) -> range:
        """Indices of the blocks owned by the heading at ``index``."""
        level = heading_level(self.blocks[index])
        end = index + 1
        while end < len(self.blocks):
            block = self.blocks[end]
            if is_heading(block) and heading_level(block) <= level:
                break
            end += 1
        return range(index + 1, end)

    def iter_links(self, positions: range) -> Iterator[Dict[str, Any]]:
        """Yield every link token found in the blocks at ``positions``."""
        for index in positions:
            yield from iter_tokens(self.blocks[index], LINK)

    def insert_block(self, position: int, block: Dict[str, Any]) -> None:
        """Insert a block at the specified position."""
        if position < 0:
            position = 0
        elif position > len(self.blocks):
            position = len(self.blocks)

        self.blocks.insert(position, block)

    def list_after(self, index: int) -> Dict[str, Any]:
        """Return the list directly following the block at ``index``, inserting an empty one if needed."""
        following = index + 1
        if following < len(self.blocks) and self.blocks[following].get("type") == LIST:
            return self.blocks[following]

        new_list = self.create_list()
        self.insert_block(following, new_list)
        return new_list

    @staticmethod
    def append_item(list_token: Dict[str, Any], item: Dict[str, Any]) -> None:
        """Add ``item`` as the last child of a list.

        Items in a tight list hold ``block_text`` rather than paragraphs.
        """
        if not list_token.get("tight", True):
            for child in item["children"]:
                if child["type"] == "block_text":
                    child["type"] = "paragraph"
        list_token["children"].append(item)

    @staticmethod
    def create_text(text: str) -> Dict[str, Any]:
        return {"type": TEXT, "raw": text}

    @classmethod
    def create_heading(cls, level: int, text: str) -> Dict[str, Any]:
        """Create an ATX heading block."""
        return {
            "type": HEADING,
            "attrs": {"level": level},
            "style": "atx",
            "children": [cls.create_text(text)],
        }

    @staticmethod
    def create_list(bullet: str = "-") -> Dict[str, Any]:
        """Create an empty, tight bullet list."""
        return {
            "type": LIST,
            "children": [],
            "tight": True,
            "bullet": bullet,
            "attrs": {"depth": 0, "ordered": False},
        }

    @classmethod
    def create_link(cls, text: str, url: str) -> Dict[str, Any]:
        return {
            "type": LINK,
            "children": [cls.create_text(text)],
            "attrs": {"url": url},
        }

    @staticmethod
    def create_list_item(inlines: List[Dict[str, Any]]) -> Dict[str, Any]:
        """Create a list item whose single line is made of ``inlines``."""
        return {
            "type": LIST_ITEM,
            "children": [{"type": "block_text", "children": inlines}],
        }
