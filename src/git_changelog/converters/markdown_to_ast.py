"""
Converter from markdown text to the changelog token stream.

Parsing is delegated to mistune with no renderer attached, which yields the
block token tree directly.
"""

from __future__ import annotations

from pathlib import Path
from typing import Union

import mistune

from ..core.document_model import MarkdownAST


class MarkdownToASTConverter:
    """Converts markdown text or files to a MarkdownAST."""

    def __init__(self, encoding: str = "utf-8"):
        self.encoding = encoding
        self._markdown = mistune.create_markdown(renderer=None)

    def convert(self, text: str) -> MarkdownAST:
        """Parse markdown text."""
        tokens, state = self._markdown.parse(text)
        return MarkdownAST.from_tokens(tokens, state.env)

    def convert_file(self, path: Union[str, Path]) -> MarkdownAST:
        """Parse a markdown file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Markdown file not found: {path}")
        return self.convert(path.read_text(encoding=self.encoding))
