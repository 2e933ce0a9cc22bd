"""
Converter from the changelog token stream back to markdown text.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Union

from mistune import BlockState
from mistune.renderers.markdown import MarkdownRenderer

from ..core.document_model import MarkdownAST


class ChangelogRenderer(MarkdownRenderer):
    """Markdown renderer that leaves exactly one blank line after top-level lists and HTML blocks."""

    def list(self, token: Dict[str, Any], state: BlockState) -> str:
        text = super().list(token, state)
        if token.get("parent"):
            return text
        return text.rstrip("\n") + "\n\n"

    def block_html(self, token: Dict[str, Any], state: BlockState) -> str:
        return token["raw"].rstrip("\n") + "\n\n"


class ASTToMarkdownConverter:
    """Renders a MarkdownAST as markdown text."""

    def __init__(self, encoding: str = "utf-8"):
        self.encoding = encoding
        self.renderer = ChangelogRenderer()

    def convert(self, ast: MarkdownAST) -> str:
        state = BlockState()
        state.env["ref_links"] = dict(ast.ref_links)
        return self.renderer(ast.blocks, state)

    def write(self, ast: MarkdownAST, output_path: Union[str, Path]) -> None:
        """Render ``ast`` and write it to ``output_path``."""
        Path(output_path).write_text(self.convert(ast), encoding=self.encoding)
