"""
Markdown conversion modules.
"""

from .markdown_to_ast import MarkdownToASTConverter
from .ast_to_markdown import ASTToMarkdownConverter, ChangelogRenderer

__all__ = ["MarkdownToASTConverter", "ASTToMarkdownConverter", "ChangelogRenderer"]
