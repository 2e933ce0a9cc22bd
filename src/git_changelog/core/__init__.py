"""
Core changelog document handling and version arithmetic.
"""

from .version import Version
from .entry import Entry, EntryType, HeadingInfo, HEADINGS, Revision
from .document_model import MarkdownAST
from .ast_handler import ASTHandler

__all__ = [
    "Version",
    "Entry",
    "EntryType",
    "HeadingInfo",
    "HEADINGS",
    "Revision",
    "MarkdownAST",
    "ASTHandler",
]
