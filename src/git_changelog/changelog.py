"""
Changelog document with positional insertion of new entries.

Entries are filed under a version section (``## v1.4.0 [unreleased]``) and
inside it under a category section (``### Features`` / ``### Bugfixes``).
Version sections are kept in descending version order and sections that do
not exist yet are created at the first position consistent with that order.
Nothing outside the touched sections is rewritten.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from .converters import ASTToMarkdownConverter, MarkdownToASTConverter
from .core.ast_handler import ASTHandler
from .core.document_model import MarkdownAST, extract_text, heading_level
from .core.entry import Entry
from .core.version import Version
from .exceptions import MalformedVersion

logger = logging.getLogger(__name__)

VERSION_HEADER_RE = re.compile(r"^v(\d+(?:\.\d+)*) \[(.*)\]$")
ENTRY_LINK_RE = re.compile(r"^#(\d+)$")
TERMINAL_PUNCTUATION = (".", "!", "?")
UNRELEASED = "unreleased"


def parse_version_heading(text: str) -> Optional[Tuple[Version, str]]:
    """Parse ``v<version> [<label>]``, returning None for anything else."""
    m = VERSION_HEADER_RE.match(text)
    if m is None:
        return None
    try:
        return Version.parse(m.group(1)), m.group(2)
    except MalformedVersion:
        return None


def format_message(message: str) -> str:
    """Join a message onto one line and terminate it with a period unless it already ends in punctuation.

    A list item must not span paragraphs or the list stops being tight.
    """
    message = " ".join(message.split())
    if not message.endswith(TERMINAL_PUNCTUATION):
        message += "."
    return message


class Changelog:
    """A markdown changelog that new entries can be inserted into."""

    def __init__(self, ast: Optional[MarkdownAST] = None):
        self.ast = ast if ast is not None else MarkdownAST()
        self.handler = ASTHandler(self.ast)

    @classmethod
    def parse(cls, text: str) -> Changelog:
        return cls(MarkdownToASTConverter().convert(text))

    @classmethod
    def parse_file(cls, path: Union[str, Path]) -> Changelog:
        return cls(MarkdownToASTConverter().convert_file(path))

    def render(self) -> str:
        return ASTToMarkdownConverter().convert(self.ast)

    def write_file(self, path: Union[str, Path]) -> None:
        ASTToMarkdownConverter().write(self.ast, path)

    def versions(self) -> List[Tuple[Version, str]]:
        """Every well-formed version section as ``(version, label)``, in document order."""
        versions = []
        for heading in self.ast.headings(level=2):
            parsed = parse_version_heading(extract_text(heading))
            if parsed is not None:
                versions.append(parsed)
        return versions

    def add_entry(self, entry: Entry) -> bool:
        """
        Insert ``entry`` into its version and category section.

        Entries of an unrecognized type are dropped. An entry whose number is
        already linked anywhere inside the target version section is left
        alone, whatever category it was filed under.

        Returns:
            True when the document was modified.
        """
        heading = entry.heading
        if heading is None:
            logger.debug("Dropping #%d: unrecognized entry type %s", entry.number, entry.type.value)
            return False

        section = self._find_or_create_version(entry.version)

        if self._contains_entry(section, entry.number):
            logger.debug("Skipping #%d: already present in v%s", entry.number, entry.version)
            return False

        level = heading_level(self.ast.blocks[section])

        def compare_category(text: str) -> int:
            if text == heading.name:
                return 0
            elif text == heading.is_before:
                return 1
            return -1

        category = self.handler.find_or_create_heading(
            section,
            level,
            compare_category,
            lambda: self.handler.create_heading(level + 1, heading.name),
        )

        entries = self.handler.list_after(category)
        self.handler.append_item(entries, self._create_list_item(entry))
        logger.debug("Added #%d to v%s under %s", entry.number, entry.version, heading.name)
        return True

    def _find_or_create_version(self, version: Version) -> int:
        def compare_version(text: str) -> int:
            parsed = parse_version_heading(text)
            if parsed is None:
                return -1
            return version.compare(parsed[0])

        def create() -> Dict[str, Any]:
            logger.debug("Creating section v%s [%s]", version, UNRELEASED)
            return self.handler.create_heading(2, f"v{version} [{UNRELEASED}]")

        return self.handler.find_or_create_heading(None, 0, compare_version, create)

    def _contains_entry(self, section: int, number: int) -> bool:
        for link in self.handler.iter_links(self.handler.section_range(section)):
            m = ENTRY_LINK_RE.match(extract_text(link).strip())
            if m is not None and int(m.group(1)) == number:
                return True
        return False

    def _create_list_item(self, entry: Entry) -> Dict[str, Any]:
        return self.handler.create_list_item([
            self.handler.create_link(f"#{entry.number}", entry.url),
            self.handler.create_text(f": {format_message(entry.message)}"),
        ])
