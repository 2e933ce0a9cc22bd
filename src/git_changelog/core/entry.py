"""
Change records flowing from a repository revision into the changelog.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from .version import Version


class EntryType(Enum):
    """Kinds of change an entry can describe."""
    UNKNOWN = "unknown"
    FEATURE = "feature"
    BUGFIX = "bugfix"


@dataclass(frozen=True)
class HeadingInfo:
    """Display name of a category section and the section it must precede."""

    name: str
    is_before: Optional[str] = None


# Feature sections always come before bugfix sections within a version.
HEADINGS: Dict[EntryType, HeadingInfo] = {
    EntryType.FEATURE: HeadingInfo(name="Features", is_before="Bugfixes"),
    EntryType.BUGFIX: HeadingInfo(name="Bugfixes"),
}


@dataclass
class Revision:
    """A single commit as reported by version control."""

    id: str
    subject: str
    message: str = ""


@dataclass
class Entry:
    """One change destined for exactly one list item in the changelog."""

    # Pull request number.
    number: int
    type: EntryType
    url: str
    message: str
    version: Version

    @property
    def heading(self) -> Optional[HeadingInfo]:
        return HEADINGS.get(self.type)
