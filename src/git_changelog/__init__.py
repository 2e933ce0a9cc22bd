"""
git-changelog: keep a hand-edited CHANGELOG.md up to date from merged pull requests.
"""

__version__ = "0.3.0"

from .changelog import Changelog
from .core import Entry, EntryType, Revision, Version
from .exceptions import (
    BranchMismatch,
    ChangelogError,
    GitError,
    GitHubError,
    MalformedVersion,
    MissingVersionInfo,
    NoEntry,
)

__all__ = [
    "Changelog",
    "Entry",
    "EntryType",
    "Revision",
    "Version",
    "ChangelogError",
    "MalformedVersion",
    "NoEntry",
    "BranchMismatch",
    "MissingVersionInfo",
    "GitError",
    "GitHubError",
]
