"""
Exceptions raised while resolving and inserting changelog entries.
"""

from __future__ import annotations

from typing import Optional


class ChangelogError(Exception):
    """Base class for all git-changelog errors."""


class MalformedVersion(ChangelogError, ValueError):
    """A version string has a segment that is not a non-negative integer."""

    def __init__(self, value: str, segment: str):
        self.value = value
        self.segment = segment
        super().__init__(f"invalid version {value!r}: segment {segment!r} is not a number")


class NoEntry(ChangelogError):
    """The revision does not describe a merged change and produces no entry."""

    def __init__(self, message: str = "no entry processed from revision"):
        super().__init__(message)


class MissingVersionInfo(ChangelogError):
    """The last tag does not look like a version."""

    def __init__(self, tag: str):
        self.tag = tag
        super().__init__(f"could not find version information in tag {tag!r}")


class BranchMismatch(ChangelogError):
    """A release branch is not a valid prefix of the last tagged version."""


class GitError(ChangelogError):
    """A git command failed."""


class GitHubError(ChangelogError):
    """The GitHub API returned an error response."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)
