"""
Turning merged revisions into changelog entries.

The Updater holds the version arithmetic. The lookups it depends on (labels,
target branch, last tag, entry URL) are left to a concrete subclass that
talks to the hosting service.
"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional

from ..core.entry import Entry, EntryType, Revision
from ..core.version import Version
from ..exceptions import BranchMismatch, MissingVersionInfo, NoEntry

logger = logging.getLogger(__name__)

SUBJECT_LINE_RE = re.compile(r"^Merge pull request #(\d+) from .*$")
TAG_VERSION_RE = re.compile(r"^v?(\d+(?:\.\d+)*)[-.]?(rc\d+)?$")

DEFAULT_VERSION = "1.0.0"
DEFAULT_TRUNK_BRANCH = "master"
DEFAULT_LABELS: Dict[str, EntryType] = {
    "kind/feature request": EntryType.FEATURE,
    "kind/bug": EntryType.BUGFIX,
    "kind/bugfix": EntryType.BUGFIX,
}


class Updater(ABC):
    """
    Determines how the changelog is updated for a merged revision.

    Args:
        trunk_branch: Branch that receives new minor versions.
        labels: Mapping of tracker label name to entry type.
        default_version: Version used when the history has no tag yet.
    """

    def __init__(
        self,
        trunk_branch: str = DEFAULT_TRUNK_BRANCH,
        labels: Optional[Dict[str, EntryType]] = None,
        default_version: str = DEFAULT_VERSION,
    ):
        self.trunk_branch = trunk_branch
        self.label_types = dict(DEFAULT_LABELS if labels is None else labels)
        self.default_version = Version.parse(default_version)

    @abstractmethod
    def labels(self, number: int) -> List[str]:
        """Names of the labels on change ``number``."""

    @abstractmethod
    def target_branch(self, number: int) -> str:
        """Branch that change ``number`` was merged into."""

    @abstractmethod
    def last_tag(self, rev: str) -> str:
        """Nearest tag reachable from ``rev``, or an empty string."""

    @abstractmethod
    def entry_url(self, number: int) -> str:
        """Link to change ``number``."""

    def close(self) -> None:
        """Release any connection held to the hosting service."""

    def __enter__(self) -> Updater:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def new_entry(self, rev: Revision) -> Entry:
        """
        Create an entry from a revision.

        Raises:
            NoEntry: The revision is not a pull request merge.
            MissingVersionInfo: The last tag does not carry a version.
            BranchMismatch: The target release branch does not match the tag.
            MalformedVersion: The target branch is not a version.
        """
        m = SUBJECT_LINE_RE.match(rev.subject)
        if m is None:
            raise NoEntry()

        number = int(m.group(1))
        entry_type = self.find_entry_type(number)
        version = self.target_version(number, rev)
        logger.debug("Resolved #%d (%s) to v%s", number, entry_type.value, version)

        return Entry(
            number=number,
            type=entry_type,
            url=self.entry_url(number),
            message=rev.message,
            version=version,
        )

    def find_entry_type(self, number: int) -> EntryType:
        """Map the first recognized label to an entry type."""
        for name in self.labels(number):
            entry_type = self.label_types.get(name)
            if entry_type is not None:
                return entry_type
        return EntryType.UNKNOWN

    def target_version(self, number: int, rev: Revision) -> Version:
        """
        Compute the version a change belongs to from the last tag before it.

        A release candidate tag absorbs every change up to its final release.
        Otherwise a change merged into trunk bumps the minor version and a
        change merged into a release branch such as ``1.3`` bumps the first
        segment the branch name does not cover.
        """
        tag = self.last_tag(rev.id)
        if not tag:
            return self.default_version.copy()

        m = TAG_VERSION_RE.match(tag)
        if m is None:
            raise MissingVersionInfo(tag)

        version = Version.parse(m.group(1))
        if m.group(2):
            return version

        branch = self.target_branch(number)
        if branch == self.trunk_branch:
            if len(version) > 1:
                version.increment(1)
            return version

        release = Version.parse(branch)
        if len(release) >= len(version):
            raise BranchMismatch(
                f"release branch {branch} has equal to or more segments than the version tag {tag}"
            )
        if not version.has_prefix(release):
            raise BranchMismatch(
                f"release branch and tag prefixes do not match: {release} != {version.slice(len(release))}"
            )

        version.increment(len(release))
        return version

    def next_version(self, revisions: Iterable[Revision]) -> Optional[Version]:
        """Greatest target version among the revisions that are pull request merges."""
        latest: Optional[Version] = None
        for rev in revisions:
            m = SUBJECT_LINE_RE.match(rev.subject)
            if m is None:
                continue
            version = self.target_version(int(m.group(1)), rev)
            if latest is None or version.compare(latest) > 0:
                latest = version
        return latest
