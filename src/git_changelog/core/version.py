"""
Dotted numeric versions as used in changelog headings, tags and release branches.
"""

from __future__ import annotations

from typing import List

from ..exceptions import MalformedVersion


class Version:
    """
    An ordered, variable-length sequence of non-negative integers.

    Ordering is segment-wise with length as the final tie breaker, so an
    explicit trailing zero makes a version more specific than one that leaves
    the segment unspecified: ``1.2.3.0`` compares greater than ``1.2.3``.
    Equality requires the same number of segments as well, so ``1.2`` and
    ``1.2.0`` are never equal.
    """

    __slots__ = ("segments",)

    def __init__(self, segments: List[int]):
        self.segments = list(segments)

    @classmethod
    def parse(cls, value: str) -> Version:
        """Parse a dot separated string of digits such as ``1.4.0``."""
        segments = []
        for part in value.split("."):
            if not part.isdigit() or not part.isascii():
                raise MalformedVersion(value, part)
            segments.append(int(part))
        return cls(segments)

    def compare(self, other: Version) -> int:
        """Return -1, 0 or 1 when this version is less than, equal to or greater than ``other``."""
        for i, segment in enumerate(self.segments):
            if i >= len(other.segments):
                return 1
            if segment < other.segments[i]:
                return -1
            if segment > other.segments[i]:
                return 1
        if len(other.segments) > len(self.segments):
            return -1
        return 0

    def has_prefix(self, prefix: Version) -> bool:
        """Check whether the leading segments of this version equal ``prefix``."""
        if len(prefix.segments) > len(self.segments):
            return False
        return self.segments[:len(prefix.segments)] == prefix.segments

    def slice(self, n: int) -> Version:
        """Return a new version truncated to the first ``n`` segments."""
        return Version(self.segments[:n])

    def increment(self, index: int) -> None:
        """Increment the segment at ``index`` in place."""
        self.segments[index] += 1

    def copy(self) -> Version:
        return Version(self.segments)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return len(self.segments) == len(other.segments) and self.compare(other) == 0

    def __lt__(self, other: Version) -> bool:
        return self.compare(other) < 0

    def __le__(self, other: Version) -> bool:
        return self.compare(other) <= 0

    def __gt__(self, other: Version) -> bool:
        return self.compare(other) > 0

    def __ge__(self, other: Version) -> bool:
        return self.compare(other) >= 0

    def __hash__(self) -> int:
        return hash(tuple(self.segments))

    def __len__(self) -> int:
        return len(self.segments)

    def __str__(self) -> str:
        return ".".join(str(segment) for segment in self.segments)

    def __repr__(self) -> str:
        return f"Version({str(self)!r})"
