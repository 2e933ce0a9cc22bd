"""
Thin wrappers around the git executable.

Every call is synchronous; failures raise GitError with git's own message.
"""

from __future__ import annotations

import logging
import re
import subprocess
from typing import List, Optional, Sequence, Tuple

from ..core.entry import Revision
from ..exceptions import GitError

logger = logging.getLogger(__name__)

HEAD = "HEAD"

_NO_TAG_ERRORS = (
    "fatal: No names found, cannot describe anything.",
    "fatal: No tags can describe",
)
_REMOTE_RE = re.compile(
    r"^(?:[\w+.-]+://)?(?:[^@/]+@)?(?P<host>[^:/]+)(?::\d+)?[:/](?P<owner>[^/]+)/(?P<repo>[^/]+?)(?:\.git)?/?$"
)


def _run(args: Sequence[str], git_path: str = "git") -> str:
    """Run a git command and return its stripped standard output."""
    cmd = [git_path, *args]
    logger.debug("Running %s", " ".join(cmd))
    try:
        result = subprocess.run(cmd, capture_output=True, text=True)
    except FileNotFoundError as e:
        raise GitError(f"git not found: {e}") from e

    if result.returncode != 0:
        message = (result.stderr or result.stdout).strip()
        raise GitError(message.removeprefix("fatal: ") or f"git {args[0]} failed")
    return result.stdout.strip()


def root() -> str:
    """Return the root of the git repository."""
    return _run(["rev-parse", "--show-toplevel"])


def rev_range(start: str, end: str) -> str:
    """Return a string for specifying a range between two commits."""
    return f"{start}..{end}"


def merges(*revs: str) -> List[str]:
    """Return every merge commit in ``revs`` (HEAD by default), oldest first."""
    args = ["rev-list", "--reverse", "--min-parents=2"]
    args.extend(revs or [HEAD])
    out = _run(args)
    return [line.strip() for line in out.splitlines() if line.strip()]


def last_tag(*revs: str) -> str:
    """
    Find the nearest tag reachable from ``revs`` along first parents.

    Returns an empty string when the history carries no tag at all.
    """
    cmd = ["git", "describe", "--abbrev=0", "--tags", "--first-parent", *revs]
    logger.debug("Running %s", " ".join(cmd))
    try:
        result = subprocess.run(cmd, capture_output=True, text=True)
    except FileNotFoundError as e:
        raise GitError(f"git not found: {e}") from e

    if result.returncode != 0:
        err = result.stderr.strip()
        if err.startswith(_NO_TAG_ERRORS):
            return ""
        raise GitError(err.removeprefix("fatal: ") or "git describe failed")
    return result.stdout.strip()


def show(rev: str) -> Revision:
    """Read the subject line and body of a single revision."""
    subject = _run(["show", "-q", "--format=format:%s", rev])
    body = _run(["show", "-q", "--format=format:%b", rev])
    return Revision(id=rev, subject=subject, message=body)


def remote_url(name: str = "origin") -> str:
    return _run(["remote", "get-url", name])


def parse_remote(url: str) -> Optional[Tuple[str, str, str]]:
    """
    Split a remote URL into ``(host, owner, repo)``.

    Understands both scp-like (``git@github.com:owner/repo.git``) and URL
    (``https://github.com/owner/repo``) forms.
    """
    m = _REMOTE_RE.match(url.strip())
    if m is None:
        return None
    return m.group("host"), m.group("owner"), m.group("repo")
