"""
Updaters resolve merged revisions into changelog entries.
"""

from .base import DEFAULT_LABELS, Updater
from .github import GitHubClient, GitHubUpdater

__all__ = ["Updater", "DEFAULT_LABELS", "GitHubClient", "GitHubUpdater"]
