"""
Version control access through the git command line.
"""

from . import git

__all__ = ["git"]
