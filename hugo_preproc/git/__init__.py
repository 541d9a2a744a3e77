"""Git history access."""

from .history import CommitWalk, GitRepository

__all__ = ["CommitWalk", "GitRepository"]
