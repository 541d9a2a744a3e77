"""Core data models shared across the processor pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import datetime
from typing import Any, Dict, List, Tuple


@dataclass(frozen=True)
class Signature:
    """Identity and time attached to a commit by its author or committer."""

    name: str
    email: str
    when: datetime

    def __str__(self) -> str:
        return f"{self.name} <{self.email}>"


@dataclass(frozen=True)
class FileStat:
    """Lines added and removed in one file by a single commit."""

    name: str
    addition: int
    deletion: int
    binary: bool = False

    def __str__(self) -> str:
        return f"{self.name} | {self.addition + self.deletion} +{self.addition} -{self.deletion}"


@dataclass(frozen=True)
class CommitRecord:
    """A commit with its metadata and the file changes it introduced."""

    hash: str
    parents: Tuple[str, ...]
    author: Signature
    committer: Signature
    message: str
    stats: Tuple[FileStat, ...] = ()
    index: int = 0

    @property
    def short_hash(self) -> str:
        return self.hash[:7]

    @property
    def subject(self) -> str:
        lines = self.message.splitlines()
        return lines[0] if lines else ""

    @property
    def timestamp(self) -> datetime:
        return self.author.when

    @property
    def additions(self) -> int:
        return sum(stat.addition for stat in self.stats)

    @property
    def deletions(self) -> int:
        return sum(stat.deletion for stat in self.stats)

    @property
    def files_changed(self) -> int:
        return len(self.stats)

    def template_context(self) -> Dict[str, Any]:
        """Expose the record's fields as top-level template names."""
        context: Dict[str, Any] = {item.name: getattr(self, item.name) for item in fields(self)}
        context.update(
            short_hash=self.short_hash,
            subject=self.subject,
            timestamp=self.timestamp,
            additions=self.additions,
            deletions=self.deletions,
            files_changed=self.files_changed,
            commit=self,
        )
        return context


@dataclass(frozen=True)
class HistorySnapshot:
    """Head commit plus the full history walked from head to root."""

    head: CommitRecord
    commits: List[CommitRecord] = field(default_factory=list)

    def template_context(self) -> Dict[str, Any]:
        return {"head": self.head, "commits": self.commits}
