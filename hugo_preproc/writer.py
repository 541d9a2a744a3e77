"""Writing rendered artifacts to disk."""

from __future__ import annotations

from pathlib import Path

from .logging import get_logger

_logger = get_logger("writer")


def write_artifact(path: str | Path, content: str) -> int:
    """Create parent directories and write ``content`` to ``path``, replacing it.

    Content is written as UTF-8 exactly as given. The write is not atomic.
    """
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    with target.open("w", encoding="utf-8", newline="") as handle:
        written = handle.write(content)
    _logger.debug("Wrote %d chars to %s", written, target)
    return written


__all__ = ["write_artifact"]
