"""Directory walking and base-name glob matching for exec processors."""

from __future__ import annotations

import os
from fnmatch import fnmatchcase
from typing import Iterator, List

from .errors import MatchError
from .logging import get_logger

_logger = get_logger("matcher")


def _raise_walk_error(error: OSError) -> None:
    raise error


def _iter_files(root: str) -> Iterator[str]:
    if not os.path.exists(root):
        raise FileNotFoundError(2, "No such file or directory", root)
    if not os.path.isdir(root):
        yield root
        return
    for dirpath, dirnames, filenames in os.walk(root, onerror=_raise_walk_error):
        _logger.debug("Walking directory: %s", dirpath)
        for filename in filenames:
            yield os.path.join(dirpath, filename)


def walk_match(root: str, pattern: str) -> List[str]:
    """Return files under ``root`` whose base name matches ``pattern``.

    Matching is case sensitive and never considers the directory part of a
    path, so a pattern holding a separator matches nothing. The walk stops
    at the first unreadable directory and nothing is returned in that case.
    """
    if not pattern:
        raise MatchError("empty match pattern")

    matches: List[str] = []
    try:
        for path in _iter_files(root):
            if fnmatchcase(os.path.basename(path), pattern):
                _logger.debug("Found match: %s", path)
                matches.append(path)
    except OSError as exc:
        raise MatchError(f"cannot walk {root}: {exc}") from exc

    _logger.debug("Found %d matches for %s under %s", len(matches), pattern, root)
    return matches


__all__ = ["walk_match"]
