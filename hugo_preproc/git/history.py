"""Commit history reading backed by the git command line."""

from __future__ import annotations

import subprocess
from datetime import datetime
from pathlib import Path
from typing import Callable, Iterable, Iterator, List, Optional, Sequence, Tuple

from ..errors import GitError
from ..logging import get_logger
from ..models import CommitRecord, FileStat, HistorySnapshot, Signature

Runner = Callable[..., Iterable[str]]

_RECORD_START = "\x1e"
_FIELD_SEP = "\x1f"
_MESSAGE_END = "\x1d"

# escapes git uses when it quotes a path
_C_ESCAPES = {"a": 7, "b": 8, "t": 9, "n": 10, "v": 11, "f": 12, "r": 13, '"': 34, "\\": 92}

# hash, parents, author name/email/date, committer name/email/date, raw message
LOG_FORMAT = (
    "%x1e%H%x1f%P%x1f%an%x1f%ae%x1f%aI%x1f%cn%x1f%ce%x1f%cI%x1f%B%x1d"
)

_LOG_ARGS: Tuple[str, ...] = (
    "git",
    "-c",
    "core.quotepath=off",
    "-c",
    "log.showsignature=false",
    "-c",
    "log.showRoot=true",
    "log",
    "--no-color",
    "--no-renames",
    "--diff-merges=first-parent",
    "--numstat",
    f"--format={LOG_FORMAT}",
)


class CommitWalk:
    """Single-pass iterator over commits from head to root.

    The walk holds a running ``git log`` process until it is exhausted or
    closed; use it as a context manager when it may be abandoned early.
    """

    def __init__(self, lines: Iterable[str]) -> None:
        self._source = iter(lines)
        self._records = _parse_log(self._source)
        self._closed = False

    def __iter__(self) -> "CommitWalk":
        return self

    def __next__(self) -> CommitRecord:
        if self._closed:
            raise StopIteration
        return next(self._records)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._records.close()
        close = getattr(self._source, "close", None)
        if close is not None:
            close()

    def __enter__(self) -> "CommitWalk":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class GitRepository:
    """Read-only view of a repository's history, anchored at its resolved HEAD."""

    def __init__(
        self,
        work_tree: Path,
        head_hash: str,
        *,
        runner: Runner | None = None,
    ) -> None:
        self.work_tree = work_tree
        self.head_hash = head_hash
        self._runner = runner or _default_runner
        self.logger = get_logger("git")

    @classmethod
    def open(cls, path: str | Path = ".", *, runner: Runner | None = None) -> "GitRepository":
        """Open the repository containing ``path`` and resolve HEAD."""
        run = runner or _default_runner
        start = Path(path or ".").expanduser()
        if not start.is_dir():
            raise GitError(f"repository path is not a directory: {start}")

        top = _capture(run, ["git", "rev-parse", "--show-toplevel"], cwd=start).strip()
        if not top:
            raise GitError(f"{start} is not inside a git work tree")
        work_tree = Path(top)

        try:
            head = _capture(
                run, ["git", "rev-parse", "--verify", "--quiet", "HEAD^{commit}"], cwd=work_tree
            ).strip()
        except GitError as exc:
            raise GitError(f"cannot resolve HEAD in {work_tree}; repository has no commits") from exc
        if not head:
            raise GitError(f"cannot resolve HEAD in {work_tree}; repository has no commits")

        return cls(work_tree, head, runner=run)

    def head(self) -> CommitRecord:
        """Return the record for the resolved HEAD commit."""
        with self._walk(["-n", "1"]) as walk:
            record = next(walk, None)
        if record is None:
            raise GitError(f"HEAD commit {self.head_hash} not found in {self.work_tree}")
        self.logger.debug("Head commit %s: %d file stats", record.short_hash, len(record.stats))
        return record

    def each(self) -> CommitWalk:
        """Return a lazy walk from HEAD to the root commit, newest first."""
        self.logger.debug("Walking history from %s", self.head_hash[:7])
        return self._walk([])

    def all(self) -> HistorySnapshot:
        """Return HEAD plus the fully materialized history."""
        head = self.head()
        with self.each() as walk:
            commits = list(walk)
        self.logger.debug("Collected %d commits", len(commits))
        return HistorySnapshot(head=head, commits=commits)

    def _walk(self, extra: Sequence[str]) -> CommitWalk:
        args = [*_LOG_ARGS, *extra, self.head_hash, "--"]
        return CommitWalk(self._runner(args, cwd=self.work_tree))


# ----------------------------------------------------------------------
# Internals


def _default_runner(args: Iterable[str], *, cwd: Path) -> Iterator[str]:
    argv = list(args)
    try:
        process = subprocess.Popen(
            argv,
            cwd=str(cwd),
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            encoding="utf-8",
            errors="replace",
        )
    except OSError as exc:
        raise GitError(f"cannot run {argv[0]}: {exc}") from exc

    assert process.stdout is not None and process.stderr is not None
    try:
        for line in process.stdout:
            yield line
        stderr = process.stderr.read()
        returncode = process.wait()
    finally:
        if process.poll() is None:
            process.kill()
            process.wait()
        process.stdout.close()
        process.stderr.close()

    if returncode != 0:
        detail = stderr.strip() or f"exit status {returncode}"
        raise GitError(f"{' '.join(argv[:4])} failed in {cwd}: {detail}")


def _capture(runner: Runner, args: List[str], *, cwd: Path) -> str:
    return "".join(runner(args, cwd=cwd))


def _parse_log(lines: Iterator[str]) -> Iterator[CommitRecord]:
    index = 0
    header: Optional[List[str]] = None
    message: List[str] = []
    in_message = False
    stats: List[FileStat] = []

    for raw in lines:
        line = raw.rstrip("\n")
        if line.startswith(_RECORD_START):
            if header is not None:
                yield _build_record(header, message, stats, index)
                index += 1
            parts = line[1:].split(_FIELD_SEP, 8)
            if len(parts) != 9:
                raise GitError(f"unexpected git log header: {line!r}")
            header = parts[:8]
            message = []
            stats = []
            in_message = _append_message(message, parts[8])
            continue
        if header is None:
            continue
        if in_message:
            in_message = _append_message(message, line)
            continue
        if line.strip():
            stats.append(_parse_numstat(line))

    if header is not None:
        yield _build_record(header, message, stats, index)


def _append_message(message: List[str], line: str) -> bool:
    """Add a message line; return whether the message continues."""
    if _MESSAGE_END in line:
        message.append(line.split(_MESSAGE_END, 1)[0])
        return False
    message.append(line)
    return True


def _parse_numstat(line: str) -> FileStat:
    parts = line.split("\t", 2)
    if len(parts) != 3:
        raise GitError(f"unexpected numstat line: {line!r}")
    added, deleted, name = parts
    name = _unquote_path(name)
    if added == "-" and deleted == "-":
        return FileStat(name=name, addition=0, deletion=0, binary=True)
    try:
        return FileStat(name=name, addition=int(added), deletion=int(deleted))
    except ValueError as exc:
        raise GitError(f"unexpected numstat line: {line!r}") from exc


def _unquote_path(name: str) -> str:
    """Undo git's C-style quoting of paths holding quotes, backslashes or control characters."""
    if len(name) < 2 or not (name.startswith('"') and name.endswith('"')):
        return name
    body = name[1:-1]
    raw = bytearray()
    i = 0
    while i < len(body):
        char = body[i]
        if char != "\\":
            raw += char.encode("utf-8")
            i += 1
            continue
        escape = body[i + 1 : i + 2]
        octal = body[i + 1 : i + 4]
        if escape in _C_ESCAPES:
            raw.append(_C_ESCAPES[escape])
            i += 2
        elif len(octal) == 3 and octal[0] in "0123" and all(digit in "01234567" for digit in octal):
            raw.append(int(octal, 8))
            i += 4
        else:
            raise GitError(f"unexpected quoted path: {name!r}")
    return raw.decode("utf-8", errors="replace")


def _build_record(
    header: Sequence[str], message: Sequence[str], stats: Sequence[FileStat], index: int
) -> CommitRecord:
    commit_hash, parents, a_name, a_email, a_date, c_name, c_email, c_date = header
    return CommitRecord(
        hash=commit_hash,
        parents=tuple(parents.split()),
        author=Signature(name=a_name, email=a_email, when=_parse_date(a_date)),
        committer=Signature(name=c_name, email=c_email, when=_parse_date(c_date)),
        message="\n".join(message),
        stats=tuple(stats),
        index=index,
    )


def _parse_date(value: str) -> datetime:
    try:
        return datetime.fromisoformat(value)
    except ValueError as exc:
        raise GitError(f"unexpected commit date: {value!r}") from exc


__all__ = ["CommitWalk", "GitRepository", "LOG_FORMAT", "Runner"]
