"""Exception hierarchy shared by the processor pipeline."""

from __future__ import annotations

from typing import Sequence


class PreprocError(RuntimeError):
    """Base class for every failure the pipeline reports to the operator."""


class ConfigError(PreprocError):
    """Raised when the configuration cannot be loaded or contains conflicts."""

    def __init__(self, message: str, problems: Sequence[str] = ()) -> None:
        self.problems = list(problems)
        if self.problems:
            message = message + "\n" + "\n".join(f"  - {problem}" for problem in self.problems)
        super().__init__(message)


class MatchError(PreprocError):
    """Raised when a directory tree cannot be walked."""


class GitError(PreprocError):
    """Raised when repository history cannot be read."""


class TemplateError(PreprocError):
    """Raised when a template fails to compile or render."""

    def __init__(self, name: str, detail: str) -> None:
        self.name = name
        self.detail = detail
        super().__init__(f"template {name}: {detail}")


class ScriptError(PreprocError):
    """Raised when a script fails to compile or raises while running."""

    def __init__(self, name: str, detail: str, *, item: str | None = None) -> None:
        self.name = name
        self.detail = detail
        self.item = item
        super().__init__(f"script {name}: {detail}")


class CommandError(PreprocError):
    """Raised when a shell command exits with a non-zero status."""

    def __init__(self, command: str, returncode: int, stderr: str = "") -> None:
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        message = f"command exited with status {returncode}: {command}"
        tail = stderr.strip().splitlines()[-5:]
        if tail:
            message += "\n" + "\n".join(tail)
        super().__init__(message)


class ProcessorError(PreprocError):
    """Wraps a failure with the processor and item being handled."""

    def __init__(self, processor: str, detail: str, *, item: str | None = None) -> None:
        self.processor = processor
        self.item = item
        self.detail = detail
        location = f"{processor} ({item})" if item else processor
        super().__init__(f"{location}: {detail}")


__all__ = [
    "CommandError",
    "ConfigError",
    "GitError",
    "MatchError",
    "PreprocError",
    "ProcessorError",
    "ScriptError",
    "TemplateError",
]
