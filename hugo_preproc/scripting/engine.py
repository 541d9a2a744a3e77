"""Compile and run processor scripts with host values bound."""

from __future__ import annotations

import builtins
from dataclasses import dataclass
from types import CodeType
from typing import Any, Dict, FrozenSet, Iterable, Mapping, Optional

from ..errors import ScriptError
from ..logging import get_logger
from .hostlist import HostList

STANDARD_MODULES: FrozenSet[str] = frozenset(
    {
        "base64",
        "binascii",
        "collections",
        "datetime",
        "fnmatch",
        "functools",
        "glob",
        "hashlib",
        "itertools",
        "json",
        "math",
        "os",
        "pathlib",
        "random",
        "re",
        "shlex",
        "shutil",
        "string",
        "subprocess",
        "textwrap",
        "time",
    }
)


@dataclass(frozen=True)
class ScriptProgram:
    """A compiled script ready to run any number of times."""

    name: str
    source: str
    code: CodeType


class ScriptEngine:
    """Runs scripts with ``file`` and ``files`` always declared.

    Each run gets a fresh namespace, so nothing a script assigns survives into
    the next run. Imports are limited to ``modules``.
    """

    def __init__(self, modules: Iterable[str] | None = None) -> None:
        self.modules = frozenset(STANDARD_MODULES if modules is None else modules)
        self._builtins = self._build_builtins()
        self.logger = get_logger("scripting")

    def compile(self, source: str, *, name: str = "<script>") -> ScriptProgram:
        try:
            code = compile(source, name, "exec")
        except SyntaxError as exc:
            raise ScriptError(name, f"line {exc.lineno}: {exc.msg}") from exc
        return ScriptProgram(name=name, source=source, code=code)

    def run(
        self,
        program: ScriptProgram,
        *,
        file: Optional[str] = None,
        files: Optional[HostList] = None,
        extra: Optional[Mapping[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Execute ``program`` once and return its final namespace."""
        namespace: Dict[str, Any] = dict(extra or {})
        namespace.update(
            __builtins__=self._builtins,
            __name__="__script__",
            file=file,
            files=files if files is not None else HostList(),
        )
        try:
            exec(program.code, namespace)
        except SystemExit as exc:
            if exc.code not in (None, 0):
                raise ScriptError(program.name, f"exited with status {exc.code}") from exc
        except Exception as exc:
            raise ScriptError(program.name, f"{exc.__class__.__name__}: {exc}") from exc
        return namespace

    def run_each(self, program: ScriptProgram, paths: Iterable[str]) -> int:
        """Run once per path with ``file`` bound; stop at the first failure."""
        count = 0
        for path in paths:
            self.logger.debug("Running %s for %s", program.name, path)
            try:
                self.run(program, file=path)
            except ScriptError as exc:
                raise ScriptError(program.name, exc.detail, item=path) from (exc.__cause__ or exc)
            count += 1
        return count

    def run_all(self, program: ScriptProgram, paths: Iterable[str]) -> Dict[str, Any]:
        """Run once with ``files`` bound to every path."""
        files = HostList(paths)
        self.logger.debug("Running %s for %d files", program.name, len(files))
        return self.run(program, files=files)

    def _build_builtins(self) -> Dict[str, Any]:
        allowed = self.modules
        real_import = builtins.__import__

        def _import(name: str, globals=None, locals=None, fromlist=(), level=0):  # type: ignore[no-untyped-def]
            if level != 0:
                raise ImportError("relative imports are not available to scripts")
            if name.partition(".")[0] not in allowed:
                raise ImportError(f"module {name!r} is not available to scripts")
            return real_import(name, globals, locals, fromlist, level)

        table = dict(vars(builtins))
        table["__import__"] = _import
        return table


__all__ = ["STANDARD_MODULES", "ScriptEngine", "ScriptProgram"]
