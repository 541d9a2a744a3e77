"""Pipeline orchestration for git and exec processors."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from .config import ExecMode, ExecSource, GitMode, GitProcessor, GitSource, ProcessorConfig, validate_config
from .errors import ConfigError, PreprocError, ProcessorError
from .git.history import GitRepository
from .logging import get_logger
from .matcher import walk_match
from .models import CommitRecord, HistorySnapshot
from .scripting import ScriptEngine, ScriptProgram
from .shell import ShellRunner
from .templating import TemplateRenderer
from .writer import write_artifact

RepositoryOpener = Callable[[str], GitRepository]
Matcher = Callable[[str, str], List[str]]
Writer = Callable[[str, str], int]


@dataclass
class RunSummary:
    """Counts of work performed by a pipeline run."""

    artifacts: int = 0
    commands: int = 0
    scripts: int = 0


class Orchestrator:
    """Runs every configured processor in order, stopping at the first failure."""

    def __init__(
        self,
        *,
        renderer: TemplateRenderer | None = None,
        engine: ScriptEngine | None = None,
        shell: ShellRunner | None = None,
        open_repository: RepositoryOpener | None = None,
        matcher: Matcher | None = None,
        writer: Writer | None = None,
    ) -> None:
        self.renderer = renderer or TemplateRenderer()
        self.engine = engine or ScriptEngine()
        self.shell = shell or ShellRunner()
        self._open_repository = open_repository or GitRepository.open
        self._match = matcher or walk_match
        self._write = writer or write_artifact
        self.logger = get_logger("orchestrator")

    def run(self, config: ProcessorConfig) -> RunSummary:
        """Run the git processors, then the exec processors."""
        self._check(config)
        summary = RunSummary()
        self._run_gits(config, summary)
        self._run_execs(config, summary)
        self.logger.info(
            "Finished: %d artifact(s) written, %d command(s) run, %d script run(s)",
            summary.artifacts,
            summary.commands,
            summary.scripts,
        )
        return summary

    def run_gits(self, config: ProcessorConfig) -> RunSummary:
        """Run only the git processors."""
        self._check(config)
        summary = RunSummary()
        self._run_gits(config, summary)
        return summary

    def run_execs(self, config: ProcessorConfig) -> RunSummary:
        """Run only the exec processors."""
        self._check(config)
        summary = RunSummary()
        self._run_execs(config, summary)
        return summary

    # ------------------------------------------------------------------
    # Git processors

    def _run_gits(self, config: ProcessorConfig, summary: RunSummary) -> None:
        self.logger.debug("Iterating %d git source(s)", len(config.gits))
        for i, source in enumerate(config.gits):
            if not source.processors:
                self.logger.debug("git[%d]: no processors configured; skipping", i)
                continue
            repo = self._open(source, i)
            self.logger.info("git[%d]: %s at %s", i, repo.work_tree, repo.head_hash[:7])
            for j, processor in enumerate(source.processors):
                label = f"git[{i}].processors[{j}]"
                self.logger.debug("%s: mode %s", label, processor.mode.value)
                self._run_git_processor(repo, processor, label, summary)

    def _open(self, source: GitSource, index: int) -> GitRepository:
        path = source.path or "."
        try:
            return self._open_repository(path)
        except PreprocError as exc:
            raise ProcessorError(f"git[{index}]", str(exc), item=path) from exc

    def _run_git_processor(
        self,
        repo: GitRepository,
        processor: GitProcessor,
        label: str,
        summary: RunSummary,
    ) -> None:
        program = self._compile(processor.script, label) if processor.uses_script else None

        if processor.mode is GitMode.HEAD:
            record = self._guard(label, "HEAD", repo.head)
            self._apply_git(processor, program, record, label, record.short_hash, summary)
        elif processor.mode is GitMode.EACH:
            walk = self._guard(label, "history", repo.each)
            with walk:
                while True:
                    record = self._guard(label, "history", lambda: next(walk, None))
                    if record is None:
                        break
                    self._apply_git(processor, program, record, label, record.short_hash, summary)
        elif processor.mode is GitMode.ALL:
            snapshot = self._guard(label, "history", repo.all)
            self.logger.debug("%s: collected %d commits", label, len(snapshot.commits))
            self._apply_git(processor, program, snapshot, label, "all", summary)
        else:  # pragma: no cover - GitMode is closed
            raise ProcessorError(label, f"invalid git processor mode: {processor.mode!r}")

    def _apply_git(
        self,
        processor: GitProcessor,
        program: Optional[ScriptProgram],
        context: CommitRecord | HistorySnapshot,
        label: str,
        item: str,
        summary: RunSummary,
    ) -> None:
        path = ""
        if processor.file:
            path = self._guard(
                label, item, lambda: self.renderer.render(processor.file, context, name=f"{label}.file")
            )
            self.logger.debug("%s: %s: file %s", label, item, path)

        if program is not None:
            bound: Dict[str, Any] = dict(context.template_context())
            self._guard(label, item, lambda: self.engine.run(program, file=path or None, extra=bound))
            summary.scripts += 1
            return

        assert processor.template is not None
        content = self._guard(
            label, item, lambda: self.renderer.render(processor.template, context, name=f"{label}.template")
        )
        written = self._guard(label, item, lambda: self._write(path, content))
        self.logger.debug("%s: %s: wrote %d chars to %s", label, item, written, path)
        summary.artifacts += 1

    # ------------------------------------------------------------------
    # Exec processors

    def _run_execs(self, config: ProcessorConfig, summary: RunSummary) -> None:
        self.logger.debug("Iterating %d exec source(s)", len(config.execs))
        for i, source in enumerate(config.execs):
            label = f"exec[{i}]"
            files = self._guard(label, source.path, lambda: self._match(source.path, source.pattern))
            self.logger.debug("%s: %d file(s) match %s under %s", label, len(files), source.pattern, source.path)
            if not files:
                continue
            if source.uses_script:
                self._run_exec_script(source, files, label, summary)
            else:
                self._run_exec_commands(source, files, label, summary)

    def _run_exec_commands(
        self, source: ExecSource, files: List[str], label: str, summary: RunSummary
    ) -> None:
        assert source.command is not None
        for path in files:
            command = self._guard(
                label, path, lambda: self.renderer.render(source.command, path, name=f"{label}.command")
            )
            self._guard(label, path, lambda: self.shell.run(command))
            summary.commands += 1

    def _run_exec_script(
        self, source: ExecSource, files: List[str], label: str, summary: RunSummary
    ) -> None:
        program = self._compile(source.script, label)
        if source.mode is ExecMode.ALL:
            self._guard(label, f"{len(files)} files", lambda: self.engine.run_all(program, files))
            summary.scripts += 1
            return
        summary.scripts += self._guard(label, None, lambda: self.engine.run_each(program, files))

    # ------------------------------------------------------------------
    # Helpers

    @staticmethod
    def _check(config: ProcessorConfig) -> None:
        problems = validate_config(config)
        if problems:
            raise ConfigError("invalid configuration", problems)

    def _compile(self, source: Optional[str], label: str) -> ScriptProgram:
        assert source is not None
        return self._guard(label, None, lambda: self.engine.compile(source, name=f"{label}.script"))

    def _guard(self, label: str, item: Optional[str], action: Callable[[], Any]) -> Any:
        """Run ``action``, wrapping pipeline and I/O failures with processor context."""
        try:
            return action()
        except ProcessorError:
            raise
        except (PreprocError, OSError) as exc:
            self._log_exception(f"{label} failed", exc)
            item = getattr(exc, "item", None) or item
            raise ProcessorError(label, str(exc), item=item) from exc

    def _log_exception(self, message: str, exc: Exception) -> None:
        if self.logger.isEnabledFor(logging.DEBUG):
            self.logger.debug("%s: %s", message, exc, exc_info=exc)


__all__ = ["Orchestrator", "RunSummary"]
