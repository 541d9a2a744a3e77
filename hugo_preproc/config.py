"""Configuration loading for hugo-preproc (.hugo-preproc.yaml)."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple, Type, TypeVar

import yaml

from .errors import ConfigError
from .logging import get_logger

CONFIG_BASENAME = ".hugo-preproc"
CONFIG_SUFFIXES: Tuple[str, ...] = (".yaml", ".yml", ".json", ".toml")

_logger = get_logger("config")

_ModeT = TypeVar("_ModeT", bound=Enum)


class GitMode(str, Enum):
    """How a git processor walks the repository history."""

    HEAD = "head"
    EACH = "each"
    ALL = "all"


class ExecMode(str, Enum):
    """How a script exec processor receives the matched files."""

    EACH = "each"
    ALL = "all"


@dataclass(frozen=True)
class GitProcessor:
    """A single output rule applied to a repository's history."""

    mode: GitMode
    file: str = ""
    template: Optional[str] = None
    script: Optional[str] = None

    @property
    def uses_script(self) -> bool:
        return bool(self.script)


@dataclass(frozen=True)
class GitSource:
    """A repository and the processors that run against it, in order."""

    path: str = "."
    processors: Tuple[GitProcessor, ...] = ()


@dataclass(frozen=True)
class ExecSource:
    """Files matched under a root and the command or script applied to them."""

    path: str
    pattern: str
    command: Optional[str] = None
    script: Optional[str] = None
    mode: ExecMode = ExecMode.EACH

    @property
    def uses_script(self) -> bool:
        return bool(self.script)


@dataclass(frozen=True)
class ProcessorConfig:
    """Validated, read-only configuration for one pipeline run."""

    gits: Tuple[GitSource, ...] = ()
    execs: Tuple[ExecSource, ...] = ()
    source: Optional[Path] = field(default=None, compare=False)


def load_config(
    config_path: Path | str | None = None,
    *,
    search_dirs: Sequence[Path] | None = None,
) -> ProcessorConfig:
    """Locate, read and validate the configuration file."""
    if config_path is not None:
        config_file = Path(config_path).expanduser()
        if not config_file.is_file():
            raise ConfigError(f"config file not found: {config_file}")
    else:
        config_file = find_config_file(search_dirs)
        if config_file is None:
            raise ConfigError(
                f"no {CONFIG_BASENAME}{{{','.join(CONFIG_SUFFIXES)}}} found in search path"
            )

    config_file = config_file.resolve()
    _logger.info("Using config file: %s", config_file)
    data = _read_config(config_file)
    return parse_config(data, base_dir=config_file.parent, source=config_file)


def find_config_file(search_dirs: Sequence[Path] | None = None) -> Path | None:
    """Return the first config file found in the search directories."""
    if search_dirs is None:
        search_dirs = _default_search_dirs()
    for directory in search_dirs:
        for suffix in CONFIG_SUFFIXES:
            candidate = directory / f"{CONFIG_BASENAME}{suffix}"
            _logger.debug("Checking for config file %s", candidate)
            if candidate.is_file():
                return candidate
    return None


def parse_config(
    data: Any,
    *,
    base_dir: Path | None = None,
    source: Path | None = None,
) -> ProcessorConfig:
    """Build a ProcessorConfig from a decoded mapping, reporting every problem at once."""
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError("configuration root must be a mapping")

    base = base_dir or Path.cwd()
    problems: List[str] = []

    gits: List[GitSource] = []
    for i, entry in enumerate(_as_list(data.get("git"), "git", problems)):
        where = f"git[{i}]"
        if not isinstance(entry, dict):
            problems.append(f"{where}: expected a mapping")
            continue
        processors: List[GitProcessor] = []
        for j, raw in enumerate(_as_list(entry.get("processors"), f"{where}.processors", problems)):
            processor = _build_git_processor(raw, f"{where}.processors[{j}]", base, problems)
            if processor is not None:
                processors.append(processor)
        gits.append(GitSource(path=_as_str(entry.get("path")) or ".", processors=tuple(processors)))

    execs: List[ExecSource] = []
    for i, entry in enumerate(_as_list(data.get("exec"), "exec", problems)):
        exec_source = _build_exec_source(entry, f"exec[{i}]", base, problems)
        if exec_source is not None:
            execs.append(exec_source)

    config = ProcessorConfig(gits=tuple(gits), execs=tuple(execs), source=source)
    if problems:
        raise ConfigError("invalid configuration", problems)
    return config


def validate_config(config: ProcessorConfig) -> List[str]:
    """Return every conflict or missing option in a configuration built in code."""
    problems: List[str] = []
    for i, git in enumerate(config.gits):
        for j, processor in enumerate(git.processors):
            problems.extend(
                _git_processor_problems(
                    f"git[{i}].processors[{j}]",
                    file=processor.file,
                    template=processor.template,
                    script=processor.script,
                )
            )
    for i, exec_source in enumerate(config.execs):
        problems.extend(
            _exec_source_problems(
                f"exec[{i}]",
                pattern=exec_source.pattern,
                command=exec_source.command,
                script=exec_source.script,
            )
        )
    return problems


# ----------------------------------------------------------------------
# Internals


def _default_search_dirs() -> List[Path]:
    dirs: List[Path] = []
    try:
        dirs.append(Path.home())
    except RuntimeError:
        _logger.info("No home directory found; looking for config file only in current directory.")
    dirs.append(Path.cwd())
    return dirs


def _read_config(path: Path) -> Dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"error reading config file {path}: {exc}") from exc
    if not text.strip():
        return {}

    try:
        if path.suffix == ".toml":
            loaded = tomllib.loads(text)
        else:
            loaded = yaml.safe_load(text)
    except (yaml.YAMLError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"error processing config file {path.name}: {exc}") from exc
    return loaded or {}


def _git_processor_problems(
    where: str, *, file: str, template: Optional[str], script: Optional[str]
) -> List[str]:
    problems: List[str] = []
    if template and script:
        problems.append(f"{where}: config conflict; both template and script defined")
    elif not template and not script:
        problems.append(f"{where}: one of template or script is required")
    if template and not file:
        problems.append(f"{where}: file is required when template is defined")
    return problems


def _exec_source_problems(
    where: str, *, pattern: str, command: Optional[str], script: Optional[str]
) -> List[str]:
    problems: List[str] = []
    if command and script:
        problems.append(f"{where}: config conflict; both command and script defined")
    elif not command and not script:
        problems.append(f"{where}: one of command or script is required")
    if not pattern:
        problems.append(f"{where}: pattern is required")
    return problems


def _build_git_processor(
    raw: Any, where: str, base: Path, problems: List[str]
) -> Optional[GitProcessor]:
    if not isinstance(raw, dict):
        problems.append(f"{where}: expected a mapping")
        return None
    mode = _parse_mode(GitMode, raw.get("mode"), where, problems, default=None)
    file = _as_str(raw.get("file")) or ""
    template = _as_str(raw.get("template")) or None
    script = _resolve_script(raw, where, base, problems)
    problems.extend(_git_processor_problems(where, file=file, template=template, script=script))
    if mode is None:
        return None
    return GitProcessor(mode=mode, file=file, template=template, script=script)


def _build_exec_source(
    raw: Any, where: str, base: Path, problems: List[str]
) -> Optional[ExecSource]:
    if not isinstance(raw, dict):
        problems.append(f"{where}: expected a mapping")
        return None
    mode = _parse_mode(ExecMode, raw.get("mode"), where, problems, default=ExecMode.EACH)
    pattern = _as_str(raw.get("pattern")) or ""
    command = _as_str(raw.get("command")) or None
    script = _resolve_script(raw, where, base, problems)
    problems.extend(_exec_source_problems(where, pattern=pattern, command=command, script=script))
    if mode is None:
        return None
    return ExecSource(
        path=_as_str(raw.get("path")) or ".",
        pattern=pattern,
        command=command,
        script=script,
        mode=mode,
    )


def _parse_mode(
    enum_type: Type[_ModeT],
    value: Any,
    where: str,
    problems: List[str],
    *,
    default: Optional[_ModeT],
) -> Optional[_ModeT]:
    text = _as_str(value)
    if not text:
        if default is None:
            choices = "/".join(member.value for member in enum_type)
            problems.append(f"{where}: mode is required; should be {choices}")
        return default
    try:
        return enum_type(text.strip().lower())
    except ValueError:
        choices = "/".join(member.value for member in enum_type)
        problems.append(f"{where}: invalid mode {text!r}; should be {choices}")
        return None


def _resolve_script(raw: Dict[str, Any], where: str, base: Path, problems: List[str]) -> Optional[str]:
    inline = _as_str(raw.get("script")) or None
    script_file = _as_str(raw.get("script_file"))
    if not script_file:
        return inline
    if inline:
        problems.append(f"{where}: config conflict; both script and script_file defined")
        return inline
    path = (base / script_file).expanduser()
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        problems.append(f"{where}: cannot read script_file {path}: {exc}")
        return None


def _as_list(value: Any, where: str, problems: List[str]) -> List[Any]:
    if value is None:
        return []
    if isinstance(value, list):
        return value
    problems.append(f"{where}: expected a list")
    return []


def _as_str(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return str(value).lower()
    return str(value) if isinstance(value, (str, int, float)) else None


__all__ = [
    "CONFIG_BASENAME",
    "ExecMode",
    "ExecSource",
    "GitMode",
    "GitProcessor",
    "GitSource",
    "ProcessorConfig",
    "find_config_file",
    "load_config",
    "parse_config",
    "validate_config",
]
