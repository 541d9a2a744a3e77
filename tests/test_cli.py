"""CLI parser and entrypoint behaviour tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from hugo_preproc import __version__
from hugo_preproc.cli import _build_parser, main


def test_cli_defaults() -> None:
    args = _build_parser().parse_args([])

    assert args.config is None
    assert args.verbose is False
    assert args.log_file is None


def test_cli_accepts_config_and_debug_alias() -> None:
    args = _build_parser().parse_args(["--config", "site/.hugo-preproc.yaml", "--debug"])

    assert args.config == Path("site/.hugo-preproc.yaml")
    assert args.verbose is True


def test_cli_short_flags() -> None:
    args = _build_parser().parse_args(["-c", "conf.yaml", "-v"])

    assert args.config == Path("conf.yaml")
    assert args.verbose is True


def test_cli_version(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["--version"])

    assert excinfo.value.code == 0
    assert __version__ in capsys.readouterr().out


def test_main_runs_configured_exec(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    (tmp_path / "a.md").write_text("", encoding="utf-8")
    marker = tmp_path / "ran.txt"
    config_file = tmp_path / ".hugo-preproc.yaml"
    config_file.write_text(
        f"""
exec:
  - path: {tmp_path}
    pattern: "*.md"
    script: |
      open({str(marker)!r}, "w").write(file)
""",
        encoding="utf-8",
    )

    main(["--config", str(config_file), "--log-file", str(tmp_path / "logs" / "run.log")])

    assert marker.read_text(encoding="utf-8") == str(tmp_path / "a.md")
    assert "Finished" in (tmp_path / "logs" / "run.log").read_text(encoding="utf-8")


def test_main_reports_config_conflicts(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    config_file = tmp_path / "conf.yaml"
    config_file.write_text(
        """
git:
  - processors:
      - mode: head
        file: a.md
        template: x
        script: y
""",
        encoding="utf-8",
    )

    with pytest.raises(SystemExit) as excinfo:
        main(["-c", str(config_file)])

    assert excinfo.value.code == 1
    err = capsys.readouterr().err
    assert "hugo-preproc: error:" in err
    assert "config conflict; both template and script defined" in err


def test_main_reports_missing_config(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["-c", str(tmp_path / "absent.yaml")])

    assert excinfo.value.code == 1
    assert "config file not found" in capsys.readouterr().err
