"""Tests for hugo_preproc.shell."""

from __future__ import annotations

import io
import shutil
import subprocess
from pathlib import Path

import pytest

from hugo_preproc.errors import CommandError
from hugo_preproc.shell import ShellRunner

requires_sh = pytest.mark.skipif(shutil.which("sh") is None, reason="requires a POSIX shell")


def test_shell_runner_uses_sh_c_and_forwards_stdout() -> None:
    calls = []

    def runner(args, stream):  # type: ignore[no-untyped-def]
        calls.append(list(args))
        stream.write("built a.md\n")
        return subprocess.CompletedProcess(args, 0, stderr="")

    out = io.StringIO()
    shell = ShellRunner(runner=runner, stdout=out)

    assert shell.run("make a.md") == 0
    assert calls == [["sh", "-c", "make a.md"]]
    assert out.getvalue() == "built a.md\n"


def test_shell_runner_raises_on_non_zero_exit() -> None:
    def runner(args, stream):  # type: ignore[no-untyped-def]
        return subprocess.CompletedProcess(args, 3, stderr="first\nboom\n")

    shell = ShellRunner(runner=runner, stdout=io.StringIO())

    with pytest.raises(CommandError) as excinfo:
        shell.run("false")

    assert excinfo.value.returncode == 3
    assert "boom" in str(excinfo.value)


@requires_sh
def test_shell_runner_real_command(capsys: pytest.CaptureFixture[str]) -> None:
    shell = ShellRunner()

    shell.run("printf 'hello %s\\n' world")

    assert capsys.readouterr().out == "hello world\n"


@requires_sh
def test_shell_runner_streams_output_before_command_exits(tmp_path: Path) -> None:
    flag = tmp_path / "seen"

    class FlagOnFirstLine(io.StringIO):
        def write(self, text: str) -> int:
            if text == "started\n":
                flag.write_text("", encoding="utf-8")
            return super().write(text)

    out = FlagOnFirstLine()
    command = (
        "echo started; "
        "i=0; while [ ! -f seen ] && [ $i -lt 100 ]; do sleep 0.05; i=$((i+1)); done; "
        "if [ -f seen ]; then echo streamed; else echo buffered; fi"
    )

    ShellRunner(stdout=out).run(f"cd {str(tmp_path)!r} && {{ {command}; }}")

    assert out.getvalue() == "started\nstreamed\n"


@requires_sh
def test_shell_runner_real_failure_keeps_stderr() -> None:
    out = io.StringIO()

    with pytest.raises(CommandError) as excinfo:
        ShellRunner(stdout=out).run("echo partial; echo broken >&2; exit 4")

    assert out.getvalue() == "partial\n"
    assert excinfo.value.returncode == 4
    assert excinfo.value.stderr.strip() == "broken"
