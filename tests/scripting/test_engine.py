"""Tests for the script engine."""

from __future__ import annotations

from pathlib import Path

import pytest

from hugo_preproc.errors import ScriptError
from hugo_preproc.scripting import HostList, ScriptEngine


def test_file_and_files_are_always_declared() -> None:
    engine = ScriptEngine()
    program = engine.compile("seen = (file, len(files), bool(files))")

    namespace = engine.run(program)

    assert namespace["seen"] == (None, 0, False)


def test_run_binds_file_and_extra_values() -> None:
    engine = ScriptEngine()
    program = engine.compile("result = file.upper() + ':' + subject")

    namespace = engine.run(program, file="a.md", extra={"subject": "Hello"})

    assert namespace["result"] == "A.MD:Hello"


def test_runs_do_not_share_state() -> None:
    engine = ScriptEngine()
    program = engine.compile(
        "try:\n"
        "    counter += 1\n"
        "except NameError:\n"
        "    counter = 1\n"
    )

    first = engine.run(program, file="a")
    second = engine.run(program, file="b")

    assert first["counter"] == 1
    assert second["counter"] == 1


def test_run_each_writes_once_per_file(tmp_path: Path) -> None:
    engine = ScriptEngine()
    paths = []
    for name in ("a.md", "b.md"):
        path = tmp_path / name
        path.write_text(name, encoding="utf-8")
        paths.append(str(path))
    program = engine.compile(
        "import pathlib\n"
        "p = pathlib.Path(file)\n"
        "p.with_suffix('.out').write_text(p.read_text().upper())\n"
    )

    count = engine.run_each(program, paths)

    assert count == 2
    assert (tmp_path / "a.out").read_text() == "A.MD"
    assert (tmp_path / "b.out").read_text() == "B.MD"


def test_run_each_stops_at_first_failure(tmp_path: Path) -> None:
    engine = ScriptEngine()
    log = tmp_path / "log.txt"
    program = engine.compile(
        f"if file == 'bad':\n"
        f"    raise ValueError('broken ' + file)\n"
        f"open({str(log)!r}, 'a').write(file + '\\n')\n"
    )

    with pytest.raises(ScriptError) as excinfo:
        engine.run_each(program, ["one", "bad", "three"])

    assert "ValueError: broken bad" in str(excinfo.value)
    assert excinfo.value.item == "bad"
    assert isinstance(excinfo.value.__cause__, ValueError)
    assert log.read_text() == "one\n"


def test_run_all_binds_hostlist() -> None:
    engine = ScriptEngine()
    program = engine.compile(
        "captured = [(i, v) for i, v in files]\n"
        "position = files('b')\n"
        "combined = files + files\n"
    )

    seen = engine.run_all(program, ["a", "b"])

    assert seen["captured"] == [(0, "a"), (1, "b")]
    assert seen["position"] == 1
    assert seen["combined"] == HostList(["a", "b", "a", "b"])
    assert seen["file"] is None


def test_allowed_modules_import_and_others_fail() -> None:
    engine = ScriptEngine()

    namespace = engine.run(engine.compile("import json, os.path\nfrom re import sub\nout = json.dumps([1])"))
    assert namespace["out"] == "[1]"

    with pytest.raises(ScriptError) as excinfo:
        engine.run(engine.compile("import socket"))
    assert "not available to scripts" in str(excinfo.value)


def test_custom_module_table() -> None:
    engine = ScriptEngine(modules=["math"])

    assert engine.run(engine.compile("import math\nx = math.floor(2.5)"))["x"] == 2
    with pytest.raises(ScriptError):
        engine.run(engine.compile("import json"))


def test_compile_error_names_script_and_line() -> None:
    engine = ScriptEngine()

    with pytest.raises(ScriptError) as excinfo:
        engine.compile("x = 1\nif\n", name="exec[0].script")

    message = str(excinfo.value)
    assert message.startswith("script exec[0].script:")
    assert "line 2" in message


def test_system_exit_status() -> None:
    engine = ScriptEngine()

    engine.run(engine.compile("raise SystemExit(0)"))
    engine.run(engine.compile("raise SystemExit()"))
    with pytest.raises(ScriptError, match="exited with status 2"):
        engine.run(engine.compile("raise SystemExit(2)"))
