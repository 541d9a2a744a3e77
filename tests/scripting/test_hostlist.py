"""Tests for the host string list bridged into scripts."""

from __future__ import annotations

import pytest

from hugo_preproc.scripting import Capability, HostList, supports


def test_hostlist_declares_every_capability() -> None:
    files = HostList(["a"])

    for capability in (Capability.ARITHMETIC, Capability.INDEX, Capability.ITERATE, Capability.CALL):
        assert supports(files, capability)
    assert not supports("plain", Capability.INDEX)
    assert files.type_name == "string-array"


def test_equality_is_element_wise() -> None:
    assert HostList(["a", "b"]) == HostList(["a", "b"])
    assert HostList(["a", "b"]) != HostList(["b", "a"])
    assert HostList(["a"]) != ["a"]
    assert HostList() == HostList([])


def test_concatenation_returns_new_list() -> None:
    left = HostList(["a"])
    right = HostList(["b", "c"])

    combined = left + right

    assert combined == HostList(["a", "b", "c"])
    assert left == HostList(["a"])
    assert right == HostList(["b", "c"])


def test_concatenating_empty_list_is_a_no_op() -> None:
    files = HostList(["a"])

    assert (files + HostList()) is files


def test_concatenation_with_other_types_is_unsupported() -> None:
    with pytest.raises(TypeError):
        HostList(["a"]) + ["b"]  # type: ignore[operator]


def test_index_read_and_write() -> None:
    files = HostList(["a.md", "b.md"])

    assert files[1] == "b.md"
    files[0] = "c.md"
    files[1] = 7
    assert files.values == ["c.md", "7"]


def test_index_out_of_bounds_and_negative_indexes_fail() -> None:
    files = HostList(["a"])

    with pytest.raises(IndexError):
        files[1]
    with pytest.raises(IndexError):
        files[-1]
    with pytest.raises(IndexError):
        files[2] = "x"


def test_index_type_errors() -> None:
    files = HostList(["a"])

    with pytest.raises(TypeError):
        files[1.5]  # type: ignore[index]
    with pytest.raises(TypeError):
        files[True]  # type: ignore[index]
    with pytest.raises(TypeError):
        files[0] = object()
    with pytest.raises(TypeError):
        files["a"] = "b"


def test_string_index_and_call_look_up_positions() -> None:
    files = HostList(["a.md", "b.md"])

    assert files["b.md"] == 1
    assert files["zzz"] is None
    assert files("a.md") == 0
    assert files("missing") is None
    with pytest.raises(TypeError):
        files()
    with pytest.raises(TypeError):
        files("a", "b")
    with pytest.raises(TypeError):
        files(["a"])


def test_iteration_yields_position_value_pairs() -> None:
    files = HostList(["a", "b"])

    assert list(files) == [(0, "a"), (1, "b")]
    assert [value for _, value in files] == ["a", "b"]


def test_truthiness_length_and_membership() -> None:
    assert not HostList()
    assert HostList(["x"])
    assert len(HostList(["x", "y"])) == 2
    assert "y" in HostList(["x", "y"])


def test_values_and_copy_are_independent() -> None:
    files = HostList(["a"])
    snapshot = files.values
    clone = files.copy()

    snapshot.append("b")
    clone[0] = "z"

    assert files == HostList(["a"])
    assert clone == HostList(["z"])


def test_string_forms() -> None:
    files = HostList(["a", "b"])

    assert str(files) == "a, b"
    assert repr(files) == "HostList(['a', 'b'])"


def test_hostlist_is_unhashable() -> None:
    with pytest.raises(TypeError):
        hash(HostList())
