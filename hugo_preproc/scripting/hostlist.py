"""List of strings handed from the host into scripts."""

from __future__ import annotations

import enum
from typing import Any, Iterable, Iterator, List, Optional, Tuple


class Capability(enum.Flag):
    """Operations a host value supports inside a script."""

    NONE = 0
    ARITHMETIC = enum.auto()
    INDEX = enum.auto()
    ITERATE = enum.auto()
    CALL = enum.auto()


def supports(value: Any, capability: Capability) -> bool:
    """Return True when ``value`` declares ``capability`` in its capability table."""
    declared = getattr(value, "capabilities", Capability.NONE)
    return isinstance(declared, Capability) and capability in declared


def _to_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, (bool, int, float)):
        return str(value)
    return None


class HostList:
    """Ordered strings with list semantics bridged into the script runtime.

    ``a + b`` concatenates (``b`` must be a HostList); ``files[i]`` reads and
    writes by position, with no negative indexing; ``files["x"]`` and
    ``files("x")`` look up the position of a value (``None`` when absent);
    iteration yields ``(position, value)`` pairs; an empty list is falsy.
    """

    type_name = "string-array"
    capabilities = Capability.ARITHMETIC | Capability.INDEX | Capability.ITERATE | Capability.CALL

    __slots__ = ("_values",)

    def __init__(self, values: Iterable[Any] = ()) -> None:
        self._values: List[str] = [str(value) for value in values]

    @property
    def values(self) -> List[str]:
        return list(self._values)

    def copy(self) -> "HostList":
        return HostList(self._values)

    # arithmetic

    def __add__(self, other: object) -> "HostList":
        if not isinstance(other, HostList):
            return NotImplemented
        if not other._values:
            return self
        return HostList(self._values + other._values)

    # index

    def __getitem__(self, index: object) -> Optional[Any]:
        if isinstance(index, int) and not isinstance(index, bool):
            self._check_bounds(index)
            return self._values[index]
        if isinstance(index, str):
            return self._position(index)
        raise TypeError(f"invalid index type for {self.type_name}: {type(index).__name__}")

    def __setitem__(self, index: object, value: object) -> None:
        text = _to_str(value)
        if text is None:
            raise TypeError(f"invalid index value type for {self.type_name}: {type(value).__name__}")
        if isinstance(index, int) and not isinstance(index, bool):
            self._check_bounds(index)
            self._values[index] = text
            return
        raise TypeError(f"invalid index type for {self.type_name}: {type(index).__name__}")

    # call

    def __call__(self, *args: Any) -> Optional[int]:
        if len(args) != 1:
            raise TypeError(f"{self.type_name} lookup takes exactly 1 argument ({len(args)} given)")
        text = _to_str(args[0])
        if text is None:
            raise TypeError(f"invalid argument type for {self.type_name} lookup: expected string, found {type(args[0]).__name__}")
        return self._position(text)

    # iterate

    def __iter__(self) -> Iterator[Tuple[int, str]]:
        for position, value in enumerate(self._values):
            yield position, value

    def __contains__(self, value: object) -> bool:
        return value in self._values

    def __len__(self) -> int:
        return len(self._values)

    def __bool__(self) -> bool:
        return bool(self._values)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HostList):
            return False
        return self._values == other._values

    __hash__ = None  # type: ignore[assignment]

    def __str__(self) -> str:
        return ", ".join(self._values)

    def __repr__(self) -> str:
        return f"HostList({self._values!r})"

    def _check_bounds(self, index: int) -> None:
        if not 0 <= index < len(self._values):
            raise IndexError(f"{self.type_name} index out of bounds: {index}")

    def _position(self, value: str) -> Optional[int]:
        try:
            return self._values.index(value)
        except ValueError:
            return None


__all__ = ["Capability", "HostList", "supports"]
