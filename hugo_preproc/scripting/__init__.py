"""Embedded script execution."""

from .engine import STANDARD_MODULES, ScriptEngine, ScriptProgram
from .hostlist import Capability, HostList, supports

__all__ = [
    "STANDARD_MODULES",
    "Capability",
    "HostList",
    "ScriptEngine",
    "ScriptProgram",
    "supports",
]
