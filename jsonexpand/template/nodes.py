"""
Compiled template nodes.

A compiled template is a tree of these nodes. Nodes are frozen so a compiled
template can be shared between expansions.
"""

from dataclasses import dataclass
from typing import Any, Tuple, Union, TYPE_CHECKING

if TYPE_CHECKING:
    from .engine import Program


@dataclass(frozen=True)
class Literal:
    """A boolean, a number (always float) or an opaque pass-through value."""

    value: Any


@dataclass(frozen=True)
class Expression:
    """A compiled expression leaf."""

    program: "Program"

    @property
    def source(self) -> str:
        return self.program.source


@dataclass(frozen=True)
class ObjectNode:
    """An object; entries keep the order they had in the template."""

    entries: Tuple[Tuple[str, "CompiledNode"], ...]

    def keys(self) -> Tuple[str, ...]:
        return tuple(key for key, _ in self.entries)


@dataclass(frozen=True)
class ListNode:
    """An array of compiled nodes."""

    items: Tuple["CompiledNode", ...]


CompiledNode = Union[Literal, Expression, ObjectNode, ListNode]
