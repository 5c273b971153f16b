"""Syntax tree types shared by the parser and the analysis passes.

Nodes are a single tagged type keyed by ``type``; the analysis code only ever
checks type tags and named fields, so there is no per-node subclassing.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, NamedTuple, Optional

# Node type tags consumed by the register analysis.
ADDRESS_REGISTER = "address_register"
DATA_REGISTER = "data_register"
NAMED_REGISTER = "named_register"
FLOAT_REGISTER = "float_register"
OPERAND_LIST = "operand_list"
INSTRUCTION = "instruction"
DIRECTIVE = "directive"
INDEX = "idx"
REGISTER_LIST = "register_list"
REGISTER_RANGE = "register_range"

_SIZE_BYTES: Dict[str, int] = {"s": 1, "b": 1, "w": 2, "l": 4}
_SIZE_LABELS: Dict[int, str] = {1: "b", 2: "w", 4: "l"}


def get_size_bytes(label: Optional[str]) -> Optional[int]:
    """Map a size suffix (``b``, ``w``, ``l``, ``s``) to a byte count."""
    if not label:
        return None
    return _SIZE_BYTES.get(label.lower())


def get_size_label(size: Optional[int]) -> Optional[str]:
    if size is None:
        return None
    return _SIZE_LABELS.get(size)


class Point(NamedTuple):
    row: int
    column: int


@dataclass(eq=False)
class Node:
    """A positioned node in the concrete syntax tree."""

    type: str
    start_index: int
    end_index: int
    start_point: Point
    text: str
    children: List["Node"] = field(default_factory=list, repr=False)
    parent: Optional["Node"] = field(default=None, repr=False)
    _fields: Dict[str, "Node"] = field(default_factory=dict, repr=False)

    def append(self, child: "Node", field_name: Optional[str] = None) -> "Node":
        child.parent = self
        self.children.append(child)
        if field_name:
            self._fields[field_name] = child
        return child

    @property
    def last_child(self) -> Optional["Node"]:
        return self.children[-1] if self.children else None

    def child_by_field_name(self, name: str) -> Optional["Node"]:
        return self._fields.get(name)

    def descendants_of_type(self, types: Iterable[str] | str) -> List["Node"]:
        """Return matching descendants in document order."""
        wanted = {types} if isinstance(types, str) else set(types)
        found: List[Node] = []
        stack = list(reversed(self.children))
        while stack:
            node = stack.pop()
            if node.type in wanted:
                found.append(node)
            stack.extend(reversed(node.children))
        return found


@dataclass(eq=False)
class Tree:
    text: str
    root_node: Node


__all__ = [
    "ADDRESS_REGISTER",
    "DATA_REGISTER",
    "NAMED_REGISTER",
    "FLOAT_REGISTER",
    "OPERAND_LIST",
    "INSTRUCTION",
    "DIRECTIVE",
    "INDEX",
    "REGISTER_LIST",
    "REGISTER_RANGE",
    "Point",
    "Node",
    "Tree",
    "get_size_bytes",
    "get_size_label",
]
