"""Register reference extraction from a parsed source tree."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from .rules import access_flags, instruction_size_label, reference_size
from .syntax import (
    ADDRESS_REGISTER,
    DATA_REGISTER,
    INDEX,
    INSTRUCTION,
    NAMED_REGISTER,
    OPERAND_LIST,
    REGISTER_LIST,
    Node,
    Tree,
)

LOGGER = logging.getLogger("reginfo.extract")

DATA_REGISTERS: Tuple[str, ...] = tuple(f"d{idx}" for idx in range(8))
ADDRESS_REGISTERS: Tuple[str, ...] = tuple(f"a{idx}" for idx in range(8))
REGISTERS: Tuple[str, ...] = DATA_REGISTERS + ADDRESS_REGISTERS
STACK_POINTER_ALIAS = "sp"
STACK_POINTER = ADDRESS_REGISTERS[-1]

REGISTER_NODE_TYPES = (ADDRESS_REGISTER, DATA_REGISTER, NAMED_REGISTER)


@dataclass(frozen=True)
class RegisterReference:
    """One occurrence of a register in the source text."""

    start_index: int
    end_index: int
    line: int
    is_read: bool
    is_write: bool
    size: int

    def to_dict(self) -> Dict[str, object]:
        return {
            "start": self.start_index,
            "end": self.end_index,
            "line": self.line,
            "read": self.is_read,
            "write": self.is_write,
            "size": self.size,
        }


@dataclass
class OperandContext:
    """Facts gathered from the ancestors of a register node."""

    parents: List[str] = field(default_factory=list)
    is_dest: bool = False
    mnemonic: Optional[str] = None
    size: Optional[str] = None
    index_size: Optional[str] = None

    @property
    def in_register_list(self) -> bool:
        return REGISTER_LIST in self.parents

    @property
    def in_index(self) -> bool:
        return bool(self.parents) and self.parents[0] == INDEX

    @property
    def is_direct(self) -> bool:
        return (bool(self.parents) and self.parents[0] == OPERAND_LIST) or self.in_register_list


def canonical_name(node: Node) -> Optional[str]:
    """Canonical register name for a register node, or None to ignore it."""
    name = (node.text or "").lower()
    if node.type == NAMED_REGISTER:
        return STACK_POINTER if name == STACK_POINTER_ALIAS else None
    if name == STACK_POINTER_ALIAS:
        return STACK_POINTER
    return name if name in REGISTERS else None


def _text_of(node: Optional[Node]) -> Optional[str]:
    if node is None or not node.text:
        return None
    return node.text.lower()


def operand_context(node: Node) -> OperandContext:
    """Walk from ``node`` to the root collecting operand facts."""
    ctx = OperandContext()
    parent = node.parent
    if parent is not None and parent.type == INDEX:
        ctx.index_size = _text_of(parent.child_by_field_name("size"))
    while parent is not None:
        ctx.parents.append(parent.type)
        if parent.type == OPERAND_LIST:
            last = parent.last_child
            ctx.is_dest = last is not None and last.start_index == node.start_index
        elif parent.type == INSTRUCTION:
            ctx.mnemonic = _text_of(parent.child_by_field_name("mnemonic"))
            operands = parent.child_by_field_name("operands")
            dest = operands.last_child if operands is not None else None
            ctx.size = instruction_size_label(
                ctx.mnemonic,
                _text_of(parent.child_by_field_name("size")),
                is_dest=ctx.is_dest,
                dest_type=dest.type if dest is not None else None,
            )
        parent = parent.parent
    return ctx


def extract_references(tree: Tree) -> List[Tuple[str, RegisterReference]]:
    """Return ``(register, reference)`` pairs in document order."""
    found: List[Tuple[str, RegisterReference]] = []
    for node in tree.root_node.descendants_of_type(REGISTER_NODE_TYPES):
        name = canonical_name(node)
        if name is None:
            LOGGER.debug("ignoring register %r at line %d", node.text, node.start_point.row)
            continue
        ctx = operand_context(node)
        if ctx.in_register_list:
            LOGGER.debug("skipping %s in register list at line %d", name, node.start_point.row)
            continue
        is_read, is_write = access_flags(ctx.mnemonic, is_direct=ctx.is_direct, is_dest=ctx.is_dest)
        size = reference_size(
            ctx.size,
            is_direct=ctx.is_direct,
            in_index=ctx.in_index,
            index_size=ctx.index_size,
        )
        found.append(
            (
                name,
                RegisterReference(
                    start_index=node.start_index,
                    end_index=node.end_index,
                    line=node.start_point.row,
                    is_read=is_read,
                    is_write=is_write,
                    size=size,
                ),
            )
        )
    return found


def collect_references(tree: Tree) -> Dict[str, List[RegisterReference]]:
    """Group references by register; every canonical register has an entry."""
    usage: Dict[str, List[RegisterReference]] = {name: [] for name in REGISTERS}
    for name, ref in extract_references(tree):
        usage[name].append(ref)
    return usage


__all__ = [
    "REGISTERS",
    "DATA_REGISTERS",
    "ADDRESS_REGISTERS",
    "STACK_POINTER",
    "RegisterReference",
    "OperandContext",
    "canonical_name",
    "operand_context",
    "extract_references",
    "collect_references",
]
