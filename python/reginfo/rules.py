"""Operand size and access direction rules for 68k mnemonics.

The tables are static lookup data consulted once per register occurrence.
Sizes are handled as suffix labels (``b``/``w``/``l``) until the final
conversion to bytes in :func:`reference_size`.
"""

from __future__ import annotations

from typing import FrozenSet, Optional, Tuple

from .syntax import DATA_REGISTER, get_size_bytes

# Operand size is word unless the mnemonic is listed below.
LONG_DEFAULT: FrozenSet[str] = frozenset({"moveq", "exg", "lea", "pea"})
BYTE_DEFAULT: FrozenSet[str] = frozenset(
    {
        "nbcd", "abcd", "sbcd", "tas",
        "scc", "scs", "seq", "sge", "sgt", "shi", "sle", "slt", "smi", "sne",
        "spl", "svc", "svs", "st", "sf", "sls", "shs", "slo",
    }
)
# Long when the destination is a data register, byte for memory.
BIT_OPS: FrozenSet[str] = frozenset({"bchg", "bset", "bclr", "btst"})
DIVIDE_OPS: FrozenSet[str] = frozenset({"divs", "divu"})

# The destination operand is read and written, except for these.
READ_ONLY_DEST: FrozenSet[str] = frozenset({"tst", "cmp", "cmpa", "cmpi", "cmpm", "btst"})
WRITE_ONLY_DEST: FrozenSet[str] = frozenset({"lea", "move", "moveq", "movem", "movea"})

DEFAULT_SIZE_BYTES = 2


def default_size_label(mnemonic: str, *, is_dest: bool, dest_type: Optional[str]) -> str:
    """Size implied by a mnemonic written without a size suffix."""
    if mnemonic in LONG_DEFAULT:
        return "l"
    if mnemonic in BYTE_DEFAULT:
        return "b"
    if mnemonic in BIT_OPS:
        return "l" if is_dest and dest_type == DATA_REGISTER else "b"
    return "w"


def instruction_size_label(
    mnemonic: Optional[str],
    explicit: Optional[str],
    *,
    is_dest: bool,
    dest_type: Optional[str] = None,
) -> Optional[str]:
    """Resolve the operation size of an instruction for one operand.

    An explicit suffix wins over the mnemonic defaults.  The destination of a
    divide always holds the 32-bit dividend, whatever the suffix says.
    """
    if not mnemonic:
        return explicit or None
    size = explicit or default_size_label(mnemonic, is_dest=is_dest, dest_type=dest_type)
    if mnemonic in DIVIDE_OPS and is_dest:
        size = "l"
    return size


def access_flags(mnemonic: Optional[str], *, is_direct: bool, is_dest: bool) -> Tuple[bool, bool]:
    """Return ``(is_read, is_write)`` for a register occurrence."""
    if not (is_direct and is_dest and mnemonic):
        return True, False
    if mnemonic in READ_ONLY_DEST:
        return True, False
    if mnemonic in WRITE_ONLY_DEST:
        return False, True
    return True, True


def reference_size(
    op_size: Optional[str],
    *,
    is_direct: bool,
    in_index: bool = False,
    index_size: Optional[str] = None,
) -> int:
    """Width in bytes of one register occurrence.

    Registers used to form an address are long, except index registers which
    take the index size suffix and default to word.
    """
    size = op_size if is_direct else "l"
    if in_index:
        size = index_size or "w"
    return get_size_bytes(size) or DEFAULT_SIZE_BYTES


__all__ = [
    "LONG_DEFAULT",
    "BYTE_DEFAULT",
    "BIT_OPS",
    "DIVIDE_OPS",
    "READ_ONLY_DEST",
    "WRITE_ONLY_DEST",
    "DEFAULT_SIZE_BYTES",
    "default_size_label",
    "instruction_size_label",
    "access_flags",
    "reference_size",
]
